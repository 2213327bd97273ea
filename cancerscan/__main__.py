"""Entry point for running the CancerScan FastAPI service via `python -m cancerscan`."""

from __future__ import annotations

import logging

import uvicorn

from .config import settings


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "cancerscan.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level,
    )

"""Construction of prediction records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from ..schemas import PredictionRecord
from .decision import Decision


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. ``2024-05-01T10:00:00.000Z``."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_prediction_record(decision: Decision) -> PredictionRecord:
    return PredictionRecord(
        id=str(uuid.uuid4()),
        result=decision.result,
        suggestion=decision.suggestion,
        created_at=utc_timestamp(),
    )

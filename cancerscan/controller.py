"""Per-request orchestration of the prediction and history endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from .context import ServiceContext
from .errors import ErrorKind, PredictionError
from .schemas import HistoryEntry, PredictionRecord
from .services.decision import decide
from .services.history import StoreError
from .services.records import build_prediction_record
from .utils.image import DecodeError, load_and_preprocess_image

LOGGER = logging.getLogger(__name__)


class PredictionController:
    """Runs uploads through preprocessing, scoring, decision and persistence.

    Every failure is raised as ``PredictionError``; a record is only returned
    once it has been persisted.
    """

    def __init__(self, context: ServiceContext):
        self._context = context

    async def _read_upload(self, upload: Optional[UploadFile]) -> bytes:
        if upload is None:
            raise PredictionError(ErrorKind.EMPTY_INPUT, "No file uploaded.")

        # The declared media type is judged before any bytes are read.
        if not (upload.content_type or "").startswith("image/"):
            raise PredictionError(
                ErrorKind.INVALID_MEDIA_TYPE, f"Unsupported content type {upload.content_type!r}."
            )

        limit = self._context.settings.max_upload_bytes
        # One byte past the limit is enough to tell an oversized upload apart.
        payload = await upload.read(limit + 1)
        if len(payload) > limit:
            raise PredictionError(ErrorKind.UPLOAD_TOO_LARGE, f"Upload exceeds {limit} bytes.")
        if not payload:
            raise PredictionError(ErrorKind.EMPTY_INPUT, "Uploaded file is empty.")
        return payload

    async def predict(self, upload: Optional[UploadFile]) -> PredictionRecord:
        payload = await self._read_upload(upload)

        model = self._context.model
        if not model.is_ready:
            raise PredictionError(ErrorKind.MODEL_NOT_READY, "Model is still loading or failed to load.")

        try:
            batch = await run_in_threadpool(load_and_preprocess_image, payload)
        except DecodeError as exc:
            LOGGER.exception("Could not decode uploaded image: %s", exc)
            raise PredictionError(ErrorKind.DECODE_ERROR, str(exc)) from exc
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Preprocessing failed: %s", exc)
            raise PredictionError(ErrorKind.UNEXPECTED, str(exc)) from exc

        try:
            probability = await run_in_threadpool(model.score, batch)
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Inference failed: %s", exc)
            raise PredictionError(ErrorKind.INFERENCE_ERROR, str(exc)) from exc

        try:
            record = build_prediction_record(decide(probability))
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Could not build prediction record: %s", exc)
            raise PredictionError(ErrorKind.UNEXPECTED, str(exc)) from exc

        try:
            await self._context.store.append(record)
        except StoreError as exc:
            LOGGER.exception("Discarding prediction %s, persistence failed: %s", record.id, exc)
            raise PredictionError(ErrorKind.STORE_WRITE_ERROR, str(exc)) from exc
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Discarding prediction %s after unexpected error: %s", record.id, exc)
            raise PredictionError(ErrorKind.UNEXPECTED, str(exc)) from exc

        LOGGER.info(
            "Prediction %s: probability=%.4f result=%s", record.id, probability, record.result.value
        )
        return record

    async def histories(self) -> List[HistoryEntry]:
        try:
            stored = await self._context.store.list_all()
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Error fetching histories: %s", exc)
            raise PredictionError(ErrorKind.STORE_READ_ERROR, str(exc)) from exc

        return [HistoryEntry(id=entry.storage_id, history=entry.record) for entry in stored]

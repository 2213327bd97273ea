"""Failure kinds surfaced by the API and their user-facing responses."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from .schemas import FailureResponse

PREDICTION_FAILED_MESSAGE = "Terjadi kesalahan dalam melakukan prediksi."


class ErrorKind(str, Enum):
    UPLOAD_TOO_LARGE = "upload_too_large"
    INVALID_MEDIA_TYPE = "invalid_media_type"
    EMPTY_INPUT = "empty_input"
    MODEL_NOT_READY = "model_not_ready"
    DECODE_ERROR = "decode_error"
    INFERENCE_ERROR = "inference_error"
    STORE_WRITE_ERROR = "store_write_error"
    STORE_READ_ERROR = "store_read_error"
    UNEXPECTED = "unexpected"
    SERVER_ERROR = "server_error"


class PredictionError(Exception):
    """Raised by the request controller to end a request with a failure response."""

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


_RESPONSES = {
    ErrorKind.INVALID_MEDIA_TYPE: (400, "fail", "File harus berupa gambar."),
    ErrorKind.EMPTY_INPUT: (400, "fail", "Tidak ada file yang diunggah atau file kosong."),
    ErrorKind.MODEL_NOT_READY: (500, "fail", "Model belum siap untuk digunakan."),
    ErrorKind.DECODE_ERROR: (400, "fail", PREDICTION_FAILED_MESSAGE),
    ErrorKind.INFERENCE_ERROR: (400, "fail", PREDICTION_FAILED_MESSAGE),
    ErrorKind.STORE_WRITE_ERROR: (400, "fail", PREDICTION_FAILED_MESSAGE),
    ErrorKind.UNEXPECTED: (400, "fail", PREDICTION_FAILED_MESSAGE),
    ErrorKind.STORE_READ_ERROR: (
        500,
        "error",
        "Terjadi kesalahan saat mengambil data riwayat prediksi.",
    ),
    ErrorKind.SERVER_ERROR: (500, "error", "Terjadi kesalahan pada server."),
}


def describe_error(kind: ErrorKind, max_upload_bytes: int) -> Tuple[int, FailureResponse]:
    """Map an error kind to its HTTP status code and response body."""

    if kind is ErrorKind.UPLOAD_TOO_LARGE:
        limit_mb = max_upload_bytes / (1024 * 1024)
        return 413, FailureResponse(
            status="fail", message=f"Ukuran file melebihi batas maksimal: {limit_mb:g}MB"
        )

    status_code, status, message = _RESPONSES[kind]
    return status_code, FailureResponse(status=status, message=message)

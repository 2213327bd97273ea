"""Pydantic schemas shared across the CancerScan inference API."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .services.decision import Verdict


class PredictionRecord(BaseModel):
    """A single completed prediction, as returned to callers and persisted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Unique identifier generated for this prediction.")
    result: Verdict = Field(..., description="Categorical verdict derived from the model score.")
    suggestion: str = Field(..., description="Advisory text determined by the verdict.")
    created_at: str = Field(
        ..., alias="createdAt", description="ISO-8601 UTC timestamp of record creation."
    )

    def to_document(self) -> dict:
        """Serialise using the wire field names, as stored in the history backend."""

        return self.model_dump(mode="json", by_alias=True)


class PredictionResponse(BaseModel):
    """Response payload returned by a successful ``POST /predict``."""

    status: Literal["success"] = "success"
    message: str = "Prediksi berhasil dilakukan"
    data: PredictionRecord


class HistoryEntry(BaseModel):
    """One stored prediction, keyed by the identifier assigned by the store."""

    id: str = Field(..., description="Identifier assigned by the history store.")
    history: PredictionRecord


class HistoriesResponse(BaseModel):
    """Response payload returned by ``GET /predict/histories``."""

    status: Literal["success"] = "success"
    data: List[HistoryEntry]


class FailureResponse(BaseModel):
    """Body returned for every failed request."""

    status: Literal["fail", "error"]
    message: str


class HealthResponse(BaseModel):
    """Simple health response for uptime checks."""

    status: str = Field(..., description="Overall service status indicator.")
    model_loaded: bool = Field(..., description="Whether the classifier is loaded and ready.")

"""Persistence of prediction records.

Records are written once and only ever read back through ``list_all``. The
store assigns its own identifier to every record; it is distinct from the
record's ``id`` field. Listing order is whatever the backend yields.
"""

from __future__ import annotations

import abc
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from pydantic import ValidationError

from ..config import Settings
from ..schemas import PredictionRecord

LOGGER = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the history backend fails to read or write records."""


class StoredPrediction(NamedTuple):
    storage_id: str
    record: PredictionRecord


class HistoryStore(abc.ABC):
    """Append-only store of prediction records."""

    @abc.abstractmethod
    async def append(self, record: PredictionRecord) -> None:
        """Persist one record or raise ``StoreError``."""

    @abc.abstractmethod
    async def list_all(self) -> List[StoredPrediction]:
        """Return every persisted record or raise ``StoreError``."""


class InMemoryHistoryStore(HistoryStore):
    """Process-local store, used for local runs and tests."""

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def append(self, record: PredictionRecord) -> None:
        self._documents[uuid.uuid4().hex] = record.to_document()

    async def list_all(self) -> List[StoredPrediction]:
        return [
            StoredPrediction(storage_id, PredictionRecord.model_validate(document))
            for storage_id, document in self._documents.items()
        ]


class FirestoreHistoryStore(HistoryStore):
    """Stores each record as a document in a Firestore collection.

    The client is created on first use so that constructing the store never
    requires credentials.
    """

    def __init__(
        self,
        collection: str,
        project_id: Optional[str] = None,
        database_id: Optional[str] = None,
        credentials_path: Optional[Path] = None,
        client: Optional[firestore.AsyncClient] = None,
    ) -> None:
        self._collection = collection
        self._project_id = project_id
        self._database_id = database_id
        self._credentials_path = credentials_path
        self._client = client

    def _get_client(self) -> firestore.AsyncClient:
        if self._client is None:
            kwargs: Dict[str, Any] = {"project": self._project_id}
            if self._database_id:
                kwargs["database"] = self._database_id
            if self._credentials_path:
                self._client = firestore.AsyncClient.from_service_account_json(
                    str(self._credentials_path), **kwargs
                )
            else:
                self._client = firestore.AsyncClient(**kwargs)
        return self._client

    async def append(self, record: PredictionRecord) -> None:
        try:
            _, document = await self._get_client().collection(self._collection).add(
                record.to_document()
            )
        except (GoogleAPIError, GoogleAuthError) as exc:
            raise StoreError(f"Failed to store prediction {record.id}: {exc}") from exc
        LOGGER.info("Stored prediction %s as document %s", record.id, document.id)

    async def list_all(self) -> List[StoredPrediction]:
        entries: List[StoredPrediction] = []
        try:
            async for snapshot in self._get_client().collection(self._collection).stream():
                entries.append(
                    StoredPrediction(snapshot.id, PredictionRecord.model_validate(snapshot.to_dict()))
                )
        except (GoogleAPIError, GoogleAuthError) as exc:
            raise StoreError(f"Failed to list predictions: {exc}") from exc
        except ValidationError as exc:
            raise StoreError(f"Stored prediction has an unexpected layout: {exc}") from exc
        return entries


def build_history_store(config: Settings) -> HistoryStore:
    """Instantiate the history backend selected in the configuration."""

    if config.history_backend == "memory":
        LOGGER.info("Using in-memory prediction history")
        return InMemoryHistoryStore()

    LOGGER.info("Using Firestore collection %r for prediction history", config.firestore_collection)
    return FirestoreHistoryStore(
        collection=config.firestore_collection,
        project_id=config.firestore_project_id,
        database_id=config.firestore_database_id,
        credentials_path=config.firestore_credentials_path,
    )

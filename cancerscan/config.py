"""Application configuration for the CancerScan inference service."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Centralised runtime configuration.

    Values can be overridden using environment variables prefixed with
    ``CANCERSCAN_`` (e.g. ``CANCERSCAN_MODEL_PATH``). The Firestore and port
    settings also honour the unprefixed names used by earlier deployments
    (``PROJECT_ID``, ``DATABASE_ID``, ``GOOGLE_CLOUD_CREDENTIALS``, ``PORT``).
    An optional ``.env`` file located at the repository root will be read
    automatically if present.
    """

    model_config = SettingsConfigDict(
        env_prefix="CANCERSCAN_",
        env_file=_REPO_ROOT / ".env",
        extra="ignore",
        protected_namespaces=("settings_",),
    )

    model_path: Path = _REPO_ROOT / "model" / "model.keras"
    model_url: Optional[str] = None
    max_upload_bytes: int = 1 * 1024 * 1024

    history_backend: Literal["firestore", "memory"] = "firestore"
    firestore_project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CANCERSCAN_FIRESTORE_PROJECT_ID", "PROJECT_ID"),
    )
    firestore_database_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CANCERSCAN_FIRESTORE_DATABASE_ID", "DATABASE_ID"),
    )
    firestore_credentials_path: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CANCERSCAN_FIRESTORE_CREDENTIALS_PATH", "GOOGLE_CLOUD_CREDENTIALS"
        ),
    )
    firestore_collection: str = "predictions"

    cors_allow_origins: Tuple[str, ...] = ("*",)
    host: str = "0.0.0.0"
    port: int = Field(default=3000, validation_alias=AliasChoices("CANCERSCAN_PORT", "PORT"))
    log_level: str = "info"


settings = Settings()

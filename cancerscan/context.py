"""Collaborators shared by every request."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Settings, settings
from .services.history import HistoryStore, build_history_store
from .services.model import CancerModel


@dataclass
class ServiceContext:
    """Holds the loaded classifier and the history backend for the app's lifetime."""

    model: CancerModel
    store: HistoryStore
    settings: Settings


def build_context(config: Settings = settings) -> ServiceContext:
    return ServiceContext(
        model=CancerModel(model_path=config.model_path, model_url=config.model_url),
        store=build_history_store(config),
        settings=config,
    )

import io
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from cancerscan.config import Settings
from cancerscan.context import ServiceContext
from cancerscan.main import create_app
from cancerscan.services.history import InMemoryHistoryStore


class FakeModel:
    """Stand-in for CancerModel returning a fixed probability."""

    def __init__(
        self,
        probability: float = 0.1,
        ready: bool = True,
        score_error: Optional[Exception] = None,
        load_error: Optional[Exception] = None,
    ):
        self.probability = probability
        self._ready = ready
        self.score_error = score_error
        self.load_error = load_error
        self.scored_shapes = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    def load(self) -> None:
        if self.load_error is not None:
            raise self.load_error

    def score(self, batch) -> float:
        self.scored_shapes.append(batch.shape)
        if self.score_error is not None:
            raise self.score_error
        return self.probability


def make_image_bytes(size=(64, 48), color=(200, 30, 30), fmt="PNG", mode="RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(history_backend="memory")


@pytest.fixture
def store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def context(settings, store) -> ServiceContext:
    return ServiceContext(model=FakeModel(), store=store, settings=settings)


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()

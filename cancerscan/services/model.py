"""Model service responsible for loading and running the binary cancer classifier."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Optional

import numpy as np
import tensorflow as tf

from ..utils.image import TARGET_BATCH_SHAPE

LOGGER = logging.getLogger(__name__)


def _read_model(model_file: Path) -> tf.keras.Model:
    return tf.keras.models.load_model(str(model_file), compile=False)


class CancerModel:
    """Wrapper around a Keras classifier emitting a single sigmoid score.

    The underlying model is published only once it has been fully loaded,
    validated and warmed up, so ``is_ready`` never reports a partial load.
    After publication the model is treated as read-only and ``score`` may be
    called from several threads at once.
    """

    def __init__(self, model_path: Path, model_url: Optional[str] = None):
        self._model_path = Path(model_path)
        self._model_url = model_url
        self._model: tf.keras.Model | None = None
        self._load_lock = Lock()

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    def _resolve_model_file(self) -> Path:
        if self._model_path.exists() or not self._model_url:
            return self._model_path

        LOGGER.info("Downloading model from %s", self._model_url)
        downloaded = tf.keras.utils.get_file(
            fname=self._model_path.name,
            origin=self._model_url,
            cache_dir=str(self._model_path.parent),
            cache_subdir="",
        )
        return Path(downloaded)

    def load(self) -> None:
        """Load the classifier into memory. Subsequent calls are no-ops."""

        if self._model is not None:
            return

        with self._load_lock:
            if self._model is not None:
                return

            model_file = self._resolve_model_file()
            LOGGER.info("Loading model from %s", model_file)
            model = _read_model(model_file)

            expected_output = model.outputs[0].shape[-1]
            if expected_output != 1:
                raise ValueError(
                    f"Expected a single output unit for binary classification, got {expected_output}"
                )

            # Prime the model to avoid cold-start latency on first inference.
            dummy_batch = np.zeros(TARGET_BATCH_SHAPE, dtype=np.float32)
            model(dummy_batch, training=False)

            self._model = model
            LOGGER.info("Model loaded successfully")

    def score(self, batch: np.ndarray) -> float:
        """Return the model's probability for a preprocessed image batch."""

        if batch.shape != TARGET_BATCH_SHAPE:
            raise ValueError(
                f"Expected input batch of shape {TARGET_BATCH_SHAPE}, received {batch.shape}."
            )

        model = self._model
        if model is None:
            raise RuntimeError("Model is not loaded.")

        predictions = np.asarray(model(batch, training=False))
        if predictions.size == 0:
            raise ValueError(f"Unexpected prediction output shape: {predictions.shape}")

        return float(np.clip(predictions.reshape(-1)[0], 0.0, 1.0))

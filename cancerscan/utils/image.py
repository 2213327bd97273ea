"""Turn uploaded image bytes into the tensor the classifier expects."""

from __future__ import annotations

import io
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

_TARGET_HEIGHT = 224
_TARGET_WIDTH = 224

TARGET_BATCH_SHAPE: Tuple[int, int, int, int] = (1, _TARGET_HEIGHT, _TARGET_WIDTH, 3)


class DecodeError(ValueError):
    """Raised when the uploaded bytes cannot be decoded as an image."""


def load_and_preprocess_image(data: bytes) -> np.ndarray:
    """Decode raw image bytes and prepare them for model inference.

    The image is converted to RGB, resized to 224x224 with bilinear
    interpolation and scaled to ``[0, 1]``. The result carries a leading
    batch dimension, i.e. its shape is always ``(1, 224, 224, 3)``.
    """

    if not data:
        raise DecodeError("Image payload is empty.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode != "RGB":
                img = img.convert("RGB")
            img = img.resize((_TARGET_WIDTH, _TARGET_HEIGHT), resample=Image.BILINEAR)
            array = np.asarray(img, dtype=np.float32)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        # Pillow raises SyntaxError or ValueError for some corrupt files.
        raise DecodeError(f"Unable to decode image: {exc}") from exc

    array = array / 255.0
    return np.expand_dims(array, axis=0)

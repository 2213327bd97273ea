import numpy as np
import pytest

from cancerscan.utils.image import TARGET_BATCH_SHAPE, DecodeError, load_and_preprocess_image
from conftest import make_image_bytes


@pytest.mark.parametrize(
    "size, mode, color, fmt",
    [
        ((64, 48), "RGB", (200, 30, 30), "PNG"),
        ((1024, 600), "RGB", (10, 20, 30), "JPEG"),
        ((20, 20), "L", 128, "PNG"),
        ((300, 224), "RGBA", (0, 255, 0, 128), "PNG"),
    ],
)
def test_output_shape_and_range(size, mode, color, fmt):
    batch = load_and_preprocess_image(make_image_bytes(size=size, color=color, fmt=fmt, mode=mode))

    assert batch.shape == TARGET_BATCH_SHAPE == (1, 224, 224, 3)
    assert batch.dtype == np.float32
    assert batch.min() >= 0.0
    assert batch.max() <= 1.0


def test_pixel_values_are_scaled_by_255():
    batch = load_and_preprocess_image(make_image_bytes(color=(255, 0, 51)))

    np.testing.assert_allclose(batch[0, 100, 100], [1.0, 0.0, 0.2], atol=1e-6)


def test_invalid_bytes_raise_decode_error():
    with pytest.raises(DecodeError):
        load_and_preprocess_image(b"definitely not an image")


def test_truncated_image_raises_decode_error():
    data = make_image_bytes(size=(128, 128))
    with pytest.raises(DecodeError):
        load_and_preprocess_image(data[: len(data) // 3])


def test_empty_payload_raises_decode_error():
    with pytest.raises(DecodeError):
        load_and_preprocess_image(b"")

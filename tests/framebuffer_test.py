import numpy as np
import pytest

from cpurast.errors import AssetError
from cpurast.framebuffer import DEPTH_CLEAR, FrameBuffer


def test_new_buffer_is_black_with_cleared_depth():
    fb = FrameBuffer(4, 3)
    assert fb.color.shape == (3, 4, 3)
    assert fb.depth.shape == (3, 4)
    assert np.all(fb.color == 0.0)
    assert np.all(fb.depth == DEPTH_CLEAR)
    assert fb.coverage() == 0


def test_depth_clear_loses_to_any_real_depth():
    fb = FrameBuffer(1, 1)
    assert -1e300 > fb.depth_at(0, 0)


def test_invalid_size():
    with pytest.raises(ValueError):
        FrameBuffer(0, 10)


def test_row_zero_is_bottom_of_image():
    fb = FrameBuffer(4, 3)
    fb.set(0, 0, (1.0, 0.0, 0.0))
    fb.set(3, 2, (0.0, 0.0, 1.0))

    img = fb.to_image_array()
    assert img.dtype == np.uint8
    # Последняя строка картинки = нижняя строка буфера
    np.testing.assert_array_equal(img[2, 0], [255, 0, 0])
    np.testing.assert_array_equal(img[0, 3], [0, 0, 255])


def test_image_channels_are_clamped():
    fb = FrameBuffer(1, 1)
    fb.set(0, 0, (2.0, -1.0, 0.5))
    np.testing.assert_array_equal(fb.to_image_array()[0, 0], [255, 0, 127])


def test_depth_access_and_coverage():
    fb = FrameBuffer(2, 2)
    fb.set_depth(1, 0, -3.5)
    assert fb.depth_at(1, 0) == -3.5
    assert fb.coverage() == 1

    fb.clear()
    assert fb.coverage() == 0


def test_write_and_read_back(tmp_path):
    fb = FrameBuffer(5, 4)
    fb.set(2, 1, (0.0, 1.0, 0.0))
    path = tmp_path / "out.png"
    fb.write_image(path)

    loaded = FrameBuffer.from_image(path)
    assert (loaded.width, loaded.height) == (5, 4)
    np.testing.assert_allclose(loaded.get(2, 1), [0.0, 1.0, 0.0])
    np.testing.assert_allclose(loaded.get(0, 0), [0.0, 0.0, 0.0])


def test_read_missing_image(tmp_path):
    with pytest.raises(AssetError):
        FrameBuffer.from_image(tmp_path / "missing.png")

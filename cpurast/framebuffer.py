"""FrameBuffer - color target with a parallel depth buffer."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from cpurast.errors import AssetError

# Начальное значение z-буфера: любой реальный фрагмент ближе.
DEPTH_CLEAR = -sys.float_info.max


class FrameBuffer:
    """
    Color target plus depth buffer of the same size.

    Row 0 is the bottom of the image. The flip to top-origin happens only
    when the buffer is converted to an image for persisting.

    Attributes:
        width: Target width in pixels.
        height: Target height in pixels.
        color: float64 array (height, width, 3) with linear 0..1 values.
        depth: float64 array (height, width), cleared to DEPTH_CLEAR.
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"FrameBuffer size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.color = np.zeros((self.height, self.width, 3), dtype=np.float64)
        self.depth = np.full((self.height, self.width), DEPTH_CLEAR, dtype=np.float64)

    def __repr__(self) -> str:
        return f"FrameBuffer({self.width}x{self.height})"

    def clear(self, color=(0.0, 0.0, 0.0)) -> None:
        self.color[:, :] = np.asarray(color, dtype=np.float64)
        self.depth.fill(DEPTH_CLEAR)

    def set(self, x: int, y: int, color) -> None:
        self.color[y, x] = color

    def get(self, x: int, y: int) -> np.ndarray:
        return self.color[y, x]

    def depth_at(self, x: int, y: int) -> float:
        return float(self.depth[y, x])

    def set_depth(self, x: int, y: int, z: float) -> None:
        self.depth[y, x] = z

    def coverage(self) -> int:
        """Number of pixels that received at least one fragment."""
        return int(np.count_nonzero(self.depth != DEPTH_CLEAR))

    def to_image_array(self) -> np.ndarray:
        """
        Convert color buffer to uint8 (height, width, 3) in image row order.

        Channels are clamped to [0, 1] and truncated after scaling by 255.
        The first row of the result is the top of the image.
        """
        data = (np.clip(self.color, 0.0, 1.0) * 255.0).astype(np.uint8)
        return np.ascontiguousarray(data[::-1])

    def write_image(self, path: str | Path) -> None:
        """Save color buffer to an image file (format chosen by extension)."""
        from PIL import Image

        Image.fromarray(self.to_image_array()).save(str(path))

    @classmethod
    def from_image(cls, path: str | Path) -> "FrameBuffer":
        """Read an image back into a FrameBuffer (depth stays cleared)."""
        from PIL import Image

        try:
            with Image.open(path) as image:
                data = np.asarray(image.convert("RGB"), dtype=np.float64) / 255.0
        except (OSError, ValueError) as exc:
            raise AssetError(f"Cannot read image {path}") from exc
        height, width = data.shape[:2]
        fb = cls(width, height)
        fb.color[:, :] = data[::-1]
        return fb

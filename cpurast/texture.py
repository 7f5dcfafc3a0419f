"""TextureData - decoded image data with nearest-texel sampling."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from cpurast.errors import AssetError

# Keeps u == 1.0 / v == 1.0 inside the texture.
SAMPLE_EPSILON = 0.001


@dataclass
class TextureData:
    """
    Raw image data container.

    Attributes:
        data: Numpy array of shape (height, width, channels) with uint8 values.
              Row 0 is the top row of the image as decoded.
        width: Texture width in pixels.
        height: Texture height in pixels.
        channels: Number of color channels (3 for RGB, 4 for RGBA).
    """

    data: np.ndarray
    width: int
    height: int
    channels: int = 3

    @classmethod
    def from_file(cls, path: str | Path) -> "TextureData":
        """
        Load texture data from image file.

        Args:
            path: Path to image file (PNG, TGA, JPG, etc.)

        Returns:
            TextureData with the decoded pixels. RGB and RGBA images keep
            their layout, everything else is converted to RGB.

        Raises:
            AssetError: file is missing or cannot be decoded.
        """
        from PIL import Image

        try:
            with Image.open(path) as image:
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGB")
                data = np.array(image, dtype=np.uint8)
        except (OSError, ValueError) as exc:
            raise AssetError(f"Failed to open texture file {path}") from exc

        return cls.from_array(data)

    @classmethod
    def from_array(cls, data: np.ndarray) -> "TextureData":
        """
        Create texture data from numpy array.

        Args:
            data: Numpy array of shape (height, width, channels) or (height, width).
        """
        data = np.asarray(data)
        if data.ndim == 2:
            data = data[:, :, None].repeat(3, axis=2)
        if data.ndim != 3:
            raise ValueError(f"Expected 3D array (height, width, channels), got shape {data.shape}")
        if data.dtype != np.uint8:
            data = np.clip(data, 0, 255).astype(np.uint8)

        height, width, channels = data.shape
        if width < 1 or height < 1:
            raise ValueError("Texture must be at least 1x1")
        return cls(data=data, width=width, height=height, channels=channels)

    @classmethod
    def solid(cls, color) -> "TextureData":
        """1x1 texture of the given 0..1 RGB color."""
        rgb = np.clip(np.asarray(color, dtype=np.float64), 0.0, 1.0)
        data = np.round(rgb * 255.0).astype(np.uint8).reshape(1, 1, 3)
        return cls(data=data, width=1, height=1, channels=3)

    def texel_index(self, u: float, v: float) -> tuple[int, int]:
        """
        Integer texel (i, j) for a normalized coordinate, j counted from the bottom.

        Coordinates outside [0, 1] are clamped.
        """
        u = min(max(u, 0.0), 1.0)
        v = min(max(v, 0.0), 1.0)
        i = int(u * (self.width - SAMPLE_EPSILON))
        j = int(v * (self.height - SAMPLE_EPSILON))
        return i, j

    def sample(self, u: float, v: float) -> np.ndarray:
        """
        Nearest texel at (u, v) as RGB in 0..1.

        The v axis points up, row 0 of the decoded data is the top,
        so the row is flipped. The channel stride comes from the actual
        buffer size, not from the `channels` field.
        """
        i, j = self.texel_index(u, v)
        flat = self.data.reshape(-1)
        stride = flat.size // (self.width * self.height)
        index = ((self.height - 1 - j) * self.width + i) * stride
        rgb = flat[index:index + 3]
        if stride < 3:
            rgb = np.repeat(flat[index], 3)
        return rgb.astype(np.float64) / 255.0

"""Per-vertex record passed from the vertex stage to the rasterizer."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vertex:
    """
    Результат вершинного шейдера.

    Атрибуты:
        position: (x, y, z) в пикселях target'а, z хранится для z-теста
        tex_coord: (u, v) в [0, 1]^2
        normal: нормаль из модели, без преобразований
        local_position: исходная точка модели (для освещения в мировых координатах)
    """
    position: np.ndarray
    tex_coord: np.ndarray
    normal: np.ndarray
    local_position: np.ndarray

    def __post_init__(self):
        for name in ("position", "tex_coord", "normal", "local_position"):
            arr = np.array(getattr(self, name), dtype=np.float64)
            arr.flags.writeable = False
            object.__setattr__(self, name, arr)

    @classmethod
    def raster(cls, x: float, y: float, z: float = 0.0) -> "Vertex":
        """Vertex given directly in raster space, other attributes zeroed."""
        return cls(
            position=np.array([x, y, z], dtype=np.float64),
            tex_coord=np.zeros(2, dtype=np.float64),
            normal=np.array([0.0, 0.0, 1.0]),
            local_position=np.array([x, y, z], dtype=np.float64),
        )

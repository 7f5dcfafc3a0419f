"""
Вычисление view/projection матриц для shadow mapping.

Источник света: точка, смотрящая на target. Проекция ортографическая,
бокс задаётся явно (ortho_bounds) или подгоняется под меш (fit_ortho_bounds).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from cpurast.transforms import ortho_matrix, transform_point, view_matrix

if TYPE_CHECKING:
    from cpurast.mesh import Mesh

# Бокс по умолчанию, когда подгонять не под что.
DEFAULT_ORTHO_BOUNDS = (-50.0, 50.0, -50.0, 50.0)


@dataclass
class ShadowCameraParams:
    """
    Параметры теневой камеры.

    Атрибуты:
        light_position: позиция источника в мировых координатах
        target: точка, на которую смотрит источник
        up: вектор "вверх" (не должен быть параллелен направлению света)
        ortho_bounds: (left, right, bottom, top) ортографического бокса
        near, far: z плоскостей отсечения (отрицательные, камера смотрит вдоль -Z)
        width, height: разрешение shadow map
    """
    light_position: np.ndarray
    target: np.ndarray
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    ortho_bounds: tuple[float, float, float, float] = DEFAULT_ORTHO_BOUNDS
    near: float = -1.0
    far: float = -60.0
    width: int = 2000
    height: int = 2000

    def __post_init__(self):
        self.light_position = np.asarray(self.light_position, dtype=np.float64)
        self.target = np.asarray(self.target, dtype=np.float64)
        self.up = np.asarray(self.up, dtype=np.float64)


def build_shadow_view_matrix(params: ShadowCameraParams) -> np.ndarray:
    """
    View-матрица источника света: обращённый look_at(light, target, up).

    Возвращает:
        4x4 view matrix (float64)
    """
    return view_matrix(params.light_position, params.target, params.up)


def build_shadow_projection_matrix(params: ShadowCameraParams) -> np.ndarray:
    """
    Ортографическая проекция в пиксели shadow map, глубина без деления на w.

    Возвращает:
        4x4 projection matrix (float64)
    """
    left, right, bottom, top = params.ortho_bounds
    return ortho_matrix(left, right, bottom, top, params.near, params.far,
                        params.width, params.height)


def compute_world_to_shadowmap(params: ShadowCameraParams) -> np.ndarray:
    """
    Матрица из мировых координат в координаты shadow map.

    world_to_shadowmap = projection * view

    Используется в основном шейдере: x/y задают пиксель shadow map,
    z сравнивается с сохранённой глубиной.
    """
    view = build_shadow_view_matrix(params)
    proj = build_shadow_projection_matrix(params)
    return proj @ view


def fit_ortho_bounds(
    mesh: "Mesh",
    model: np.ndarray,
    light_view: np.ndarray,
    padding: float = 1.0,
) -> tuple[float, float, float, float]:
    """
    Ортографический бокс, покрывающий меш с точки зрения света.

    Алгоритм:
    1. Перевести вершины меша в мир (model), затем в пространство света
    2. Найти AABB по x/y
    3. Расширить на padding и сделать квадратным (пиксели shadow map квадратные)

    Возвращает:
        (left, right, bottom, top); для меша без вершин DEFAULT_ORTHO_BOUNDS
    """
    if len(mesh.positions) == 0:
        return DEFAULT_ORTHO_BOUNDS

    to_light = light_view @ model
    pts = np.array([transform_point(to_light, p) for p in mesh.positions])
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)

    cx = (lo[0] + hi[0]) / 2.0
    cy = (lo[1] + hi[1]) / 2.0
    half = max(hi[0] - lo[0], hi[1] - lo[1]) / 2.0 + padding

    return (cx - half, cx + half, cy - half, cy + half)

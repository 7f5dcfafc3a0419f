"""
Растеризация треугольника: bounding box, барицентрические веса, z-тест.

Алгоритм draw_triangle:
1. AABB трёх вершин в растровом пространстве, обрезанный по target'у
2. Для каждой строки бокса: барицентрические веса по x/y сразу для всего ряда
3. Пиксель внутри, если все веса >= 0 (рёбра включаются, общие рёбра
   соседних треугольников закрашиваются обоими)
4. z = линейная интерполяция z вершин, тест z > depth
5. fragment(); если вернул цвет, пишем цвет и глубину
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from cpurast.framebuffer import FrameBuffer
    from cpurast.shader import Shader
    from cpurast.vertex import Vertex

# |cross.z| ниже порога: треугольник вырожден (площадь ~ 0).
DEGENERATE_EPS = 1e-2

# Веса-заглушка для вырожденного треугольника: не проходят тест "внутри".
DEGENERATE_WEIGHTS = (-1.0, 1.0, 1.0)


def barycentric(p, a, b, c) -> np.ndarray:
    """
    Барицентрические веса точки p относительно треугольника abc (только x/y).

    cross((b.x-a.x, c.x-a.x, a.x-p.x), (b.y-a.y, c.y-a.y, a.y-p.y)) = (u', v', w');
    веса = (1 - u - v, u, v), где u = u'/w', v = v'/w'.

    Для вырожденного треугольника возвращает (-1, 1, 1).
    """
    vec_x = (b[0] - a[0], c[0] - a[0], a[0] - p[0])
    vec_y = (b[1] - a[1], c[1] - a[1], a[1] - p[1])

    cx = vec_x[1] * vec_y[2] - vec_x[2] * vec_y[1]
    cy = vec_x[2] * vec_y[0] - vec_x[0] * vec_y[2]
    cz = vec_x[0] * vec_y[1] - vec_x[1] * vec_y[0]

    if abs(cz) < DEGENERATE_EPS:
        return np.array(DEGENERATE_WEIGHTS, dtype=np.float64)

    u = cx / cz
    v = cy / cz
    return np.array([1.0 - u - v, u, v], dtype=np.float64)


def barycentric_row(xs: np.ndarray, y: float, a, b, c):
    """
    Веса barycentric() сразу для ряда пикселей (xs, y).

    Возвращает массив (3, len(xs)) или None для вырожденного треугольника:
    cross.z от точки не зависит, поэтому проверка одна на весь ряд.
    """
    e1x, e2x = b[0] - a[0], c[0] - a[0]
    e1y, e2y = b[1] - a[1], c[1] - a[1]

    cz = e1x * e2y - e2x * e1y
    if abs(cz) < DEGENERATE_EPS:
        return None

    dx = a[0] - xs
    dy = a[1] - y
    u = (e2x * dy - dx * e2y) / cz
    v = (dx * e1y - e1x * dy) / cz
    return np.stack([1.0 - u - v, u, v])


def bounding_box(positions, width: int, height: int):
    """
    Pixel bounds (x_min, x_max, y_min, y_max) clamped to the target.

    Returns None when the triangle lies completely outside or has
    non-finite coordinates (e.g. from an undefined camera basis).
    """
    xs = [p[0] for p in positions]
    ys = [p[1] for p in positions]
    if not all(math.isfinite(t) for t in xs + ys):
        return None
    x_min = max(int(math.floor(min(xs))), 0)
    y_min = max(int(math.floor(min(ys))), 0)
    x_max = min(int(math.floor(max(xs))), width - 1)
    y_max = min(int(math.floor(max(ys))), height - 1)
    if x_min > x_max or y_min > y_max:
        return None
    return x_min, x_max, y_min, y_max


def draw_triangle(target: "FrameBuffer", shader: "Shader", vertices: Sequence["Vertex"]) -> int:
    """
    Растеризует один треугольник в target (цвет и глубина меняются на месте).

    Параметры:
        target: FrameBuffer с цветом и z-буфером
        shader: объект с fragment(vertices, bar)
        vertices: три вершины после vertex-стадии

    Возвращает:
        число записанных пикселей
    """
    if len(vertices) != 3:
        raise ValueError(f"Triangle needs exactly 3 vertices, got {len(vertices)}")

    a, b, c = (v.position for v in vertices)
    box = bounding_box((a, b, c), target.width, target.height)
    if box is None:
        return 0
    x_min, x_max, y_min, y_max = box

    zs = np.array([a[2], b[2], c[2]], dtype=np.float64)
    xs = np.arange(x_min, x_max + 1, dtype=np.float64)
    depth = target.depth
    color = target.color
    written = 0

    for y in range(y_min, y_max + 1):
        bars = barycentric_row(xs, y, a, b, c)
        if bars is None:
            # вырожденный треугольник
            return 0
        z_row = zs @ bars
        candidates = (bars >= 0.0).all(axis=0) & (z_row > depth[y, x_min:x_max + 1])

        for i in np.flatnonzero(candidates):
            frag_color = shader.fragment(vertices, bars[:, i])
            if frag_color is None:
                # discard
                continue

            x = x_min + i
            color[y, x] = frag_color
            depth[y, x] = z_row[i]
            written += 1

    return written

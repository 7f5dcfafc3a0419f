"""
Построение model/view/projection матриц и перспективное деление.

Соглашения:
    - матрицы 4x4 float64, умножение слева: p' = M @ p
    - камера смотрит вдоль -Z, поэтому near/far задаются отрицательными z
    - после проекции и деления на w более близкая точка получает БОЛЬШИЙ z
      (DEPTH_NEARER_IS_GREATER); z-буфер растеризатора сравнивает через ">"

Перспективное деление выполняется отдельно (from_homogeneous),
в матрицу оно не входит. Так ортографический и перспективный пути
устроены одинаково: матрица, затем деление на w (для ortho w == 1).
"""

from __future__ import annotations

import math

import numpy as np

# Инвариант направления глубины: ближе к камере -> больше z в растре.
DEPTH_NEARER_IS_GREATER = True


def _normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


def to_homogeneous(p, w: float = 1.0) -> np.ndarray:
    """(x, y, z) -> (x, y, z, w)."""
    return np.array([p[0], p[1], p[2], w], dtype=np.float64)


def from_homogeneous(h) -> np.ndarray:
    """Perspective divide: (x, y, z, w) -> (x/w, y/w, z/w)."""
    h = np.asarray(h, dtype=np.float64)
    return h[:3] / h[3]


def transform_point(matrix: np.ndarray, p) -> np.ndarray:
    """Apply a 4x4 matrix to a 3D point, followed by the perspective divide."""
    return from_homogeneous(matrix @ to_homogeneous(p))


def transform_direction(matrix: np.ndarray, d) -> np.ndarray:
    """Apply a 4x4 matrix to a direction (w = 0), no divide."""
    return (matrix @ to_homogeneous(d, 0.0))[:3]


def inverse_transpose(matrix: np.ndarray) -> np.ndarray:
    """Inverse-transpose, used to bring normals into world space."""
    return np.linalg.inv(matrix).T


def model_matrix(translate, scale) -> np.ndarray:
    """
    Model matrix: scale, then translate. No rotation.

    Формула:
        [sx, 0,  0,  tx]
        [0,  sy, 0,  ty]
        [0,  0,  sz, tz]
        [0,  0,  0,  1 ]
    """
    m = np.diag([scale[0], scale[1], scale[2], 1.0]).astype(np.float64)
    m[0:3, 3] = translate
    return m


def look_at(eye, target, up) -> np.ndarray:
    """
    Базис камеры в мировых координатах (camera-to-world).

    ВНИМАНИЕ: это НЕ view-матрица. Для world -> camera её нужно обратить
    (см. view_matrix). Столбцы: u, v, w и позиция камеры, где
        w = normalize(eye - target)
        u = normalize(cross(up, w))
        v = cross(w, u)

    Если up параллелен направлению взгляда, базис не определён (NaN);
    проверять это должен вызывающий.
    """
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    w = _normalize(eye - target)
    u = _normalize(np.cross(up, w))
    v = np.cross(w, u)

    m = np.eye(4, dtype=np.float64)
    m[0:3, 0] = u
    m[0:3, 1] = v
    m[0:3, 2] = w
    m[0:3, 3] = eye
    return m


def view_matrix(eye, target, up) -> np.ndarray:
    """World -> camera transform: inverse of look_at."""
    return np.linalg.inv(look_at(eye, target, up))


def viewport_matrix(width: int, height: int, sx: float, sy: float, sz: float = 1.0,
                    bz: float = 0.0) -> np.ndarray:
    """Scale x/y (and z) and shift the origin to the target center."""
    m = np.diag([sx, sy, sz, 1.0]).astype(np.float64)
    m[0, 3] = width / 2.0
    m[1, 3] = height / 2.0
    m[2, 3] = bz
    return m


def perspective_matrix(fov: float, near: float, far: float, width: int, height: int) -> np.ndarray:
    """
    Перспективная проекция прямо в растровые координаты.

    Параметры:
        fov: вертикальный угол обзора в радианах
        near, far: z ближней и дальней плоскостей (отрицательные, камера смотрит вдоль -Z)
        width, height: размер target'а в пикселях

    Матрица сжатия (деление на w = z выполняет вызывающий):
        [n, 0, 0,     0   ]
        [0, n, 0,     0   ]
        [0, 0, n + f, -n*f]
        [0, 0, 1,     0   ]

    После деления z' = n + f - n*f/z: на near даёт n, на far даёт f,
    ближе к камере -> больше.
    """
    img_height = math.tan(fov / 2.0) * abs(near) * 2.0
    img_width = img_height * (width / height)

    squish = np.array(
        [
            [near, 0.0, 0.0, 0.0],
            [0.0, near, 0.0, 0.0],
            [0.0, 0.0, near + far, -near * far],
            [0.0, 0.0, 1.0, 0.0],
        ],
        dtype=np.float64,
    )
    viewport = viewport_matrix(width, height, width / img_width, height / img_height)
    return viewport @ squish


def ortho_matrix(left: float, right: float, bottom: float, top: float,
                 near: float, far: float, width: int, height: int) -> np.ndarray:
    """
    Ортографическая проекция в растровые координаты, без деления на w.

    Бокс [l,r]x[b,t] переводится в [-1,1]^2, затем в [0,width]x[0,height].
    Глубина: OpenGL-формула с последующим z*0.5 + 0.5.

        [2/(r-l),    0,       0,    -(r+l)/(r-l)]
        [   0,    2/(t-b),    0,    -(t+b)/(t-b)]
        [   0,       0,   -2/(f-n), -(f+n)/(f-n)]
        [   0,       0,       0,          1     ]
    """
    proj = np.zeros((4, 4), dtype=np.float64)

    proj[0, 0] = 2.0 / (right - left)
    proj[1, 1] = 2.0 / (top - bottom)
    proj[2, 2] = -2.0 / (far - near)

    proj[0, 3] = -(right + left) / (right - left)
    proj[1, 3] = -(top + bottom) / (top - bottom)
    proj[2, 3] = -(far + near) / (far - near)
    proj[3, 3] = 1.0

    viewport = viewport_matrix(width, height, width / 2.0, height / 2.0, 0.5, 0.5)
    return viewport @ proj

"""
Shader protocol: программируемые стадии конвейера.

Шейдером считается любой объект с двумя методами:
    vertex(local_position, tex_coord, normal) -> Vertex
    fragment(vertices, bar) -> цвет или None (discard)

Общего базового класса нет: конкретные шейдеры независимы,
общие вычисления вынесены в функции модуля.

Использование:
    shader = DepthShader(model, view, projection)
    verts = [shader.vertex(p, uv, n) for p, uv, n in mesh.face_attributes(i)]
    draw_triangle(target, shader, verts)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from cpurast.transforms import from_homogeneous, inverse_transpose, to_homogeneous
from cpurast.vertex import Vertex

if TYPE_CHECKING:
    from cpurast.framebuffer import FrameBuffer
    from cpurast.texture import TextureData


@runtime_checkable
class Shader(Protocol):
    """
    Протокол шейдера.

    Методы:
        vertex: переводит атрибуты вершины модели в растровое пространство.
        fragment: цвет пикселя по трём вершинам и барицентрическим весам,
                  None означает, что фрагмент отброшен и ничего не пишется.
    """

    def vertex(self, local_position, tex_coord, normal) -> Vertex:
        ...

    def fragment(self, vertices: Sequence[Vertex], bar: np.ndarray) -> Optional[np.ndarray]:
        ...


def project_vertex(mvp: np.ndarray, local_position, tex_coord, normal) -> Vertex:
    """Shared vertex stage: mvp @ [p, 1], then the perspective divide."""
    raster = from_homogeneous(mvp @ to_homogeneous(local_position))
    return Vertex(
        position=raster,
        tex_coord=tex_coord,
        normal=normal,
        local_position=local_position,
    )


def interpolate(bar: np.ndarray, a, b, c) -> np.ndarray:
    """Barycentric combination bar[0]*a + bar[1]*b + bar[2]*c."""
    return bar[0] * a + bar[1] * b + bar[2] * c


def _normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n < 1e-12:
        return v
    return v / n


class ConstantColorShader:
    """Fills every covered pixel with one color. Matrices default to identity."""

    def __init__(self, color=(1.0, 1.0, 1.0), model=None, view=None, projection=None):
        self.color = np.asarray(color, dtype=np.float64)
        self.mvp = np.eye(4)
        for m in (model, view, projection):
            if m is not None:
                self.mvp = m @ self.mvp

    def vertex(self, local_position, tex_coord, normal) -> Vertex:
        return project_vertex(self.mvp, local_position, tex_coord, normal)

    def fragment(self, vertices, bar):
        return self.color.copy()


class DepthShader:
    """
    Шейдер теневого прохода.

    Текстуры и нормали игнорируются; в цвет пишется |z| интерполированной
    растровой глубины. Этот буфер потом читает LitShadowShader.
    """

    def __init__(self, model: np.ndarray, view: np.ndarray, projection: np.ndarray):
        self.model_matrix = model
        self.view_matrix = view
        self.projection_matrix = projection
        self._mvp = projection @ view @ model

    def vertex(self, local_position, tex_coord, normal) -> Vertex:
        return project_vertex(self._mvp, local_position, tex_coord, normal)

    def fragment(self, vertices, bar):
        z = abs(interpolate(bar, vertices[0].position[2], vertices[1].position[2], vertices[2].position[2]))
        return np.array([z, z, z], dtype=np.float64)


class UnlitTextureShader:
    """Texture color times a Lambert term against a fixed light direction."""

    def __init__(
        self,
        model: np.ndarray,
        view: np.ndarray,
        projection: np.ndarray,
        texture: "TextureData",
        light_direction=(0.0, 0.0, 1.0),
    ):
        self.model_matrix = model
        self.view_matrix = view
        self.projection_matrix = projection
        self.texture = texture
        self.light_direction = _normalize(np.asarray(light_direction, dtype=np.float64))
        self._mvp = projection @ view @ model

    def vertex(self, local_position, tex_coord, normal) -> Vertex:
        return project_vertex(self._mvp, local_position, tex_coord, normal)

    def fragment(self, vertices, bar):
        v0, v1, v2 = vertices
        uv = interpolate(bar, v0.tex_coord, v1.tex_coord, v2.tex_coord)
        normal = _normalize(interpolate(bar, v0.normal, v1.normal, v2.normal))
        lambert = max(float(np.dot(normal, self.light_direction)), 0.0)
        return np.clip(self.texture.sample(uv[0], uv[1]) * lambert, 0.0, 1.0)


class LitShadowShader:
    """
    Основной шейдер: Ламберт + ambient + Блинн-Фонг + тень из shadow map.

    Атрибуты:
        texture: диффузная текстура
        normal_map: карта нормалей в пространстве модели (None: нормали из модели)
        camera_position, light_position: в мировых координатах
        light_color: интенсивность света для бликов
        shadow_map: FrameBuffer теневого прохода, только чтение
        world_to_shadowmap: projection @ view источника света
        ambient: постоянная добавка к освещённости
        shadow_bias: допуск сравнения глубин (против shadow acne)
        shadow_attenuation: множитель цвета для затенённых фрагментов
    """

    def __init__(
        self,
        model: np.ndarray,
        view: np.ndarray,
        projection: np.ndarray,
        texture: "TextureData",
        camera_position,
        light_position,
        light_color,
        shadow_map: "FrameBuffer",
        world_to_shadowmap: np.ndarray,
        normal_map: "TextureData | None" = None,
        ambient: float = 0.05,
        shadow_bias: float = 0.01,
        shadow_attenuation: float = 0.3,
        specular_strength: float = 0.1,
        shininess: float = 100.0,
    ):
        self.model_matrix = model
        self.view_matrix = view
        self.projection_matrix = projection
        self.texture = texture
        self.normal_map = normal_map
        self.camera_position = np.asarray(camera_position, dtype=np.float64)
        self.light_position = np.asarray(light_position, dtype=np.float64)
        self.light_color = np.asarray(light_color, dtype=np.float64)
        self.shadow_map = shadow_map
        self.world_to_shadowmap = world_to_shadowmap
        self.ambient = np.full(3, ambient, dtype=np.float64)
        self.shadow_bias = shadow_bias
        self.shadow_attenuation = shadow_attenuation
        self.specular_strength = specular_strength
        self.shininess = shininess

        self._mvp = projection @ view @ model
        self._normal_matrix = inverse_transpose(model)
        self._model_to_shadowmap = world_to_shadowmap @ model

    def vertex(self, local_position, tex_coord, normal) -> Vertex:
        return project_vertex(self._mvp, local_position, tex_coord, normal)

    def fragment(self, vertices, bar):
        v0, v1, v2 = vertices
        uv = interpolate(bar, v0.tex_coord, v1.tex_coord, v2.tex_coord)
        local = interpolate(bar, v0.local_position, v1.local_position, v2.local_position)
        color = self.texture.sample(uv[0], uv[1])

        if self.normal_map is None:
            normal = interpolate(bar, v0.normal, v1.normal, v2.normal)
        else:
            normal = self.normal_map.sample(uv[0], uv[1]) * 2.0 - 1.0

        world_normal = _normalize((self._normal_matrix @ to_homogeneous(normal, 0.0))[:3])
        world_pos = (self.model_matrix @ to_homogeneous(local))[:3]

        # diffuse
        frag_to_light = _normalize(self.light_position - world_pos)
        diffuse = max(float(np.dot(world_normal, frag_to_light)), 0.0) * color

        # specular
        frag_to_camera = _normalize(self.camera_position - world_pos)
        half_vec = _normalize(frag_to_light + frag_to_camera)
        spec_cos = max(float(np.dot(half_vec, world_normal)), 0.0)
        specular = self.specular_strength * self.light_color * spec_cos ** self.shininess

        intensity = np.clip(self.ambient + diffuse + specular, 0.0, 1.0)
        return self.shadow_factor(local) * intensity

    def shadow_factor(self, local_position) -> float:
        """1.0 if the point is lit from the light, shadow_attenuation otherwise."""
        sm = from_homogeneous(self._model_to_shadowmap @ to_homogeneous(local_position))
        if not np.isfinite(sm[:2]).all():
            # Базис света не определён (up параллелен лучу): тени нет.
            return 1.0
        sm_x = min(max(int(sm[0]), 0), self.shadow_map.width - 1)
        sm_y = min(max(int(sm[1]), 0), self.shadow_map.height - 1)
        occluder_depth = self.shadow_map.get(sm_x, sm_y)[0]
        if abs(sm[2]) < occluder_depth + self.shadow_bias:
            return 1.0
        return self.shadow_attenuation

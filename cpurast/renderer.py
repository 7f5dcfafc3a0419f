"""
Render orchestration: draw a mesh with a shader, compose the two-pass
shadowed render.

Использование:
    mesh = load_obj_file("model.obj")
    texture = TextureData.from_file("diffuse.tga")
    result = render_scene(mesh, texture, RenderConfig())
    result.image.write_image("output.png")
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import numpy as np

from cpurast import log
from cpurast.framebuffer import FrameBuffer
from cpurast.rasterizer import draw_triangle
from cpurast.shader import DepthShader, LitShadowShader
from cpurast.shadow import (
    ShadowCameraParams,
    build_shadow_projection_matrix,
    build_shadow_view_matrix,
    compute_world_to_shadowmap,
    fit_ortho_bounds,
)
from cpurast.transforms import model_matrix, perspective_matrix, view_matrix

if TYPE_CHECKING:
    from cpurast.config import RenderConfig
    from cpurast.mesh import Mesh
    from cpurast.shader import Shader
    from cpurast.texture import TextureData


@dataclass
class ShadowPassResult:
    """Output of the light pass."""
    shadow_map: FrameBuffer
    view: np.ndarray
    projection: np.ndarray
    world_to_shadowmap: np.ndarray


@dataclass
class RenderResult:
    """
    Output of render_scene.

    Атрибуты:
        image: итоговый FrameBuffer
        shadow: результат теневого прохода
        model: model-матрица (общая для обоих проходов)
        view, projection: матрицы камеры
        shader: шейдер основного прохода (с привязанной shadow map)
        written: число записей в итоговый буфер
    """
    image: FrameBuffer
    shadow: ShadowPassResult
    model: np.ndarray
    view: np.ndarray
    projection: np.ndarray
    shader: LitShadowShader
    written: int = 0


def draw_mesh(target: FrameBuffer, shader: "Shader", mesh: "Mesh") -> int:
    """
    Рисует все грани меша: vertex-стадия для каждой вершины, затем растеризация.

    Возвращает:
        суммарное число записанных пикселей
    """
    written = 0
    for i in range(mesh.face_count):
        vertices = [
            shader.vertex(position, tex_coord, normal)
            for position, tex_coord, normal in mesh.face_attributes(i)
        ]
        written += draw_triangle(target, shader, vertices)
    return written


def render_shadow_pass(mesh: "Mesh", config: "RenderConfig", model: np.ndarray) -> ShadowPassResult:
    """
    Первый проход: глубина с точки зрения источника света.

    Shadow map имеет своё разрешение (shadow_width x shadow_height),
    проекция ортографическая.
    """
    params = ShadowCameraParams(
        light_position=config.light_position,
        target=config.focus_position,
        up=config.up,
        near=config.near,
        far=config.far,
        width=config.shadow_width,
        height=config.shadow_height,
    )
    view = build_shadow_view_matrix(params)
    if not np.isfinite(view).all():
        log.warn("Shadow pass: light direction is parallel to 'up', shadow map stays empty")
    if config.shadow_bounds is None:
        params.ortho_bounds = fit_ortho_bounds(mesh, model, view)
    else:
        params.ortho_bounds = config.shadow_bounds
    projection = build_shadow_projection_matrix(params)

    log.debug(f"Shadow pass: {params.width}x{params.height}, ortho bounds {params.ortho_bounds}")

    shadow_map = FrameBuffer(params.width, params.height)
    written = draw_mesh(shadow_map, DepthShader(model, view, projection), mesh)
    log.debug(f"Shadow pass: {written} depth writes")

    return ShadowPassResult(
        shadow_map=shadow_map,
        view=view,
        projection=projection,
        world_to_shadowmap=compute_world_to_shadowmap(params),
    )


def render_scene(
    mesh: "Mesh",
    texture: "TextureData",
    config: "RenderConfig",
    normal_map: Optional["TextureData"] = None,
) -> RenderResult:
    """
    Полный рендер с тенями: теневой проход, затем основной.

    Параметры:
        mesh: геометрия
        texture: диффузная текстура
        config: параметры рендера
        normal_map: карта нормалей; игнорируется, если config.use_normal_map == False

    Возвращает:
        RenderResult с итоговым буфером, shadow map и матрицами
    """
    started = time.perf_counter()
    log.info(f"Rendering '{mesh.name}': {mesh.face_count} faces, {config.width}x{config.height}")

    model = model_matrix(config.model_translate, config.model_scale)

    shadow = render_shadow_pass(mesh, config, model)

    view = view_matrix(config.camera_position, config.focus_position, config.up)
    projection = perspective_matrix(config.fov, config.near, config.far, config.width, config.height)

    shader = LitShadowShader(
        model,
        view,
        projection,
        texture=texture,
        camera_position=config.camera_position,
        light_position=config.light_position,
        light_color=config.light_color,
        shadow_map=shadow.shadow_map,
        world_to_shadowmap=shadow.world_to_shadowmap,
        normal_map=normal_map if config.use_normal_map else None,
        ambient=config.ambient,
        shadow_bias=config.shadow_bias,
        shadow_attenuation=config.shadow_attenuation,
    )

    image = FrameBuffer(config.width, config.height)
    written = draw_mesh(image, shader, mesh)

    log.info(f"Render finished in {time.perf_counter() - started:.2f}s, {image.coverage()} pixels covered")

    return RenderResult(
        image=image,
        shadow=shadow,
        model=model,
        view=view,
        projection=projection,
        shader=shader,
        written=written,
    )


def render_files(
    obj_path: str | Path,
    texture_path: str | Path,
    output_path: str | Path,
    config: "RenderConfig",
    normal_map_path: str | Path | None = None,
) -> RenderResult:
    """
    Load assets, render, write the image.

    All assets are loaded before rendering starts, so an AssetError
    never leaves a partial output file behind.
    """
    from cpurast.loaders import load_obj_file
    from cpurast.texture import TextureData

    mesh = load_obj_file(obj_path)
    texture = TextureData.from_file(texture_path)
    normal_map = None
    if normal_map_path is not None and config.use_normal_map:
        normal_map = TextureData.from_file(normal_map_path)

    result = render_scene(mesh, texture, config, normal_map)
    result.image.write_image(output_path)
    log.info(f"Saved {output_path}")
    return result

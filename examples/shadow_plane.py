"""Minimal demo: a square hovering over a checkerboard floor, rendered with shadows."""

from __future__ import annotations

import sys

import numpy as np

from cpurast import RenderConfig, TextureData, render_scene
from cpurast.log import setup_console
from cpurast.mesh import PlaneMesh, QuadMesh


def checkerboard(size: int = 64, cells: int = 8) -> TextureData:
    ys, xs = np.mgrid[0:size, 0:size]
    mask = ((xs // (size // cells)) + (ys // (size // cells))) % 2 == 0
    data = np.where(mask[:, :, None], 220, 90).astype(np.uint8).repeat(3, axis=2)
    return TextureData.from_array(data)


def build_scene():
    floor = PlaneMesh(width=20.0, depth=20.0, segments_w=4, segments_d=4)
    square = QuadMesh(
        [[-3.0, 4.0, -3.0], [3.0, 4.0, -3.0], [3.0, 4.0, 3.0], [-3.0, 4.0, 3.0]],
        normal=(0.0, 1.0, 0.0),
    )
    return floor.merged(square, name="shadow_plane")


def main(output: str = "shadow_plane.png"):
    setup_console()
    config = RenderConfig(
        width=320,
        height=240,
        shadow_width=512,
        shadow_height=512,
        camera_position=(0.0, 14.0, 22.0),
        focus_position=(0.0, 0.0, 0.0),
        light_position=(6.0, 20.0, 4.0),
        model_translate=(0.0, 0.0, 0.0),
        model_scale=(1.0, 1.0, 1.0),
        shadow_bounds=None,
    )
    result = render_scene(build_scene(), checkerboard(), config)
    result.image.write_image(output)


if __name__ == "__main__":
    main(*sys.argv[1:])

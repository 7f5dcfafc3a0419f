import math

import numpy as np
import pytest

from cpurast.framebuffer import FrameBuffer
from cpurast.shader import (
    ConstantColorShader,
    DepthShader,
    LitShadowShader,
    Shader,
    UnlitTextureShader,
    interpolate,
)
from cpurast.texture import TextureData
from cpurast.transforms import model_matrix, perspective_matrix, transform_point, view_matrix
from cpurast.vertex import Vertex

I4 = np.eye(4)
THIRD = np.array([1 / 3, 1 / 3, 1 / 3])


def vert(position=(0.0, 0.0, 0.0), uv=(0.0, 0.0), normal=(0.0, 0.0, 1.0), local=(0.0, 0.0, 0.0)):
    return Vertex(position=position, tex_coord=uv, normal=normal, local_position=local)


def flat_triangle(local, normal=(0.0, 0.0, 1.0)):
    """Three equal vertices: every weight combination yields the same attributes."""
    return [vert(normal=normal, local=local) for _ in range(3)]


def make_lit(depth_value: float, **kwargs) -> LitShadowShader:
    shadow_map = FrameBuffer(8, 8)
    shadow_map.color[:, :] = depth_value
    params = dict(
        texture=TextureData.solid((1.0, 1.0, 1.0)),
        camera_position=(0.0, 0.0, 10.0),
        light_position=(0.0, 0.0, 10.0),
        light_color=(5.0, 5.0, 5.0),
        shadow_map=shadow_map,
        world_to_shadowmap=I4,
    )
    params.update(kwargs)
    return LitShadowShader(I4, I4, I4, **params)


def test_all_shaders_satisfy_protocol():
    tex = TextureData.solid((1.0, 1.0, 1.0))
    shaders = [
        ConstantColorShader(),
        DepthShader(I4, I4, I4),
        UnlitTextureShader(I4, I4, I4, tex),
        make_lit(1.0),
    ]
    for shader in shaders:
        assert isinstance(shader, Shader)


def test_vertex_is_immutable():
    v = vert()
    with pytest.raises(Exception):
        v.position = np.zeros(3)
    with pytest.raises(ValueError):
        v.position[0] = 5.0


def test_interpolate():
    np.testing.assert_allclose(interpolate(np.array([0.5, 0.25, 0.25]), 0.0, 4.0, 8.0), 3.0)


class TestVertexStage:
    def test_applies_projection_view_model_and_divide(self):
        model = model_matrix((0.0, 0.0, -30.0), (10.0, 10.0, 10.0))
        view = view_matrix((1.0, 2.0, 0.0), (0.0, 0.0, -30.0), (0.0, 1.0, 0.0))
        proj = perspective_matrix(math.pi / 4, -1.0, -60.0, 200, 100)
        shader = DepthShader(model, view, proj)

        local = np.array([0.1, 0.2, 0.3])
        v = shader.vertex(local, np.array([0.25, 0.75]), np.array([0.0, 1.0, 0.0]))

        np.testing.assert_allclose(v.position, transform_point(proj @ view @ model, local))
        np.testing.assert_allclose(v.local_position, local)
        np.testing.assert_allclose(v.tex_coord, [0.25, 0.75])
        np.testing.assert_allclose(v.normal, [0.0, 1.0, 0.0])

    def test_constant_shader_defaults_to_raster_space(self):
        v = ConstantColorShader().vertex((3.0, 4.0, -1.0), (0.0, 0.0), (0.0, 0.0, 1.0))
        np.testing.assert_allclose(v.position, [3.0, 4.0, -1.0])


def test_depth_shader_writes_absolute_depth():
    shader = DepthShader(I4, I4, I4)
    verts = [vert(position=(0, 0, -2.0)), vert(position=(1, 0, -4.0)), vert(position=(0, 1, -6.0))]
    np.testing.assert_allclose(shader.fragment(verts, THIRD), [4.0, 4.0, 4.0])


class TestUnlitTexture:
    tex = TextureData.solid((1.0, 0.5, 0.0))

    def test_facing_light(self):
        shader = UnlitTextureShader(I4, I4, I4, self.tex, light_direction=(0.0, 0.0, 2.0))
        color = shader.fragment(flat_triangle((0, 0, 0)), THIRD)
        np.testing.assert_allclose(color, [1.0, 128 / 255, 0.0])

    def test_lambert_falloff(self):
        shader = UnlitTextureShader(I4, I4, I4, self.tex, light_direction=(0.0, 1.0, 1.0))
        color = shader.fragment(flat_triangle((0, 0, 0)), THIRD)
        assert color[0] == pytest.approx(math.sqrt(0.5))

    def test_facing_away_is_black(self):
        shader = UnlitTextureShader(I4, I4, I4, self.tex)
        color = shader.fragment(flat_triangle((0, 0, 0), normal=(0.0, 0.0, -1.0)), THIRD)
        np.testing.assert_allclose(color, [0.0, 0.0, 0.0])

    def test_samples_interpolated_uv(self):
        data = np.zeros((1, 2, 3), dtype=np.uint8)
        data[0, 1] = [255, 255, 255]
        shader = UnlitTextureShader(I4, I4, I4, TextureData.from_array(data))
        verts = [vert(uv=(0.0, 0.0)), vert(uv=(1.0, 0.0)), vert(uv=(1.0, 1.0))]
        np.testing.assert_allclose(shader.fragment(verts, np.array([1.0, 0.0, 0.0])), [0, 0, 0])
        np.testing.assert_allclose(shader.fragment(verts, np.array([0.0, 0.5, 0.5])), [1, 1, 1])


class TestLitShadow:
    point = (0.0, 0.0, -5.0)

    def test_lit_when_shadow_map_is_deeper(self):
        assert make_lit(100.0).shadow_factor(self.point) == 1.0

    def test_shadowed_when_occluder_is_nearer(self):
        assert make_lit(0.0).shadow_factor(self.point) == pytest.approx(0.3)

    def test_bias_prevents_self_shadowing(self):
        # Глубина в shadow map чуть меньше глубины фрагмента, но в пределах bias
        assert make_lit(4.995).shadow_factor(self.point) == 1.0
        assert make_lit(4.98).shadow_factor(self.point) == pytest.approx(0.3)

    def test_custom_attenuation(self):
        assert make_lit(0.0, shadow_attenuation=0.5).shadow_factor(self.point) == 0.5

    def test_shadowed_fragment_is_attenuated(self):
        verts = flat_triangle(self.point)
        lit = make_lit(100.0).fragment(verts, THIRD)
        dark = make_lit(0.0).fragment(verts, THIRD)
        assert lit.max() > 0.0
        np.testing.assert_allclose(dark, 0.3 * lit)

    def test_out_of_range_shadow_lookup_is_clamped(self):
        shader = make_lit(100.0)
        assert shader.shadow_factor((-500.0, 900.0, -5.0)) == 1.0

    def test_output_is_clamped(self):
        shader = make_lit(100.0, light_color=(1000.0, 1000.0, 1000.0))
        color = shader.fragment(flat_triangle(self.point), THIRD)
        assert np.all(color <= 1.0)
        assert np.all(color >= 0.0)

    def test_back_facing_gets_only_ambient(self):
        shader = make_lit(100.0, ambient=0.05)
        color = shader.fragment(flat_triangle(self.point, normal=(0.0, 0.0, -1.0)), THIRD)
        np.testing.assert_allclose(color, [0.05, 0.05, 0.05])

    def test_normal_map_replaces_mesh_normal(self):
        facing = make_lit(100.0, normal_map=TextureData.solid((0.5, 0.5, 1.0)))
        away = make_lit(100.0, normal_map=TextureData.solid((0.5, 0.5, 0.0)))
        # Нормаль меша смотрит от света, но карта нормалей её заменяет
        verts = flat_triangle(self.point, normal=(0.0, 0.0, -1.0))
        assert facing.fragment(verts, THIRD)[0] > 0.9
        np.testing.assert_allclose(away.fragment(verts, THIRD), [0.05, 0.05, 0.05])

    def test_normal_uses_inverse_transpose_of_model(self):
        # Неоднородный масштаб: нормаль наклонной грани должна остаться перпендикулярной
        model = model_matrix((0.0, 0.0, 0.0), (1.0, 4.0, 1.0))
        shadow_map = FrameBuffer(4, 4)
        shadow_map.color[:, :] = 100.0
        shader = LitShadowShader(
            model, I4, I4,
            texture=TextureData.solid((1.0, 1.0, 1.0)),
            camera_position=(0.0, 0.0, -100.0),
            light_position=(0.0, 100.0, 0.0),
            light_color=(0.0, 0.0, 0.0),
            shadow_map=shadow_map,
            world_to_shadowmap=I4,
            ambient=0.0,
        )
        n = np.array([1.0, 1.0, 0.0]) / math.sqrt(2.0)
        color = shader.fragment(flat_triangle((0.0, 0.0, 0.0), normal=n), THIRD)
        # Мировая нормаль ~ (1, 0.25, 0) normalized, свет сверху (0, 1, 0)
        expected = 0.25 / math.sqrt(1.0 + 0.25 ** 2)
        assert color[0] == pytest.approx(expected, rel=1e-6)

"""
cpurast - программный растеризатор треугольников без GPU.

Основные модули:
- transforms - model/view/projection матрицы и перспективное деление
- shader - протокол Shader и конкретные шейдеры
- rasterizer - растеризация треугольника с z-тестом
- renderer - двухпроходный рендер с shadow map
"""

from .errors import AssetError, ConfigError, CpuRastError
from .framebuffer import FrameBuffer
from .vertex import Vertex
from .texture import TextureData
from .mesh import Mesh
from .shader import (
    ConstantColorShader,
    DepthShader,
    LitShadowShader,
    Shader,
    UnlitTextureShader,
)
from .rasterizer import barycentric, draw_triangle
from .config import RenderConfig
from .renderer import RenderResult, draw_mesh, render_scene, render_shadow_pass

__version__ = '0.1.0'

__all__ = [
    'AssetError',
    'ConfigError',
    'CpuRastError',
    'FrameBuffer',
    'Vertex',
    'TextureData',
    'Mesh',
    'Shader',
    'ConstantColorShader',
    'DepthShader',
    'LitShadowShader',
    'UnlitTextureShader',
    'barycentric',
    'draw_triangle',
    'RenderConfig',
    'RenderResult',
    'draw_mesh',
    'render_scene',
    'render_shadow_pass',
]

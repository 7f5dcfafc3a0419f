"""Shadow mapping helpers: light camera matrices."""

from cpurast.shadow.shadow_camera import (
    DEFAULT_ORTHO_BOUNDS,
    ShadowCameraParams,
    build_shadow_projection_matrix,
    build_shadow_view_matrix,
    compute_world_to_shadowmap,
    fit_ortho_bounds,
)

__all__ = [
    "DEFAULT_ORTHO_BOUNDS",
    "ShadowCameraParams",
    "build_shadow_projection_matrix",
    "build_shadow_view_matrix",
    "compute_world_to_shadowmap",
    "fit_ortho_bounds",
]

"""
Render configuration.

Resolution, camera/light placement and shading constants for one render.
Stored as JSON; the CLI overlays its flags on top of a loaded config.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

from cpurast import log
from cpurast.errors import ConfigError

_VEC3_FIELDS = (
    "camera_position",
    "focus_position",
    "up",
    "light_position",
    "light_color",
    "model_translate",
    "model_scale",
)


@dataclass
class RenderConfig:
    """
    Parameters of a two-pass shadowed render.

    near/far are z coordinates in camera space. The camera looks down -Z,
    so both are negative and far < near.
    shadow_bounds is the (left, right, bottom, top) box of the light's
    orthographic projection; None fits the box to the mesh.
    """

    width: int = 800
    height: int = 800
    shadow_width: int = 2000
    shadow_height: int = 2000

    near: float = -1.0
    far: float = -60.0
    fov: float = math.pi / 4.0

    camera_position: tuple = (0.0, 0.0, 0.0)
    focus_position: tuple = (0.0, 0.0, -30.0)
    up: tuple = (0.0, 1.0, 0.0)

    light_position: tuple = (10.0, 10.0, 0.0)
    light_color: tuple = (5.0, 5.0, 5.0)

    model_translate: tuple = (0.0, 0.0, -30.0)
    model_scale: tuple = (10.0, 10.0, 10.0)

    shadow_bounds: Optional[tuple] = (-50.0, 50.0, -50.0, 50.0)
    ambient: float = 0.05
    shadow_bias: float = 0.01
    shadow_attenuation: float = 0.3
    use_normal_map: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check value shapes and ranges, raising ConfigError."""
        for name in _VEC3_FIELDS:
            value = getattr(self, name)
            try:
                vec = tuple(float(c) for c in value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{name} must be a 3-component vector, got {value!r}") from exc
            if len(vec) != 3:
                raise ConfigError(f"{name} must be a 3-component vector, got {value!r}")
            setattr(self, name, vec)

        if self.shadow_bounds is not None:
            try:
                bounds = tuple(float(c) for c in self.shadow_bounds)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"shadow_bounds must be 4 numbers, got {self.shadow_bounds!r}") from exc
            if len(bounds) != 4:
                raise ConfigError(f"shadow_bounds must be (left, right, bottom, top), got {bounds!r}")
            if bounds[0] >= bounds[1] or bounds[2] >= bounds[3]:
                raise ConfigError(f"shadow_bounds box is empty: {bounds!r}")
            self.shadow_bounds = bounds

        for name in ("width", "height", "shadow_width", "shadow_height"):
            try:
                value = int(getattr(self, name))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{name} must be an integer") from exc
            if value < 1:
                raise ConfigError(f"{name} must be positive")
            setattr(self, name, value)

        for name in ("near", "far", "fov", "ambient", "shadow_bias", "shadow_attenuation"):
            try:
                setattr(self, name, float(getattr(self, name)))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{name} must be a number") from exc

        if not (0.0 < self.fov < math.pi):
            raise ConfigError(f"fov must be in (0, pi), got {self.fov}")
        if self.near == self.far:
            raise ConfigError("near and far planes coincide")

    def with_overrides(self, **overrides) -> "RenderConfig":
        """Copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @staticmethod
    def from_dict(data: dict) -> "RenderConfig":
        """Deserialize from dictionary. Unknown keys are ignored."""
        known = {f.name for f in fields(RenderConfig)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                log.warn(f"RenderConfig: unknown key '{key}' ignored")
                continue
            kwargs[key] = tuple(value) if isinstance(value, list) else value
        return RenderConfig(**kwargs)

    @staticmethod
    def load(path: str | Path) -> "RenderConfig":
        """Load config from a JSON file."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise ConfigError(f"Cannot read config {path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config {path}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
        return RenderConfig.from_dict(data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

"""Exceptions raised by cpurast."""


class CpuRastError(Exception):
    """Base class for all cpurast errors."""


class AssetError(CpuRastError):
    """Mesh or texture file is missing or cannot be decoded."""


class ConfigError(CpuRastError):
    """Render configuration has invalid values."""

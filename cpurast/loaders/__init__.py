"""Asset loaders."""

from cpurast.loaders.obj_loader import load_obj_file

__all__ = ["load_obj_file"]

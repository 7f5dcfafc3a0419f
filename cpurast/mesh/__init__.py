"""Mesh module - Mesh and primitive shapes."""

from cpurast.mesh.mesh import Mesh
from cpurast.mesh.primitives import PlaneMesh, QuadMesh, TriangleMesh

__all__ = ["Mesh", "PlaneMesh", "QuadMesh", "TriangleMesh"]

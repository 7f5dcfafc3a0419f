"""Primitive mesh shapes: Plane, Quad, Triangle."""

import numpy as np

from .mesh import Mesh


class PlaneMesh(Mesh):
    """Horizontal plane at height y facing +Y, split into segments_w x segments_d quads."""

    def __init__(self, width: float = 1.0, depth: float = 1.0, y: float = 0.0,
                 segments_w: int = 1, segments_d: int = 1):
        vertices = []
        uvs = []
        triangles = []
        for d in range(segments_d + 1):
            z = (d / segments_d - 0.5) * depth
            for w in range(segments_w + 1):
                x = (w / segments_w - 0.5) * width
                vertices.append([x, y, z])
                uvs.append([w / segments_w, 1.0 - d / segments_d])
        for d in range(segments_d):
            for w in range(segments_w):
                v0 = d * (segments_w + 1) + w
                v1 = v0 + 1
                v2 = v0 + (segments_w + 1)
                v3 = v2 + 1
                triangles.append([v0, v2, v1])
                triangles.append([v1, v2, v3])
        triangles = np.array(triangles, dtype=int)
        super().__init__(
            positions=np.array(vertices, dtype=float),
            faces=triangles,
            texcoords=np.array(uvs, dtype=float),
            texcoord_faces=triangles,
            normals=[[0.0, 1.0, 0.0]],
            name="Plane",
        )


class QuadMesh(Mesh):
    """Two triangles spanning four corners given counter-clockwise."""

    def __init__(self, corners, normal=None):
        corners = np.asarray(corners, dtype=float).reshape(4, 3)
        if normal is None:
            normal = np.cross(corners[1] - corners[0], corners[2] - corners[0])
            normal = normal / np.linalg.norm(normal)
        triangles = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
        super().__init__(
            positions=corners,
            faces=triangles,
            texcoords=[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]],
            texcoord_faces=triangles,
            normals=[normal],
            name="Quad",
        )


class TriangleMesh(Mesh):
    def __init__(self, p0, p1, p2):
        super().__init__(
            positions=[p0, p1, p2],
            faces=[[0, 1, 2]],
            texcoords=[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]],
            texcoord_faces=[[0, 1, 2]],
            name="Triangle",
        )

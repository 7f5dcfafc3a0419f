"""Indexed triangle mesh as consumed by the renderer."""

from __future__ import annotations

import numpy as np


class Mesh:
    """
    Triangle mesh with separate index triples per attribute (OBJ style).

    Attributes:
        positions: (N, 3) float64 vertex positions.
        texcoords: (T, 2) float64 texture coordinates.
        normals: (K, 3) float64 normals.
        faces: (F, 3) position index triples.
        texcoord_faces: (F, 3) texcoord index triples.
        normal_faces: (F, 3) normal index triples.
    """

    def __init__(
        self,
        positions,
        faces,
        texcoords=None,
        texcoord_faces=None,
        normals=None,
        normal_faces=None,
        name: str = "",
    ):
        self.name = name
        self.positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        self.faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)

        # Без uv/нормалей: одна запись по умолчанию и нулевые индексы.
        if texcoords is None or len(texcoords) == 0:
            texcoords = [[0.0, 0.0]]
            texcoord_faces = None
        if normals is None or len(normals) == 0:
            normals = [[0.0, 0.0, 1.0]]
            normal_faces = None
        self.texcoords = np.asarray(texcoords, dtype=np.float64).reshape(-1, 2)
        self.normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)

        if texcoord_faces is None:
            texcoord_faces = np.zeros_like(self.faces)
        if normal_faces is None:
            normal_faces = np.zeros_like(self.faces)
        self.texcoord_faces = np.asarray(texcoord_faces, dtype=np.int64).reshape(-1, 3)
        self.normal_faces = np.asarray(normal_faces, dtype=np.int64).reshape(-1, 3)

        self._validate_mesh()

    def __repr__(self) -> str:
        return f"Mesh({self.name!r}, vertices={len(self.positions)}, faces={self.face_count})"

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def _validate_mesh(self):
        """Ensure that the index arrays match and stay inside the attribute arrays."""
        n = self.face_count
        if self.texcoord_faces.shape[0] != n or self.normal_faces.shape[0] != n:
            raise ValueError("Texcoord and normal index arrays must have one triple per face.")
        for label, idx, count in (
            ("Position", self.faces, len(self.positions)),
            ("Texcoord", self.texcoord_faces, len(self.texcoords)),
            ("Normal", self.normal_faces, len(self.normals)),
        ):
            if idx.size and (idx.min() < 0 or idx.max() >= count):
                raise ValueError(f"{label} index out of range (0..{count - 1}).")

    def face_attributes(self, i: int):
        """Three (position, tex_coord, normal) tuples for face i."""
        return [
            (
                self.positions[self.faces[i, j]],
                self.texcoords[self.texcoord_faces[i, j]],
                self.normals[self.normal_faces[i, j]],
            )
            for j in range(3)
        ]

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """Axis-aligned (min, max) of the positions."""
        return self.positions.min(axis=0), self.positions.max(axis=0)

    def merged(self, other: "Mesh", name: str = "") -> "Mesh":
        """Concatenate two meshes into one (indices of `other` are offset)."""
        return Mesh(
            positions=np.vstack([self.positions, other.positions]),
            faces=np.vstack([self.faces, other.faces + len(self.positions)]),
            texcoords=np.vstack([self.texcoords, other.texcoords]),
            texcoord_faces=np.vstack([self.texcoord_faces, other.texcoord_faces + len(self.texcoords)]),
            normals=np.vstack([self.normals, other.normals]),
            normal_faces=np.vstack([self.normal_faces, other.normal_faces + len(self.normals)]),
            name=name or self.name,
        )

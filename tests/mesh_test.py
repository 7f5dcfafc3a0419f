import numpy as np
import pytest

from cpurast.mesh import Mesh, PlaneMesh, QuadMesh, TriangleMesh


def test_face_attributes():
    mesh = Mesh(
        positions=[[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        faces=[[0, 1, 2]],
        texcoords=[[0.5, 0.5], [1.0, 1.0]],
        texcoord_faces=[[1, 0, 1]],
        normals=[[0, 0, 1]],
        normal_faces=[[0, 0, 0]],
    )
    attrs = mesh.face_attributes(0)
    assert len(attrs) == 3
    position, uv, normal = attrs[1]
    np.testing.assert_allclose(position, [1, 0, 0])
    np.testing.assert_allclose(uv, [0.5, 0.5])
    np.testing.assert_allclose(normal, [0, 0, 1])


def test_missing_attributes_get_defaults():
    mesh = Mesh(positions=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], faces=[[0, 1, 2]])
    _, uv, normal = mesh.face_attributes(0)[2]
    np.testing.assert_allclose(uv, [0, 0])
    np.testing.assert_allclose(normal, [0, 0, 1])


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(faces=[[0, 1, 3]]),
        dict(faces=[[0, 1, -1]]),
        dict(faces=[[0, 1, 2]], texcoords=[[0, 0]], texcoord_faces=[[0, 0, 1]]),
        dict(faces=[[0, 1, 2]], normals=[[0, 0, 1]], normal_faces=[[0, 0, 0], [0, 0, 0]]),
    ],
)
def test_invalid_indices_rejected(kwargs):
    with pytest.raises(ValueError):
        Mesh(positions=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], **kwargs)


def test_plane_mesh():
    plane = PlaneMesh(width=4.0, depth=2.0, y=1.5, segments_w=3, segments_d=2)
    assert plane.face_count == 12
    lo, hi = plane.bounds()
    np.testing.assert_allclose(lo, [-2.0, 1.5, -1.0])
    np.testing.assert_allclose(hi, [2.0, 1.5, 1.0])
    for i in range(plane.face_count):
        for _, uv, normal in plane.face_attributes(i):
            assert 0.0 <= uv[0] <= 1.0 and 0.0 <= uv[1] <= 1.0
            np.testing.assert_allclose(normal, [0, 1, 0])


def test_quad_mesh_normal():
    quad = QuadMesh([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]])
    assert quad.face_count == 2
    np.testing.assert_allclose(quad.normals[0], [0, 0, 1])


def test_merged_offsets_indices():
    a = TriangleMesh((0, 0, 0), (1, 0, 0), (0, 1, 0))
    b = QuadMesh([[0, 0, 5], [1, 0, 5], [1, 1, 5], [0, 1, 5]])
    merged = a.merged(b)
    assert merged.face_count == 3
    assert len(merged.positions) == 7
    np.testing.assert_allclose(merged.face_attributes(2)[2][0], [0, 1, 5])
    np.testing.assert_allclose(merged.face_attributes(2)[0][2], [0, 0, 1])

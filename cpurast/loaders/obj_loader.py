# cpurast/loaders/obj_loader.py
"""Pure Python OBJ loader. No external dependencies."""

from pathlib import Path

from cpurast import log
from cpurast.errors import AssetError
from cpurast.mesh import Mesh


def _resolve_index(token: str, count: int) -> int:
    """OBJ index (1-based, negative = relative to the end) -> 0-based."""
    idx = int(token)
    if idx < 0:
        return count + idx
    return idx - 1


def load_obj_file(path) -> Mesh:
    """
    Load the geometry of an OBJ file as a single Mesh.

    Polygons are fan-triangulated. Faces without uv or normal indices
    point at a default entry appended to the respective array.

    Raises:
        AssetError: file is missing, unreadable or malformed.
    """
    path = Path(path)

    # Raw data from file
    positions = []  # v
    tex_coords = []  # vt
    normals_raw = []  # vn
    faces = []  # (v, vt, vn) triples
    lineno = 0

    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue

                parts = line.split()
                cmd = parts[0]

                if cmd == "v" and len(parts) >= 4:
                    positions.append((float(parts[1]), float(parts[2]), float(parts[3])))

                elif cmd == "vt" and len(parts) >= 3:
                    tex_coords.append((float(parts[1]), float(parts[2])))

                elif cmd == "vn" and len(parts) >= 4:
                    normals_raw.append((float(parts[1]), float(parts[2]), float(parts[3])))

                elif cmd == "f" and len(parts) >= 4:
                    # Format: v, v/vt, v/vt/vn, v//vn
                    face_verts = []
                    for vert in parts[1:]:
                        indices_str = vert.split("/")
                        v_idx = _resolve_index(indices_str[0], len(positions))

                        vt_idx = None
                        if len(indices_str) > 1 and indices_str[1]:
                            vt_idx = _resolve_index(indices_str[1], len(tex_coords))

                        vn_idx = None
                        if len(indices_str) > 2 and indices_str[2]:
                            vn_idx = _resolve_index(indices_str[2], len(normals_raw))

                        face_verts.append((v_idx, vt_idx, vn_idx))

                    # Fan triangulation for convex polygons
                    for i in range(1, len(face_verts) - 1):
                        faces.append((face_verts[0], face_verts[i], face_verts[i + 1]))
    except OSError as exc:
        raise AssetError(f"Failed to open the .obj file {path}") from exc
    except ValueError as exc:
        raise AssetError(f"Malformed .obj file {path} at line {lineno}") from exc

    default_uv = len(tex_coords)
    default_normal = len(normals_raw)
    tex_coords.append((0.0, 0.0))
    normals_raw.append((0.0, 0.0, 1.0))

    pos_faces = []
    uv_faces = []
    normal_faces = []
    for tri in faces:
        pos_faces.append([v for v, _, _ in tri])
        uv_faces.append([default_uv if vt is None else vt for _, vt, _ in tri])
        normal_faces.append([default_normal if vn is None else vn for _, _, vn in tri])

    log.debug(f"{path.name}: {len(positions)} vertices, {len(pos_faces)} faces")

    try:
        return Mesh(
            positions=positions,
            faces=pos_faces,
            texcoords=tex_coords,
            texcoord_faces=uv_faces,
            normals=normals_raw,
            normal_faces=normal_faces,
            name=path.stem,
        )
    except ValueError as exc:
        raise AssetError(f"Invalid face indices in {path}") from exc

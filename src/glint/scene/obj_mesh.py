"""Wavefront OBJ mesh reader.

Only the geometry records a ray tracer needs are read:

    v x y z          vertex position
    vn x y z         vertex normal
    f a b c ...      face; each corner is v, v/vt, v//vn or v/vt/vn

Indices are 1-based; negative indices count back from the most recent
record. Faces with more than three corners are split into a fan around their
first corner. Every other record (texture coordinates, groups, materials,
smoothing) is ignored.

Example:
    >>> from glint.scene.obj_mesh import load_obj
    >>> triangles = load_obj("models/teapot.obj")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from glint.core.ray import Vec
from glint.geometry import Triangle, face_normal

logger = logging.getLogger(__name__)


class ObjFormatError(ValueError):
    """Raised for malformed records or out-of-range indices in an OBJ file."""


def _resolve_index(token: str, count: int, kind: str, line_number: int) -> int:
    """Turn a 1-based or negative OBJ index into a 0-based list index."""
    try:
        raw_index = int(token)
    except ValueError as exc:
        raise ObjFormatError(f"line {line_number}: invalid {kind} index '{token}'") from exc

    resolved = count + raw_index if raw_index < 0 else raw_index - 1
    if raw_index == 0 or not 0 <= resolved < count:
        raise ObjFormatError(
            f"line {line_number}: {kind} index {raw_index} out of range (have {count})"
        )
    return resolved


def _parse_vector(parts: list[str], line_number: int) -> Vec:
    if len(parts) < 4:
        raise ObjFormatError(f"line {line_number}: expected 3 coordinates")
    try:
        return np.array([float(p) for p in parts[1:4]], dtype=np.float64)
    except ValueError as exc:
        raise ObjFormatError(f"line {line_number}: invalid number in '{' '.join(parts)}'") from exc


def parse_obj(lines: Iterable[str]) -> list[Triangle]:
    """Parse OBJ records into triangles.

    Args:
        lines: The lines of an OBJ file.

    Returns:
        Triangles in file order. Corners without a normal get the face normal.

    Raises:
        ObjFormatError: On malformed vertices or invalid face indices.
    """
    vertices: list[Vec] = []
    normals: list[Vec] = []
    triangles: list[Triangle] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()

        if parts[0] == "v":
            vertices.append(_parse_vector(parts, line_number))
        elif parts[0] == "vn":
            normals.append(_parse_vector(parts, line_number))
        elif parts[0] == "f":
            corners = []
            for token in parts[1:]:
                fields = token.split("/")
                vertex = _resolve_index(fields[0], len(vertices), "vertex", line_number)
                normal = None
                if len(fields) >= 3 and fields[2]:
                    normal = _resolve_index(fields[2], len(normals), "normal", line_number)
                corners.append((vertex, normal))

            if len(corners) < 3:
                raise ObjFormatError(f"line {line_number}: face needs at least 3 corners")

            # Fan triangulation around the first corner
            for k in range(1, len(corners) - 1):
                triangles.append(_make_triangle(corners[0], corners[k], corners[k + 1], vertices, normals))

    logger.debug("Read %d vertices, %d normals, %d triangles", len(vertices), len(normals), len(triangles))
    return triangles


def _make_triangle(a, b, c, vertices: list[Vec], normals: list[Vec]) -> Triangle:
    points = tuple(vertices[corner[0]] for corner in (a, b, c))
    if all(corner[1] is None for corner in (a, b, c)):
        return Triangle.from_vertices(*points)

    face = face_normal(*points)
    corner_normals = tuple(
        normals[corner[1]] if corner[1] is not None else face for corner in (a, b, c)
    )
    return Triangle.from_vertices(*points, normals=corner_normals)


def load_obj(path: str | Path) -> list[Triangle]:
    """Read the triangles of an OBJ file.

    Args:
        path: Path to the .obj file.

    Returns:
        The mesh as a list of triangles.

    Raises:
        OSError: If the file cannot be read.
        ObjFormatError: If the file is malformed.
    """
    obj_path = Path(path)
    with obj_path.open("r", encoding="utf-8") as handle:
        triangles = parse_obj(handle)
    logger.info("Loaded %d triangles from %s", len(triangles), obj_path)
    return triangles

"""Unit tests for the OBJ mesh reader.

Tests cover:
- Vertex and face records
- Fan triangulation of polygons
- Negative (relative) indices
- Vertex normals from v//vn and v/vt/vn corners
- Malformed records and out-of-range indices
"""

import numpy as np
import pytest

QUAD = ["v 0 0 0", "v 1 0 0", "v 1 1 0", "v 0 1 0", "f 1 2 3 4"]


class TestParseObj:
    """Tests for parse_obj()."""

    def test_quad_becomes_two_triangles(self):
        """Test fan triangulation around the first corner."""
        from glint.scene.obj_mesh import parse_obj

        triangles = parse_obj(QUAD)

        assert len(triangles) == 2
        assert np.allclose(triangles[0].vertices[2], [1, 1, 0])
        assert np.allclose(triangles[1].vertices[0], [0, 0, 0])
        assert np.allclose(triangles[1].vertices[1], [1, 1, 0])
        assert np.allclose(triangles[1].vertices[2], [0, 1, 0])

    def test_face_normals_without_vn(self):
        """Test that faces without normals use the face normal."""
        from glint.scene.obj_mesh import parse_obj

        triangle = parse_obj(QUAD)[0]
        for normal in triangle.normals:
            assert np.allclose(normal, [0, 0, 1])

    def test_negative_indices(self):
        """Test that -1 refers to the most recent vertex."""
        from glint.scene.obj_mesh import parse_obj

        triangles = parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f -3 -2 -1"])

        assert len(triangles) == 1
        assert np.allclose(triangles[0].vertices[0], [0, 0, 0])
        assert np.allclose(triangles[0].vertices[2], [0, 1, 0])

    def test_vertex_normals(self):
        """Test v//vn corners; corners without a normal get the face normal."""
        from glint.scene.obj_mesh import parse_obj

        lines = ["v 0 0 0", "v 1 0 0", "v 0 1 0", "vn 1 0 0", "f 1//1 2//1 3"]
        triangle = parse_obj(lines)[0]

        assert np.allclose(triangle.normals[0], [1, 0, 0])
        assert np.allclose(triangle.normals[1], [1, 0, 0])
        assert np.allclose(triangle.normals[2], [0, 0, 1])

    def test_texture_indices_ignored(self):
        """Test that v/vt corners read only the vertex index."""
        from glint.scene.obj_mesh import parse_obj

        lines = ["v 0 0 0", "v 1 0 0", "v 0 1 0", "vt 0 0", "f 1/1 2/1 3/1"]
        assert len(parse_obj(lines)) == 1

    def test_other_records_ignored(self):
        """Test that comments, groups and materials are skipped."""
        from glint.scene.obj_mesh import parse_obj

        lines = ["# comment", "o thing", "g group", "usemtl red", "s off", ""] + QUAD
        assert len(parse_obj(lines)) == 2


class TestMalformed:
    """Tests for rejected OBJ content."""

    def test_index_out_of_range(self):
        """Test that a face referencing a missing vertex raises."""
        from glint.scene.obj_mesh import ObjFormatError, parse_obj

        with pytest.raises(ObjFormatError, match="out of range"):
            parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 1 2 4"])

    def test_index_zero(self):
        """Test that index 0 is invalid in 1-based OBJ."""
        from glint.scene.obj_mesh import ObjFormatError, parse_obj

        with pytest.raises(ObjFormatError):
            parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 0 1 2"])

    def test_too_few_corners(self):
        """Test that faces need at least three corners."""
        from glint.scene.obj_mesh import ObjFormatError, parse_obj

        with pytest.raises(ObjFormatError, match="at least 3"):
            parse_obj(["v 0 0 0", "v 1 0 0", "f 1 2"])

    def test_bad_vertex(self):
        """Test that non-numeric coordinates raise."""
        from glint.scene.obj_mesh import ObjFormatError, parse_obj

        with pytest.raises(ObjFormatError, match="line 1"):
            parse_obj(["v 0 zero 0"])

    def test_is_value_error(self):
        """Test that ObjFormatError can be caught as ValueError."""
        from glint.scene.obj_mesh import ObjFormatError

        assert issubclass(ObjFormatError, ValueError)


class TestLoadObj:
    """Tests for reading OBJ files from disk."""

    def test_load_from_file(self, tmp_path):
        """Test load_obj() on a file."""
        from glint.scene.obj_mesh import load_obj

        path = tmp_path / "quad.obj"
        path.write_text("\n".join(QUAD) + "\n")

        assert len(load_obj(path)) == 2

    def test_example_pyramid(self):
        """Test the pyramid mesh shipped with the examples."""
        from pathlib import Path

        from glint.scene.obj_mesh import load_obj

        path = Path(__file__).resolve().parent.parent / "examples" / "scenes" / "pyramid.obj"
        triangles = load_obj(path)

        # Square base (2) + four sides
        assert len(triangles) == 6
        assert np.allclose(triangles[2].normals[0], [0, -1, 0])

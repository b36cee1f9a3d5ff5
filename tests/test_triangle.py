"""Unit tests for triangle intersection.

Tests cover:
- Hits at the centroid and the unit-triangle scenario
- Barycentric weights
- Misses outside the triangle, behind the ray and parallel to the plane
- Degenerate (colinear) triangles
- Smooth normal interpolation
- Baking a transform into the vertices and normals
"""

import numpy as np


def _unit_triangle():
    from glint.core.ray import vec3
    from glint.geometry import Triangle

    return Triangle.from_vertices(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))


class TestTriangleConstruction:
    """Tests for triangle construction."""

    def test_default_normals_are_face_normal(self):
        """Test that every vertex normal defaults to normalize(cross(v0-v2, v1-v2))."""
        tri = _unit_triangle()
        for n in tri.normals:
            assert np.allclose(n, [0.0, 0.0, 1.0])

    def test_explicit_normals_are_normalized(self):
        """Test that supplied normals are stored as unit vectors."""
        from glint.core.ray import vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(
            vec3(0.0, 0.0, 0.0),
            vec3(1.0, 0.0, 0.0),
            vec3(0.0, 1.0, 0.0),
            normals=(vec3(0.0, 0.0, 2.0), vec3(0.0, 3.0, 0.0), vec3(4.0, 0.0, 0.0)),
        )
        assert np.allclose(tri.normals[1], [0.0, 1.0, 0.0])
        assert np.allclose(tri.normals[2], [1.0, 0.0, 0.0])

    def test_colinear_vertices_give_zero_normals(self):
        """Test that a degenerate triangle can be built without failing."""
        from glint.core.ray import vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(vec3(0.0, 0.0, 0.0), vec3(1.0, 1.0, 1.0), vec3(2.0, 2.0, 2.0))
        assert not np.any(tri.normals[0])


class TestTriangleIntersection:
    """Tests for ray-triangle intersection."""

    def test_unit_triangle_scenario(self):
        """Test hit distance and barycentric weights on the unit triangle."""
        from glint.core.ray import make_ray, ray_at

        tri = _unit_triangle()
        ray = make_ray((0.25, 0.25, -1.0), (0.0, 0.0, 1.0))
        rec = tri.ray_test(ray)

        assert rec.hit
        assert abs(rec.distance - 1.0) < 1e-12
        weights = tri.barycentric(ray_at(ray, rec.distance))
        assert np.allclose(weights, [0.5, 0.25, 0.25])
        assert np.allclose(sorted(weights), [0.25, 0.25, 0.5])

    def test_centroid_along_normal(self):
        """Test that a ray through the centroid hits at the plane distance."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(vec3(0.0, 0.0, 0.0), vec3(3.0, 0.0, 0.0), vec3(0.0, 3.0, 0.0))
        rec = tri.ray_test(make_ray((1.0, 1.0, 2.0), (0.0, 0.0, -1.0)))

        assert abs(rec.distance - 2.0) < 1e-12
        weights = tri.barycentric(vec3(1.0, 1.0, 0.0))
        assert np.allclose(weights, [1.0 / 3.0] * 3)

    def test_tilted_triangle_centroid(self):
        """Test a triangle that is not aligned with any axis plane."""
        from glint.core.ray import dot, make_ray, normalize, vec3
        from glint.geometry import Triangle

        v0, v1, v2 = vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(0.0, 0.0, 1.0)
        tri = Triangle.from_vertices(v0, v1, v2)
        centroid = (v0 + v1 + v2) / 3.0
        normal = tri.normals[0]
        origin = centroid + 2.0 * normal

        rec = tri.ray_test(make_ray(origin, -normal))
        assert abs(rec.distance - 2.0) < 1e-9
        assert np.allclose(tri.barycentric(centroid), [1.0 / 3.0] * 3)
        assert abs(abs(dot(normal, normalize(vec3(1.0, 1.0, 1.0)))) - 1.0) < 1e-12

    def test_outside_triangle_misses(self):
        """Test a ray meeting the plane beyond the hypotenuse."""
        from glint.core.ray import make_ray

        rec = _unit_triangle().ray_test(make_ray((0.8, 0.8, -1.0), (0.0, 0.0, 1.0)))
        assert not rec.hit

    def test_behind_origin_misses(self):
        """Test that a plane behind the ray does not count."""
        from glint.core.ray import make_ray

        rec = _unit_triangle().ray_test(make_ray((0.25, 0.25, 1.0), (0.0, 0.0, 1.0)))
        assert not rec.hit

    def test_parallel_ray_misses(self):
        """Test a ray parallel to the triangle's plane."""
        from glint.core.ray import make_ray

        rec = _unit_triangle().ray_test(make_ray((-1.0, 0.25, 0.0), (1.0, 0.0, 0.0)))
        assert not rec.hit

    def test_degenerate_triangle_misses(self):
        """Test that colinear vertices report no intersection."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(vec3(0.0, 0.0, 0.0), vec3(1.0, 1.0, 1.0), vec3(2.0, 2.0, 2.0))
        assert not tri.ray_test(make_ray((1.0, 1.0, -3.0), (0.0, 0.0, 1.0))).hit
        assert tri.barycentric(vec3(1.0, 1.0, 1.0)) is None

    def test_nearly_degenerate_triangle_misses(self):
        """Test that a sliver below the determinant tolerance is treated as degenerate."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(vec3(0.0, 0.0, 0.0), vec3(0.01, 0.0, 0.0), vec3(0.0, 0.01, 0.0))
        assert not tri.ray_test(make_ray((0.002, 0.002, -1.0), (0.0, 0.0, 1.0))).hit

    def test_smooth_normal_interpolation(self):
        """Test that the hit normal blends the vertex normals by weight."""
        from glint.core.ray import make_ray, normalize, vec3
        from glint.geometry import Triangle

        tri = Triangle.from_vertices(
            vec3(0.0, 0.0, 0.0),
            vec3(1.0, 0.0, 0.0),
            vec3(0.0, 1.0, 0.0),
            normals=(vec3(1.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0)),
        )
        rec = tri.ray_test(make_ray((0.25, 0.25, -1.0), (0.0, 0.0, 1.0)))

        # Weight 0.5 on v0, 0.25 on each of the others
        expected = normalize(0.5 * normalize(vec3(1.0, 0.0, 1.0)) + 0.5 * vec3(0.0, 0.0, 1.0))
        assert np.allclose(rec.normal, expected)


class TestTriangleBake:
    """Tests for baking a transform into a triangle."""

    def test_bake_translation(self):
        """Test that baking moves the vertices and keeps the normals."""
        from glint.core.ray import vec3
        from glint.core.transform import AffineTransform

        baked = _unit_triangle().bake(AffineTransform.translation(vec3(0.0, 0.0, -2.0)))
        assert np.allclose(baked.vertices[1], [1.0, 0.0, -2.0])
        assert np.allclose(baked.normals[0], [0.0, 0.0, 1.0])

    def test_bake_rotation(self):
        """Test that normals rotate with the vertices."""
        from glint.core.ray import vec3
        from glint.core.transform import AffineTransform

        baked = _unit_triangle().bake(AffineTransform.rotation_degrees(vec3(90.0, 0.0, 0.0)))
        assert np.allclose(baked.vertices[2], [0.0, 0.0, 1.0])
        assert np.allclose(baked.normals[0], [0.0, -1.0, 0.0])

    def test_bake_matches_transformed_intersection(self):
        """Test that a baked triangle hits where the transformed one would."""
        from glint.core.ray import make_ray, vec3
        from glint.core.transform import AffineTransform

        t = AffineTransform.translation(vec3(0.0, 0.0, -3.0)).compose(AffineTransform.scaling(2.0, 2.0, 1.0))
        baked = _unit_triangle().bake(t)
        rec = baked.ray_test(make_ray((0.5, 0.5, 0.0), (0.0, 0.0, -1.0)))

        assert abs(rec.distance - 3.0) < 1e-12
        assert np.allclose(rec.normal, [0.0, 0.0, 1.0])

    def test_bake_identity_returns_self(self):
        """Test the identity shortcut."""
        from glint.core.transform import AffineTransform

        tri = _unit_triangle()
        assert tri.bake(AffineTransform.identity()) is tri

    def test_bounding_box(self):
        """Test the component-wise min/max of the vertices."""
        box = _unit_triangle().bounding_box()
        assert np.allclose(box.low, [0.0, 0.0, 0.0])
        assert np.allclose(box.high, [1.0, 1.0, 0.0])

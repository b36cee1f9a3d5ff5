"""Unit tests for axis-aligned bounding boxes.

Tests cover:
- Construction from points
- Transformed boxes
- Slab test against rays
"""

import numpy as np


class TestBoundingBox:
    """Tests for BoundingBox construction and queries."""

    def test_from_points(self):
        """Test min/max construction from points."""
        from glint.core.ray import vec3
        from glint.geometry import BoundingBox

        a = BoundingBox.from_points([vec3(0.0, 1.0, 2.0), vec3(1.0, -1.0, 0.0)])
        assert np.allclose(a.low, [0.0, -1.0, 0.0])
        assert np.allclose(a.high, [1.0, 1.0, 2.0])

    def test_contains(self):
        """Test point containment, including the boundary."""
        from glint.core.ray import vec3
        from glint.geometry import BoundingBox

        box = BoundingBox(low=vec3(0.0, 0.0, 0.0), high=vec3(1.0, 1.0, 1.0))
        assert box.contains(vec3(0.5, 0.5, 0.5))
        assert box.contains(vec3(1.0, 0.0, 1.0))
        assert not box.contains(vec3(1.5, 0.5, 0.5))

    def test_corners(self):
        """Test that all eight corners are produced."""
        from glint.core.ray import vec3
        from glint.geometry import BoundingBox

        corners = BoundingBox(low=vec3(0.0, 0.0, 0.0), high=vec3(1.0, 2.0, 3.0)).corners()
        assert len(corners) == 8
        assert {tuple(c) for c in corners} == {
            (x, y, z) for x in (0.0, 1.0) for y in (0.0, 2.0) for z in (0.0, 3.0)
        }

    def test_transformed_box_encloses_rotated_box(self):
        """Test that a rotated box is enclosed by its transformed bounds."""
        from glint.core.ray import vec3
        from glint.core.transform import AffineTransform
        from glint.geometry import BoundingBox

        box = BoundingBox(low=vec3(-1.0, -1.0, -1.0), high=vec3(1.0, 1.0, 1.0))
        rotated = box.transformed(AffineTransform.rotation_degrees(vec3(0.0, 0.0, 45.0)))
        root2 = np.sqrt(2.0)
        assert np.allclose(rotated.low, [-root2, -root2, -1.0])
        assert np.allclose(rotated.high, [root2, root2, 1.0])


class TestSlabTest:
    """Tests for ray-box overlap."""

    def test_ray_through_box(self):
        """Test rays that pass through the box."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import BoundingBox

        box = BoundingBox(low=vec3(-1.0, -1.0, -6.0), high=vec3(1.0, 1.0, -4.0))
        assert box.hit_by(make_ray((0, 0, 0), (0, 0, -1)))
        assert box.hit_by(make_ray((0, 0, 0), (0.1, 0.1, -1)))

    def test_ray_missing_box(self):
        """Test rays that pass beside or point away from the box."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import BoundingBox

        box = BoundingBox(low=vec3(-1.0, -1.0, -6.0), high=vec3(1.0, 1.0, -4.0))
        assert not box.hit_by(make_ray((0, 0, 0), (0, 0, 1)))
        assert not box.hit_by(make_ray((3, 0, 0), (0, 0, -1)))
        assert not box.hit_by(make_ray((0, 0, 0), (1, 0, -1)))

    def test_ray_starting_inside(self):
        """Test that a ray starting in the box overlaps it."""
        from glint.core.ray import make_ray, vec3
        from glint.geometry import BoundingBox

        box = BoundingBox(low=vec3(-1.0, -1.0, -1.0), high=vec3(1.0, 1.0, 1.0))
        assert box.hit_by(make_ray((0, 0, 0), (0, 1, 0)))

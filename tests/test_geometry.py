"""Unit tests for shapes, bounding boxes and transforms.

Tests cover:
- Sphere hits from outside and inside, misses, tangents
- Plane, quad and box intersections
- Degenerate input: zero directions, inverted and empty ranges
- Bounding box slab test including axis-parallel rays
- Object transforms and their effect on distances
"""

import math

import numpy as np
import pytest


def _ray(origin, direction, t_min=1e-4, t_max=1e10):
    from spectracer.core.ray import Ray

    return Ray(origin, direction, t_min, t_max)


class TestSphere:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test a ray hitting the sphere head-on from outside."""
        from spectracer.geometry.sphere import Sphere

        hit = Sphere((0.0, 0.0, 0.0), 1.0).intersect(_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        assert np.allclose(hit.point, [0.0, 0.0, 1.0])
        assert np.allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_miss(self):
        """Test a ray passing beside the sphere."""
        from spectracer.geometry.sphere import Sphere

        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        assert sphere.intersect(_ray((2.0, 0.0, 5.0), (0.0, 0.0, -1.0))) is None

    def test_inside_hits_far_side(self):
        """Test a ray starting inside hits the far wall with an outward normal."""
        from spectracer.geometry.sphere import Sphere

        hit = Sphere((0.0, 0.0, 0.0), 2.0).intersect(_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert hit.t == pytest.approx(2.0)
        assert np.allclose(hit.normal, [1.0, 0.0, 0.0])

    def test_behind_origin(self):
        """Test a sphere behind the ray is not hit."""
        from spectracer.geometry.sphere import Sphere

        sphere = Sphere((0.0, 0.0, 5.0), 1.0)
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))) is None

    def test_range_excludes_hit(self):
        """Test hits beyond t_max are ignored."""
        from spectracer.geometry.sphere import Sphere

        sphere = Sphere((0.0, 0.0, -10.0), 1.0)
        assert sphere.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=5.0)) is None

    def test_large_distance_stability(self):
        """Test a small sphere far away is still hit accurately."""
        from spectracer.geometry.sphere import Sphere

        hit = Sphere((0.0, 0.0, -1e5), 1.0).intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.t == pytest.approx(1e5 - 1.0, rel=1e-9)

    def test_invalid_radius(self):
        """Test a non-positive radius is rejected."""
        from spectracer.geometry.sphere import Sphere

        with pytest.raises(ValueError):
            Sphere((0.0, 0.0, 0.0), 0.0)

    def test_bounds(self):
        """Test the bounding box encloses the sphere."""
        from spectracer.geometry.sphere import Sphere

        bounds = Sphere((1.0, 2.0, 3.0), 0.5).bounds()
        assert np.allclose(bounds.minimum, [0.5, 1.5, 2.5])
        assert np.allclose(bounds.maximum, [1.5, 2.5, 3.5])


class TestPlane:
    """Tests for ray-plane intersection."""

    def test_hit(self):
        """Test a ray falling onto a floor plane."""
        from spectracer.geometry.plane import Plane

        plane = Plane((0.0, -1.0, 0.0), (0.0, 2.0, 0.0))
        hit = plane.intersect(_ray((0.0, 1.0, 0.0), (0.0, -1.0, 0.0)))
        assert hit.t == pytest.approx(2.0)
        assert np.allclose(hit.normal, [0.0, 1.0, 0.0])

    def test_parallel_miss(self):
        """Test a ray parallel to the plane misses it."""
        from spectracer.geometry.plane import Plane

        plane = Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert plane.intersect(_ray((0.0, 1.0, 0.0), (1.0, 0.0, 0.0))) is None

    def test_unbounded(self):
        """Test planes report no bounding box."""
        from spectracer.geometry.plane import Plane

        assert Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)).bounds() is None

    def test_zero_normal_rejected(self):
        """Test a zero normal is rejected."""
        from spectracer.geometry.plane import Plane

        with pytest.raises(ValueError):
            Plane((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


class TestQuad:
    """Tests for ray-quad intersection."""

    def _floor(self):
        from spectracer.geometry.quad import Quad

        return Quad((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))

    def test_normal_right_hand_rule(self):
        """Test the normal is normalize(u x v)."""
        assert np.allclose(self._floor().normal, [0.0, -1.0, 0.0])

    def test_hit_inside(self):
        """Test a ray through the interior hits."""
        hit = self._floor().intersect(_ray((0.5, 1.0, 0.5), (0.0, -1.0, 0.0)))
        assert hit.t == pytest.approx(1.0)
        assert np.allclose(hit.point, [0.5, 0.0, 0.5])

    def test_corner_and_edge_hit(self):
        """Test the boundary belongs to the quad."""
        assert self._floor().intersect(_ray((1.0, 1.0, 1.0), (0.0, -1.0, 0.0))) is not None
        assert self._floor().intersect(_ray((0.0, 1.0, 0.3), (0.0, -1.0, 0.0))) is not None

    def test_miss_outside(self):
        """Test a ray past the edge misses."""
        assert self._floor().intersect(_ray((1.5, 1.0, 0.5), (0.0, -1.0, 0.0))) is None

    def test_parallel_miss(self):
        """Test a ray in the quad's plane direction misses."""
        assert self._floor().intersect(_ray((0.5, 1.0, 0.5), (1.0, 0.0, 0.0))) is None

    def test_area(self):
        """Test the area of a non-square parallelogram."""
        from spectracer.geometry.quad import Quad

        assert Quad((0, 0, 0), (2, 0, 0), (1, 3, 0)).area() == pytest.approx(6.0)

    def test_parallel_edges_rejected(self):
        """Test a quad with parallel edges is rejected."""
        from spectracer.geometry.quad import Quad

        with pytest.raises(ValueError):
            Quad((0, 0, 0), (1, 0, 0), (2, 0, 0))


class TestBox:
    """Tests for ray-box intersection."""

    def test_hit_from_outside(self):
        """Test the entry face and its outward normal."""
        from spectracer.geometry.box import Box

        box = Box.from_center((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))
        hit = box.intersect(_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert hit.t == pytest.approx(4.0)
        assert np.allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_hit_from_inside(self):
        """Test a ray starting inside exits through the far face."""
        from spectracer.geometry.box import Box

        box = Box((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
        hit = box.intersect(_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0)))
        assert hit.t == pytest.approx(1.0)
        assert np.allclose(hit.normal, [0.0, -1.0, 0.0])

    def test_axis_parallel_miss(self):
        """Test an axis-parallel ray outside a slab misses without dividing by zero."""
        from spectracer.geometry.box import Box

        box = Box((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
        assert box.intersect(_ray((0.0, 2.0, 5.0), (0.0, 0.0, -1.0))) is None

    def test_normal_at(self):
        """Test the normal of the nearest face."""
        from spectracer.geometry.box import Box

        box = Box((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
        assert np.allclose(box.normal_at((0.2, 0.99, 0.1)), [0.0, 1.0, 0.0])
        assert np.allclose(box.normal_at((-1.0, 0.0, 0.0)), [-1.0, 0.0, 0.0])

    def test_flat_box_rejected(self):
        """Test a box without volume is rejected."""
        from spectracer.geometry.box import Box

        with pytest.raises(ValueError):
            Box((0.0, 0.0, 0.0), (1.0, 0.0, 1.0))


class TestDegenerateRays:
    """Every shape rejects rays that cannot hit anything."""

    @pytest.fixture
    def shapes(self):
        from spectracer.geometry.box import Box
        from spectracer.geometry.plane import Plane
        from spectracer.geometry.quad import Quad
        from spectracer.geometry.sphere import Sphere

        return [
            Sphere((0.0, 0.0, -3.0), 1.0),
            Plane((0.0, 0.0, -3.0), (0.0, 0.0, 1.0)),
            Quad((-1.0, -1.0, -3.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0)),
            Box((-1.0, -1.0, -4.0), (1.0, 1.0, -2.0)),
        ]

    def test_sanity_hit(self, shapes):
        """Test every shape is hit by the reference ray."""
        for shape in shapes:
            assert shape.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))) is not None

    def test_inverted_range(self, shapes):
        """Test t_min > t_max yields no intersection."""
        for shape in shapes:
            assert shape.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 5.0, 1.0)) is None

    def test_zero_direction(self, shapes):
        """Test a zero direction yields no intersection."""
        for shape in shapes:
            assert shape.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))) is None

    def test_nan_range(self, shapes):
        """Test NaN bounds yield no intersection."""
        for shape in shapes:
            assert shape.intersect(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), math.nan, 10.0)) is None

    def test_shapes_satisfy_protocol(self, shapes):
        """Test every shape implements the Shape protocol."""
        from spectracer.geometry.shape import Shape

        for shape in shapes:
            assert isinstance(shape, Shape)


class TestAabb:
    """Tests for the bounding box slab test."""

    def test_hit_and_miss(self):
        """Test rays towards and away from the box."""
        from spectracer.geometry.aabb import Aabb

        box = Aabb((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
        assert box.hit(_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert not box.hit(_ray((0.0, 0.0, 5.0), (0.0, 0.0, 1.0)))
        assert not box.hit(_ray((3.0, 0.0, 5.0), (0.0, 0.0, -1.0)))

    def test_range_limits(self):
        """Test a box beyond t_max is not hit."""
        from spectracer.geometry.aabb import Aabb

        box = Aabb((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))
        assert not box.hit(_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_max=3.0))

    def test_corners_are_sorted(self):
        """Test swapped corners are normalized and all eight corners are listed."""
        from spectracer.geometry.aabb import Aabb

        box = Aabb((1.0, 1.0, 1.0), (0.0, 0.0, 0.0))
        assert np.allclose(box.minimum, [0.0, 0.0, 0.0])
        assert len(box.corners()) == 8
        assert np.allclose(box.center, [0.5, 0.5, 0.5])

    def test_union(self):
        """Test the union encloses both boxes."""
        from spectracer.geometry.aabb import Aabb

        union = Aabb((0, 0, 0), (1, 1, 1)).union(Aabb((-1, 2, 0), (0, 3, 0.5)))
        assert np.allclose(union.minimum, [-1, 0, 0])
        assert np.allclose(union.maximum, [1, 3, 1])


class TestTransform:
    """Tests for object transforms."""

    def test_identity(self):
        """Test the default transform is the identity."""
        from spectracer.geometry.transform import IDENTITY, Transform

        assert Transform().is_identity
        assert IDENTITY.is_identity

    def test_rotation_about_y(self):
        """Test rotating +x by 90 degrees about y gives -z."""
        from spectracer.geometry.transform import Transform

        transform = Transform(rotation_deg=(0.0, 90.0, 0.0))
        assert np.allclose(transform.point_to_world((1.0, 0.0, 0.0)), [0.0, 0.0, -1.0])

    def test_point_round_trip(self):
        """Test local and world conversions are inverse to each other."""
        from spectracer.geometry.transform import Transform

        transform = Transform((1.0, -2.0, 3.0), (10.0, 20.0, 30.0), 2.5)
        point = np.array([0.3, -0.7, 1.1])
        assert np.allclose(transform.point_to_local(transform.point_to_world(point)), point)

    def test_scaled_sphere_distance(self):
        """Test world distances are correct for a scaled object."""
        from spectracer.geometry.sphere import Sphere
        from spectracer.geometry.transform import Transform

        transform = Transform(translation=(0.0, 0.0, -10.0), scale=2.0)
        local_ray = transform.ray_to_local(_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)))
        hit = Sphere((0.0, 0.0, 0.0), 1.0).intersect(local_ray)
        assert transform.t_to_world(hit.t) == pytest.approx(8.0)

    def test_bounds_to_world(self):
        """Test rotated bounds enclose the rotated box."""
        from spectracer.geometry.aabb import Aabb
        from spectracer.geometry.transform import Transform

        transform = Transform(rotation_deg=(0.0, 45.0, 0.0))
        bounds = transform.bounds_to_world(Aabb((-1, -1, -1), (1, 1, 1)))
        assert bounds.maximum[0] == pytest.approx(math.sqrt(2.0))
        assert bounds.maximum[1] == pytest.approx(1.0)

    def test_invalid_scale(self):
        """Test a non-positive scale is rejected."""
        from spectracer.geometry.transform import Transform

        with pytest.raises(ValueError):
            Transform(scale=0.0)

"""Unit tests for rays and vector helpers.

Tests cover:
- Ray construction, normalization and degenerate directions
- Parametric range helpers
- Reflection, refraction and Fresnel helpers
- Secondary ray origin offsets
"""

import math

import numpy as np
import pytest


class TestRay:
    """Tests for the Ray dataclass."""

    def test_direction_is_normalized(self):
        """Test the direction is stored with unit length."""
        from spectracer.core.ray import Ray

        ray = Ray((0.0, 0.0, 0.0), (0.0, 3.0, 4.0))
        assert np.allclose(ray.direction, [0.0, 0.6, 0.8])
        assert not ray.degenerate

    def test_zero_direction_is_degenerate(self):
        """Test a zero-length direction marks the ray as degenerate."""
        from spectracer.core.ray import Ray

        ray = Ray((1.0, 2.0, 3.0), (0.0, 0.0, 0.0))
        assert ray.degenerate
        assert not np.any(ray.direction)

    def test_nan_direction_is_degenerate(self):
        """Test a non-finite direction marks the ray as degenerate."""
        from spectracer.core.ray import Ray

        assert Ray((0.0, 0.0, 0.0), (math.nan, 0.0, 1.0)).degenerate

    def test_ray_at(self):
        """Test evaluating points along the ray."""
        from spectracer.core.ray import Ray, ray_at

        ray = Ray((1.0, 0.0, 0.0), (0.0, 0.0, -2.0))
        assert np.allclose(ray_at(ray, 3.0), [1.0, 0.0, -3.0])

    def test_vectors_are_read_only(self):
        """Test rays are immutable."""
        from spectracer.core.ray import Ray

        ray = Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            ray.origin[0] = 1.0

    def test_with_range(self):
        """Test replacing the parametric range."""
        from spectracer.core.ray import Ray

        ray = Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        narrowed = ray.with_range(0.5, 2.0)
        assert narrowed.t_min == 0.5
        assert narrowed.t_max == 2.0
        assert np.array_equal(narrowed.direction, ray.direction)

    def test_inverted_range(self):
        """Test t_min > t_max is reported as an invalid range."""
        from spectracer.core.ray import Ray

        assert not Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 2.0, 1.0).has_valid_range


class TestVectorHelpers:
    """Tests for reflection, refraction and friends."""

    def test_reflect(self):
        """Test mirror reflection about a normal."""
        from spectracer.core.ray import reflect, vec3

        out = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
        assert np.allclose(out, [1.0, 1.0, 0.0])

    def test_refract_straight_through(self):
        """Test a ray at normal incidence is not bent."""
        from spectracer.core.ray import refract, vec3

        out = refract(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.0 / 1.5)
        assert np.allclose(out, [0.0, 0.0, -1.0])

    def test_refract_snell(self):
        """Test the refracted angle follows Snell's law."""
        from spectracer.core.ray import normalize, refract, vec3

        incident = normalize(vec3(1.0, -1.0, 0.0))  # 45 degrees
        out = refract(incident, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
        sin_out = abs(out[0])
        assert sin_out == pytest.approx(math.sin(math.radians(45.0)) / 1.5)

    def test_total_internal_reflection(self):
        """Test refraction returns None beyond the critical angle."""
        from spectracer.core.ray import normalize, refract, vec3

        incident = normalize(vec3(1.0, -0.2, 0.0))
        assert refract(incident, vec3(0.0, 1.0, 0.0), 1.5) is None

    def test_schlick_normal_incidence(self):
        """Test Schlick's approximation gives r0 at normal incidence."""
        from spectracer.core.ray import schlick_fresnel

        assert schlick_fresnel(1.0, 1.5) == pytest.approx(0.04)
        assert schlick_fresnel(0.0, 1.5) == pytest.approx(1.0)

    def test_offset_origin_follows_direction(self):
        """Test the origin is pushed to the side the new ray travels to."""
        from spectracer.core.ray import RAY_EPSILON, offset_origin, vec3

        point = vec3(0.0, 0.0, 0.0)
        normal = vec3(0.0, 1.0, 0.0)
        above = offset_origin(point, normal, vec3(0.0, 1.0, 0.0))
        below = offset_origin(point, normal, vec3(0.0, -1.0, 0.0))
        assert above[1] == pytest.approx(RAY_EPSILON)
        assert below[1] == pytest.approx(-RAY_EPSILON)

    def test_onb_is_orthonormal(self):
        """Test the basis vectors are unit length and orthogonal."""
        from spectracer.core.ray import build_onb_from_normal, normalize, vec3

        t, b, n = build_onb_from_normal(normalize(vec3(0.3, 0.5, -0.8)))
        for a_vec, b_vec in ((t, b), (b, n), (t, n)):
            assert abs(float(np.dot(a_vec, b_vec))) < 1e-9
        for vec in (t, b, n):
            assert float(np.linalg.norm(vec)) == pytest.approx(1.0)

    def test_random_in_unit_sphere(self):
        """Test sampled points lie inside the unit sphere."""
        from spectracer.core.ray import random_in_unit_sphere

        rng = np.random.default_rng(1)
        for _ in range(50):
            point = random_in_unit_sphere(rng)
            assert float(np.dot(point, point)) < 1.0

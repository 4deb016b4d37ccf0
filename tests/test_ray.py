"""Tests for rays."""

import pytest


class TestRay:
    """Test ray construction, evaluation and transformation."""

    def test_create(self):
        """Test that a ray stores its origin and direction."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector

        r = Ray(point(1, 2, 3), vector(4, 5, 6))

        assert r.origin == point(1, 2, 3)
        assert r.direction == vector(4, 5, 6)

    def test_origin_must_be_point(self):
        """Test that a vector origin is rejected."""
        from src.whitted.core.errors import InvalidOperandError
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import vector

        with pytest.raises(InvalidOperandError):
            Ray(vector(1, 2, 3), vector(0, 0, 1))

    def test_direction_must_be_vector(self):
        """Test that a point direction is rejected."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point

        with pytest.raises(TypeError):
            Ray(point(0, 0, 0), point(0, 0, 1))

    def test_position(self):
        """Test computing points along the ray."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector

        r = Ray(point(2, 3, 4), vector(1, 0, 0))

        assert r.position(0) == point(2, 3, 4)
        assert r.position(1) == point(3, 3, 4)
        assert r.position(-1) == point(1, 3, 4)
        assert r.position(2.5) == point(4.5, 3, 4)

    def test_translate(self):
        """Test that translation moves the origin only."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector

        r = Ray(point(1, 2, 3), vector(0, 1, 0))
        r2 = r.transform(translation(3, 4, 5))

        assert r2.origin == point(4, 6, 8)
        assert r2.direction == vector(0, 1, 0)

    def test_scale_keeps_direction_unnormalized(self):
        """Test that scaling affects the direction length."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import scaling
        from src.whitted.core.tuples import point, vector

        r = Ray(point(1, 2, 3), vector(0, 1, 0))
        r2 = r.transform(scaling(2, 3, 4))

        assert r2.origin == point(2, 6, 12)
        assert r2.direction == vector(0, 3, 0)

    def test_transform_returns_new_ray(self):
        """Test that the original ray is unchanged."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector

        r = Ray(point(1, 2, 3), vector(0, 1, 0))
        r.transform(translation(3, 4, 5))

        assert r == Ray(point(1, 2, 3), vector(0, 1, 0))

"""Tests for the shared Shape behaviour, spheres and planes.

This module tests:
- Transform handling, inverse caching and singular transforms
- Ray/sphere intersection, including transformed spheres
- Sphere normals in object and world space
- Ray/plane intersection and normals
"""

import math

import pytest


class TestShapeTransform:
    """Test transform handling common to all shapes."""

    def test_default_transform_and_material(self):
        """Test that a shape starts with the identity and a default material."""
        from src.whitted.core.matrix import IDENTITY
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.material import Material

        s = Sphere()

        assert s.transform == IDENTITY
        assert s.material == Material()
        assert s.parent is None

    def test_assign_transform_updates_inverse(self):
        """Test that assigning a transform caches its inverse."""
        from src.whitted.core.transforms import translation
        from src.whitted.geometry.sphere import Sphere

        s = Sphere()
        s.transform = translation(2, 3, 4)

        assert s.transform == translation(2, 3, 4)
        assert s.inverse == translation(-2, -3, -4)

    def test_singular_transform_rejected(self):
        """Test that a singular transform is rejected on assignment."""
        from src.whitted.core.errors import NonInvertibleMatrixError
        from src.whitted.core.transforms import scaling
        from src.whitted.geometry.sphere import Sphere

        with pytest.raises(NonInvertibleMatrixError):
            Sphere(transform=scaling(1, 0, 1))

    def test_intersect_does_not_mutate_ray(self):
        """Test that intersecting a transformed shape leaves the ray alone."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import scaling
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        Sphere(transform=scaling(2, 2, 2)).intersect(r)

        assert r == Ray(point(0, 0, -5), vector(0, 0, 1))


class TestSphereIntersection:
    """Test ray/sphere intersection."""

    @pytest.mark.parametrize(
        "origin,expected",
        [
            ((0, 0, -5), [4.0, 6.0]),
            ((0, 1, -5), [5.0, 5.0]),
            ((0, 0, 0), [-1.0, 1.0]),
            ((0, 0, 5), [-6.0, -4.0]),
        ],
    )
    def test_intersections_along_z(self, origin, expected):
        """Test hits through the center, tangent, from inside and from behind."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        s = Sphere()
        xs = s.intersect(Ray(point(*origin), vector(0, 0, 1)))

        assert [x.t for x in xs] == pytest.approx(expected)
        assert all(x.shape is s for x in xs)

    def test_miss(self):
        """Test a ray passing above the sphere."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        xs = Sphere().intersect(Ray(point(0, 2, -5), vector(0, 0, 1)))

        assert len(xs) == 0

    def test_scaled_sphere(self):
        """Test intersecting a scaled sphere."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import scaling
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        s = Sphere(transform=scaling(2, 2, 2))
        xs = s.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))

        assert [x.t for x in xs] == pytest.approx([3.0, 7.0])

    def test_translated_sphere(self):
        """Test missing a translated sphere."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        s = Sphere(transform=translation(5, 0, 0))

        assert len(s.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))) == 0


class TestSphereNormal:
    """Test sphere normals."""

    @pytest.mark.parametrize(
        "p,expected",
        [
            ((1, 0, 0), (1, 0, 0)),
            ((0, 1, 0), (0, 1, 0)),
            ((0, 0, 1), (0, 0, 1)),
        ],
    )
    def test_axis_normals(self, p, expected):
        """Test normals on the axes."""
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        assert Sphere().normal_at(point(*p)) == vector(*expected)

    def test_non_axial_normal_is_normalized(self):
        """Test a normal at a non-axial point."""
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        k = math.sqrt(3) / 3
        n = Sphere().normal_at(point(k, k, k))

        assert n == vector(k, k, k)
        assert n == n.normalize()

    def test_translated_normal(self):
        """Test the normal on a translated sphere."""
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        s = Sphere(transform=translation(0, 1, 0))

        assert s.normal_at(point(0, 1.70711, -0.70711)) == vector(0, 0.70711, -0.70711)

    def test_transformed_normal(self):
        """Test the normal on a scaled and rotated sphere."""
        from src.whitted.core.transforms import rotation_z, scaling
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.sphere import Sphere

        s = Sphere(transform=scaling(1, 0.5, 1) @ rotation_z(math.pi / 5))
        n = s.normal_at(point(0, math.sqrt(2) / 2, -math.sqrt(2) / 2))

        assert n == vector(0, 0.97014, -0.24254)


class TestPlane:
    """Test the infinite plane."""

    def test_normal_is_constant(self):
        """Test that the normal is +y everywhere."""
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane

        p = Plane()

        for pt in (point(0, 0, 0), point(10, 0, -10), point(-5, 0, 150)):
            assert p.local_normal_at(pt) == vector(0, 1, 0)

    def test_parallel_ray_misses(self):
        """Test that parallel and coplanar rays miss."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane

        p = Plane()

        assert p.local_intersect(Ray(point(0, 10, 0), vector(0, 0, 1))) == []
        assert p.local_intersect(Ray(point(0, 0, 0), vector(0, 0, 1))) == []

    def test_hit_from_above_and_below(self):
        """Test rays crossing the plane from either side."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane

        p = Plane()
        above = p.local_intersect(Ray(point(0, 1, 0), vector(0, -1, 0)))
        below = p.local_intersect(Ray(point(0, -1, 0), vector(0, 1, 0)))

        assert [x.t for x in above] == [1.0]
        assert above[0].shape is p
        assert [x.t for x in below] == [1.0]

    def test_transformed_plane(self):
        """Test a plane rotated into the xy plane."""
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import rotation_x, translation
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane

        wall = Plane(transform=translation(0, 0, 3) @ rotation_x(math.pi / 2))
        xs = wall.intersect(Ray(point(0, 0, 0), vector(0, 0, 1)))

        assert [x.t for x in xs] == pytest.approx([3.0])
        assert wall.normal_at(point(1, 1, 3)) == vector(0, 0, 1)

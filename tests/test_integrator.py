"""Tests for the Taichi parallel integrator.

This module tests the parallel kernel against the serial renderer:
- Scene and camera upload, including group flattening
- Single-ray tracing of direct, reflected and refracted light
- Whole-image agreement with the serial render
- Capacity and depth limits

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run, so module-level
imports of modules containing ti.field() declarations would fail.
"""

import math
from dataclasses import replace

import numpy as np
import pytest


def _default_camera(size=11):
    from src.whitted.camera.pinhole import Camera
    from src.whitted.core.transforms import view_transform
    from src.whitted.core.tuples import point, vector

    transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    return Camera(size, size, math.pi / 2, transform)


class TestSceneUpload:
    """Test flattening the scene into kernel fields."""

    def test_upload_counts_leaf_shapes(self):
        """Test that groups are replaced by their leaves."""
        from src.whitted.core.integrator import get_object_count, upload_scene
        from src.whitted.scene.presets import create_showcase_scene

        world, _ = create_showcase_scene()

        count = upload_scene(world)

        assert count == 8
        assert get_object_count() == 8

    def test_too_many_lights(self):
        """Test that exceeding MAX_LIGHTS raises ValueError."""
        from src.whitted.core.color import WHITE
        from src.whitted.core.integrator import MAX_LIGHTS, upload_scene
        from src.whitted.core.tuples import point
        from src.whitted.scene.lights import PointLight
        from src.whitted.scene.world import World

        lights = [PointLight(point(0, i, 0), WHITE) for i in range(MAX_LIGHTS + 1)]

        with pytest.raises(ValueError, match="lights"):
            upload_scene(World([], lights))

    def test_too_many_objects(self):
        """Test that exceeding MAX_OBJECTS raises ValueError."""
        from src.whitted.core.integrator import MAX_OBJECTS, upload_scene
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.world import World

        with pytest.raises(ValueError, match="shapes"):
            upload_scene(World([Sphere() for _ in range(MAX_OBJECTS + 1)]))

    def test_unsupported_shape(self):
        """Test that a shape without a kernel counterpart raises TypeError."""
        from src.whitted.core.integrator import upload_scene
        from src.whitted.core.tuples import vector
        from src.whitted.geometry.shape import Shape
        from src.whitted.scene.world import World

        class Disk(Shape):
            def local_intersect(self, local_ray):
                return []

            def local_normal_at(self, local_point):
                return vector(0, 1, 0)

        with pytest.raises(TypeError):
            upload_scene(World([Disk()]))

    def test_image_too_large(self):
        """Test that a camera larger than the render target is rejected."""
        from src.whitted.camera.pinhole import Camera
        from src.whitted.core.integrator import MAX_IMAGE_WIDTH, upload_camera

        with pytest.raises(ValueError, match="exceed"):
            upload_camera(Camera(MAX_IMAGE_WIDTH + 1, 10, math.pi / 2))


class TestTraceRay:
    """Test tracing single rays in the kernel."""

    def test_trace_before_upload_raises(self):
        """Test that tracing without a scene raises RuntimeError."""
        from src.whitted.core import integrator
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector

        integrator._scene_uploaded[None] = 0

        with pytest.raises(RuntimeError, match="not uploaded"):
            integrator.trace_ray(Ray(point(0, 0, -5), vector(0, 0, 1)))

    def test_direct_lighting(self):
        """Test the outer sphere of the reference world."""
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.scene.presets import default_world

        upload_scene(default_world())

        color = trace_ray(Ray(point(0, 0, -5), vector(0, 0, 1)))

        assert color == pytest.approx((0.38066, 0.47583, 0.2855), abs=1e-3)

    def test_miss_is_black(self):
        """Test that a ray missing every object returns black."""
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.scene.presets import default_world

        upload_scene(default_world())

        assert trace_ray(Ray(point(0, 0, -5), vector(0, 1, 0))) == (0.0, 0.0, 0.0)

    def test_no_lights_gives_ambient_only(self):
        """Test that a world without lights shows surface times ambient."""
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.scene.presets import default_world

        world = default_world()
        world.lights = []
        upload_scene(world)

        color = trace_ray(Ray(point(0, 0, -5), vector(0, 0, 1)))

        assert color == pytest.approx((0.08, 0.1, 0.06), abs=1e-4)

    def test_light_on_the_surface(self):
        """Test that a light at the over-point gives ambient, not NaN."""
        from src.whitted.core.color import WHITE
        from src.whitted.core.config import get_config
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane
        from src.whitted.scene.lights import PointLight
        from src.whitted.scene.world import World

        bias = get_config().kernel_bias
        upload_scene(World([Plane()], [PointLight(point(0, bias, 0), WHITE)]))

        color = trace_ray(Ray(point(0, 1, 0), vector(0, -1, 0)))

        assert np.all(np.isfinite(color))
        assert color == pytest.approx((0.1, 0.1, 0.1), abs=1e-4)

    def test_reflection_matches_serial(self):
        """Test a ray bouncing off a half-mirror floor."""
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane
        from src.whitted.materials.material import Material
        from src.whitted.scene.presets import default_world

        world = default_world()
        world.add_object(
            Plane(transform=translation(0, -1, 0), material=Material(reflectivity=0.5))
        )
        k = math.sqrt(2) / 2
        ray = Ray(point(0, 0, -3), vector(0, -k, k))
        upload_scene(world)

        expected = world.color_at(ray, 5).to_numpy()
        actual = np.array(trace_ray(ray, max_depth=5))

        np.testing.assert_allclose(actual, expected, atol=2e-3)

    def test_refraction_matches_serial(self):
        """Test a ray passing through a glass floor onto a red ball."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.transforms import translation
        from src.whitted.core.tuples import point, vector
        from src.whitted.geometry.plane import Plane
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.materials.material import Material
        from src.whitted.scene.presets import default_world

        world = default_world()
        world.add_object(
            Plane(
                transform=translation(0, -1, 0),
                material=Material(transparency=0.5, refractive_index=1.5),
            )
        )
        world.add_object(
            Sphere(
                transform=translation(0, -3.5, -0.5),
                material=Material(color=Color(1, 0, 0), ambient=0.5),
            )
        )
        k = math.sqrt(2) / 2
        ray = Ray(point(0, 0, -3), vector(0, -k, k))
        upload_scene(world)

        expected = world.color_at(ray, 5).to_numpy()
        actual = np.array(trace_ray(ray, max_depth=5))

        np.testing.assert_allclose(actual, expected, atol=2e-3)

    def test_nested_glass_matches_serial(self):
        """Test refractive indices through a glass sphere inside another."""
        from src.whitted.core.integrator import trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.materials.patterns import PositionPattern
        from src.whitted.scene.presets import default_world

        world = default_world()
        a, b = world.objects
        a.material = replace(a.material, ambient=1.0, pattern=PositionPattern())
        b.material = replace(b.material, transparency=1.0, refractive_index=1.5)
        ray = Ray(point(0, 0, 0.1), vector(0, 1, 0))
        upload_scene(world)

        expected = world.color_at(ray, 5).to_numpy()
        actual = np.array(trace_ray(ray, max_depth=5))

        np.testing.assert_allclose(actual, expected, atol=5e-3)

    def test_depth_out_of_range(self):
        """Test that depths the work stack cannot hold are rejected."""
        from src.whitted.core.integrator import MAX_STACK, trace_ray, upload_scene
        from src.whitted.core.ray import Ray
        from src.whitted.core.tuples import point, vector
        from src.whitted.scene.presets import default_world

        upload_scene(default_world())
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))

        with pytest.raises(ValueError):
            trace_ray(ray, max_depth=MAX_STACK)
        with pytest.raises(ValueError):
            trace_ray(ray, max_depth=-1)


class TestRenderImage:
    """Test whole-image rendering against the serial renderer."""

    def test_default_world_matches_serial(self):
        """Test the reference render in parallel."""
        from src.whitted.core.renderer import render, render_parallel
        from src.whitted.scene.presets import default_world

        camera = _default_camera()
        world = default_world()

        serial = render(camera, world).to_numpy()
        parallel = render_parallel(camera, world).to_numpy()

        assert parallel.shape == serial.shape == (11, 11, 3)
        np.testing.assert_allclose(parallel[5, 5], [0.38066, 0.47583, 0.2855], atol=1e-3)
        np.testing.assert_allclose(parallel, serial, atol=1e-2)

    def test_showcase_matches_serial(self):
        """Test that the showcase agrees with the serial render outside glass edges."""
        from src.whitted.core.integrator import render_image
        from src.whitted.core.renderer import render
        from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene

        world, camera = create_showcase_scene(ShowcaseParams(width=40, height=20))

        serial = render(camera, world, max_depth=4).to_numpy()
        parallel = render_image(camera, world, max_depth=4)

        close = np.all(np.abs(parallel - serial) < 1e-2, axis=-1)
        assert parallel.dtype == np.float64
        assert close.mean() >= 0.98

    def test_depth_zero(self):
        """Test that depth zero renders direct lighting only."""
        from src.whitted.core.integrator import render_image
        from src.whitted.core.renderer import render
        from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene

        world, camera = create_showcase_scene(ShowcaseParams(width=16, height=8))

        serial = render(camera, world, max_depth=0).to_numpy()
        parallel = render_image(camera, world, max_depth=0)

        close = np.all(np.abs(parallel - serial) < 1e-2, axis=-1)
        assert close.all()

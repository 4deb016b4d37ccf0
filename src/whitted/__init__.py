"""Python implementation of a recursive Whitted-style ray tracer.

This package renders scenes of transformed primitives with Phong lighting,
hard shadows, mirror reflection and Snell refraction. It supports:
- Spheres, planes, cubes, cylinders, cones and nested groups
- Stripe, gradient, ring, checkers and position patterns
- A sequential reference renderer and a Taichi parallel render kernel
- PPM and PNG export

Subpackages:
    core: Tuples, colors, matrices, transforms, rays, canvas and renderers
    geometry: Shape primitives and intersection records
    materials: Phong materials, patterns and the lighting model
    scene: Lights, the world and preset scenes
    camera: Pinhole camera with per-pixel ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"

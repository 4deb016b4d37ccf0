"""Taichi parallel Whitted integrator.

This module renders the same image as ``src.whitted.core.renderer.render``,
but with a single Taichi kernel whose outermost loop runs over pixels in
parallel. The Python scene graph is flattened into Structure-of-Arrays
fields before each render:

    - every leaf shape becomes one object slot holding its composite
      world-to-object matrix (groups are folded into their children)
    - material and pattern parameters are stored per object slot
    - point lights and the camera get their own small fields

Taichi functions cannot recurse, so the bounded reflection/refraction
recursion is expressed as an explicit per-pixel work stack. Each entry
carries a ray, the color weight accumulated along its path and its
remaining depth. Popping an entry shades its hit and pushes at most two
children (reflected and refracted), so a depth budget of ``d`` never needs
more than ``d + 1`` stack slots.

The refractive indices on either side of a hit are found by counting, per
object, how many of its intersections lie before the hit: an odd count
means the object encloses the hit point, and the enclosing object entered
last is the innermost medium.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.integrator import render_image
    >>> from src.whitted.scene.presets import create_showcase_scene
    >>>
    >>> world, camera = create_showcase_scene()
    >>> image = render_image(camera, world)  # (height, width, 3) float64
"""

from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.whitted.core.config import get_config
from src.whitted.geometry.cone import Cone
from src.whitted.geometry.cube import Cube
from src.whitted.geometry.cylinder import Cylinder
from src.whitted.geometry.group import Group
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.patterns import (
    CheckersPattern,
    GradientPattern,
    PositionPattern,
    RingPattern,
    StripePattern,
)

if TYPE_CHECKING:
    from src.whitted.camera.pinhole import Camera
    from src.whitted.core.ray import Ray
    from src.whitted.geometry.shape import Shape
    from src.whitted.scene.world import World

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Capacities and Constants
# =============================================================================

# Maximum number of leaf shapes after flattening groups
MAX_OBJECTS = 256

# Maximum number of point lights
MAX_LIGHTS = 16

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Work stack slots per pixel; max_depth must stay below this
MAX_STACK = 8

# Stand-in for infinity in single precision fields
T_MAX = 1e30


class ShapeKind(IntEnum):
    """Object slot type codes used for dispatch inside the kernel."""

    SPHERE = 0
    PLANE = 1
    CUBE = 2
    CYLINDER = 3
    CONE = 4


class PatternKind(IntEnum):
    """Pattern type codes used for dispatch inside the kernel."""

    NONE = 0
    STRIPE = 1
    GRADIENT = 2
    RING = 3
    CHECKERS = 4
    POSITION = 5


_SHAPE_KINDS = (
    (Sphere, ShapeKind.SPHERE),
    (Plane, ShapeKind.PLANE),
    (Cube, ShapeKind.CUBE),
    (Cylinder, ShapeKind.CYLINDER),
    (Cone, ShapeKind.CONE),
)

_PATTERN_KINDS = (
    (StripePattern, PatternKind.STRIPE),
    (GradientPattern, PatternKind.GRADIENT),
    (RingPattern, PatternKind.RING),
    (CheckersPattern, PatternKind.CHECKERS),
    (PositionPattern, PatternKind.POSITION),
)

# =============================================================================
# Scene Fields
# =============================================================================

_num_objects = ti.field(dtype=ti.i32, shape=())
_object_kind = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
_object_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)
_object_normal = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)
_object_minimum = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_object_maximum = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_object_closed = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)

_material_color = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
_material_ambient = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_diffuse = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_specular = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_shininess = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_reflectivity = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_transparency = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
_material_ior = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)

_pattern_kind = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
_pattern_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
_pattern_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
# World-to-pattern matrix (pattern inverse composed with the object's)
_pattern_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)

_num_lights = ti.field(dtype=ti.i32, shape=())
_light_position = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
_light_intensity = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)

_epsilon = ti.field(dtype=ti.f32, shape=())
_surface_bias = ti.field(dtype=ti.f32, shape=())

_scene_uploaded = ti.field(dtype=ti.i32, shape=())

# =============================================================================
# Camera and Render Target Fields
# =============================================================================

_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=1)
_camera_half_width = ti.field(dtype=ti.f32, shape=())
_camera_half_height = ti.field(dtype=ti.f32, shape=())
_camera_pixel_size = ti.field(dtype=ti.f32, shape=())

# Row-major color buffer, row 0 at the top of the image
_pixels = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))


# =============================================================================
# Scene Upload (Python-side)
# =============================================================================


def _flatten(objects: "list[Shape]") -> "list[Shape]":
    """Replace every group by its leaf shapes, depth first."""
    leaves: list[Shape] = []
    for shape in objects:
        if isinstance(shape, Group):
            leaves.extend(shape.leaves())
        else:
            leaves.append(shape)
    return leaves


def _shape_kind(shape: "Shape") -> ShapeKind:
    for cls, kind in _SHAPE_KINDS:
        if isinstance(shape, cls):
            return kind
    raise TypeError(f"Shape type {type(shape).__name__} is not supported by the kernel")


def _pattern_kind_of(pattern) -> PatternKind:
    for cls, kind in _PATTERN_KINDS:
        if isinstance(pattern, cls):
            return kind
    raise TypeError(f"Pattern type {type(pattern).__name__} is not supported by the kernel")


def upload_scene(world: "World") -> int:
    """Flatten ``world`` into the kernel's scene fields.

    Args:
        world: The scene to upload.

    Returns:
        The number of object slots used.

    Raises:
        ValueError: If the flattened scene or the light list exceeds
            MAX_OBJECTS or MAX_LIGHTS.
        TypeError: If a shape or pattern type has no kernel counterpart.
    """
    leaves = _flatten(world.objects)
    if len(leaves) > MAX_OBJECTS:
        raise ValueError(
            f"Scene has {len(leaves)} shapes, exceeding maximum of {MAX_OBJECTS}"
        )
    if len(world.lights) > MAX_LIGHTS:
        raise ValueError(
            f"Scene has {len(world.lights)} lights, exceeding maximum of {MAX_LIGHTS}"
        )

    kinds = np.zeros(MAX_OBJECTS, dtype=np.int32)
    inverses = np.zeros((MAX_OBJECTS, 4, 4), dtype=np.float32)
    normals = np.zeros((MAX_OBJECTS, 4, 4), dtype=np.float32)
    minimums = np.full(MAX_OBJECTS, -T_MAX, dtype=np.float32)
    maximums = np.full(MAX_OBJECTS, T_MAX, dtype=np.float32)
    closed = np.zeros(MAX_OBJECTS, dtype=np.int32)

    colors = np.zeros((MAX_OBJECTS, 3), dtype=np.float32)
    ambient = np.zeros(MAX_OBJECTS, dtype=np.float32)
    diffuse = np.zeros(MAX_OBJECTS, dtype=np.float32)
    specular = np.zeros(MAX_OBJECTS, dtype=np.float32)
    shininess = np.ones(MAX_OBJECTS, dtype=np.float32)
    reflectivity = np.zeros(MAX_OBJECTS, dtype=np.float32)
    transparency = np.zeros(MAX_OBJECTS, dtype=np.float32)
    ior = np.ones(MAX_OBJECTS, dtype=np.float32)

    pattern_kinds = np.zeros(MAX_OBJECTS, dtype=np.int32)
    pattern_a = np.zeros((MAX_OBJECTS, 3), dtype=np.float32)
    pattern_b = np.zeros((MAX_OBJECTS, 3), dtype=np.float32)
    pattern_inverses = np.zeros((MAX_OBJECTS, 4, 4), dtype=np.float32)

    for i, shape in enumerate(leaves):
        world_inverse = shape.world_inverse().to_numpy()
        kinds[i] = _shape_kind(shape)
        inverses[i] = world_inverse
        normals[i] = world_inverse.T
        if isinstance(shape, (Cylinder, Cone)):
            minimums[i] = np.clip(shape.minimum, -T_MAX, T_MAX)
            maximums[i] = np.clip(shape.maximum, -T_MAX, T_MAX)
            closed[i] = int(shape.closed)

        material = shape.material
        colors[i] = material.color.to_numpy()
        ambient[i] = material.ambient
        diffuse[i] = material.diffuse
        specular[i] = material.specular
        shininess[i] = material.shininess
        reflectivity[i] = material.reflectivity
        transparency[i] = material.transparency
        ior[i] = material.refractive_index

        pattern = material.pattern
        if pattern is not None:
            pattern_kinds[i] = _pattern_kind_of(pattern)
            if hasattr(pattern, "a"):
                pattern_a[i] = pattern.a.to_numpy()
                pattern_b[i] = pattern.b.to_numpy()
            pattern_inverses[i] = pattern.inverse.to_numpy() @ world_inverse

    _object_kind.from_numpy(kinds)
    _object_inverse.from_numpy(inverses)
    _object_normal.from_numpy(normals)
    _object_minimum.from_numpy(minimums)
    _object_maximum.from_numpy(maximums)
    _object_closed.from_numpy(closed)

    _material_color.from_numpy(colors)
    _material_ambient.from_numpy(ambient)
    _material_diffuse.from_numpy(diffuse)
    _material_specular.from_numpy(specular)
    _material_shininess.from_numpy(shininess)
    _material_reflectivity.from_numpy(reflectivity)
    _material_transparency.from_numpy(transparency)
    _material_ior.from_numpy(ior)

    _pattern_kind.from_numpy(pattern_kinds)
    _pattern_a.from_numpy(pattern_a)
    _pattern_b.from_numpy(pattern_b)
    _pattern_inverse.from_numpy(pattern_inverses)

    light_positions = np.zeros((MAX_LIGHTS, 3), dtype=np.float32)
    light_intensities = np.zeros((MAX_LIGHTS, 3), dtype=np.float32)
    for i, light in enumerate(world.lights):
        position = light.position
        light_positions[i] = (position.x, position.y, position.z)
        light_intensities[i] = light.intensity.to_numpy()
    _light_position.from_numpy(light_positions)
    _light_intensity.from_numpy(light_intensities)

    config = get_config()
    _num_objects[None] = len(leaves)
    _num_lights[None] = len(world.lights)
    _epsilon[None] = config.epsilon
    _surface_bias[None] = config.kernel_bias
    _scene_uploaded[None] = 1
    return len(leaves)


def upload_camera(camera: "Camera") -> None:
    """Copy the camera's inverse transform and canvas geometry into fields.

    Raises:
        ValueError: If the camera's image exceeds the maximum supported size.
    """
    if camera.hsize > MAX_IMAGE_WIDTH or camera.vsize > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({camera.hsize}x{camera.vsize}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    _camera_inverse.from_numpy(camera.inverse.to_numpy().astype(np.float32)[np.newaxis])
    _camera_half_width[None] = camera.half_width
    _camera_half_height[None] = camera.half_height
    _camera_pixel_size[None] = camera.pixel_size


def get_object_count() -> int:
    """Return the number of object slots filled by the last upload."""
    return int(_num_objects[None])


def _check_scene_uploaded() -> None:
    """Check if a scene has been uploaded and raise if not."""
    if _scene_uploaded[None] == 0:
        raise RuntimeError("Scene not uploaded. Call upload_scene() first.")


def _check_depth(max_depth: int) -> None:
    if not 0 <= max_depth < MAX_STACK:
        raise ValueError(
            f"max_depth must be in [0, {MAX_STACK - 1}] for the parallel kernel, "
            f"got {max_depth}"
        )


# =============================================================================
# Transform Helpers
# =============================================================================


@ti.func
def _transform_point(m, p: vec3) -> vec3:
    q = m @ vec4(p[0], p[1], p[2], 1.0)
    return vec3(q[0], q[1], q[2])


@ti.func
def _transform_vector(m, v: vec3) -> vec3:
    q = m @ vec4(v[0], v[1], v[2], 0.0)
    return vec3(q[0], q[1], q[2])


# =============================================================================
# Intersection
# =============================================================================


@ti.func
def _slab(origin: ti.f32, direction: ti.f32, eps: ti.f32):
    """Entry and exit parameters of a ray against the -1..1 slab."""
    tmin_numerator = -1.0 - origin
    tmax_numerator = 1.0 - origin
    tmin = 0.0
    tmax = 0.0
    if ti.abs(direction) >= eps:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = T_MAX if tmin_numerator >= 0.0 else -T_MAX
        tmax = T_MAX if tmax_numerator >= 0.0 else -T_MAX
    return ti.min(tmin, tmax), ti.max(tmin, tmax)


@ti.func
def _intersect_object(i: ti.i32, origin: vec3, direction: vec3):
    """Intersect a world-space ray with object slot ``i``.

    Returns:
        A tuple of (ts, mask): up to four ray parameters and a flag per slot
        telling which are valid. Slots 0-1 hold body hits, 2-3 cap hits.
    """
    eps = _epsilon[None]
    o = _transform_point(_object_inverse[i], origin)
    d = _transform_vector(_object_inverse[i], direction)
    kind = _object_kind[i]

    ts = vec4(0.0)
    mask = tm.ivec4(0)

    if kind == int(ShapeKind.SPHERE):
        a = tm.dot(d, d)
        b = 2.0 * tm.dot(d, o)
        c = tm.dot(o, o) - 1.0
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            sqrt_d = ti.sqrt(discriminant)
            ts[0] = (-b - sqrt_d) / (2.0 * a)
            ts[1] = (-b + sqrt_d) / (2.0 * a)
            mask[0] = 1
            mask[1] = 1

    elif kind == int(ShapeKind.PLANE):
        if ti.abs(d[1]) >= eps:
            ts[0] = -o[1] / d[1]
            mask[0] = 1

    elif kind == int(ShapeKind.CUBE):
        xtmin, xtmax = _slab(o[0], d[0], eps)
        ytmin, ytmax = _slab(o[1], d[1], eps)
        ztmin, ztmax = _slab(o[2], d[2], eps)
        tmin = ti.max(ti.max(xtmin, ytmin), ztmin)
        tmax = ti.min(ti.min(xtmax, ytmax), ztmax)
        if tmin <= tmax:
            ts[0] = tmin
            ts[1] = tmax
            mask[0] = 1
            mask[1] = 1

    else:
        # Cylinder and cone share truncation and caps
        minimum = _object_minimum[i]
        maximum = _object_maximum[i]
        is_cone = kind == int(ShapeKind.CONE)

        a = d[0] * d[0] + d[2] * d[2]
        b = 2.0 * (o[0] * d[0] + o[2] * d[2])
        c = o[0] * o[0] + o[2] * o[2] - 1.0
        if is_cone:
            a = a - d[1] * d[1]
            b = b - 2.0 * o[1] * d[1]
            c = c + 1.0 - o[1] * o[1]

        if ti.abs(a) >= eps:
            discriminant = b * b - 4.0 * a * c
            if discriminant >= 0.0:
                sqrt_d = ti.sqrt(discriminant)
                root_a = (-b - sqrt_d) / (2.0 * a)
                root_b = (-b + sqrt_d) / (2.0 * a)
                t0 = ti.min(root_a, root_b)
                t1 = ti.max(root_a, root_b)
                y0 = o[1] + t0 * d[1]
                if minimum < y0 and y0 < maximum:
                    ts[0] = t0
                    mask[0] = 1
                y1 = o[1] + t1 * d[1]
                if minimum < y1 and y1 < maximum:
                    ts[1] = t1
                    mask[1] = 1
        elif is_cone and ti.abs(b) >= eps:
            # Parallel to one half of the cone: a single crossing
            t = -c / (2.0 * b)
            y = o[1] + t * d[1]
            if minimum < y and y < maximum:
                ts[0] = t
                mask[0] = 1

        if _object_closed[i] == 1 and ti.abs(d[1]) >= eps:
            t_low = (minimum - o[1]) / d[1]
            x_low = o[0] + t_low * d[0]
            z_low = o[2] + t_low * d[2]
            radius_low = ti.abs(minimum) if is_cone else 1.0
            if x_low * x_low + z_low * z_low <= radius_low * radius_low:
                ts[2] = t_low
                mask[2] = 1

            t_high = (maximum - o[1]) / d[1]
            x_high = o[0] + t_high * d[0]
            z_high = o[2] + t_high * d[2]
            radius_high = ti.abs(maximum) if is_cone else 1.0
            if x_high * x_high + z_high * z_high <= radius_high * radius_high:
                ts[3] = t_high
                mask[3] = 1

    return ts, mask


@ti.func
def _closest_hit(origin: vec3, direction: vec3):
    """Find the nearest non-negative intersection over every object.

    Returns:
        A tuple of (t, object_index); object_index is -1 on a miss.
    """
    best_t = T_MAX
    best_object = -1
    for i in range(_num_objects[None]):
        ts, mask = _intersect_object(i, origin, direction)
        for k in ti.static(range(4)):
            if mask[k] == 1 and ts[k] >= 0.0 and ts[k] < best_t:
                best_t = ts[k]
                best_object = i
    return best_t, best_object


@ti.func
def _is_shadowed(point: vec3, light: ti.i32) -> ti.i32:
    to_light = _light_position[light] - point
    distance = tm.length(to_light)
    shadowed = 0
    if distance >= _epsilon[None]:
        t, hit_object = _closest_hit(point, to_light / distance)
        if hit_object >= 0 and t < distance:
            shadowed = 1
    return shadowed


@ti.func
def _refractive_indices(origin: vec3, direction: vec3, hit_t: ti.f32, hit_object: ti.i32):
    """Return (n1, n2) for a hit by counting crossings before it.

    An object whose intersections before ``hit_t`` are odd in number
    encloses the hit point; among those, the one entered last is innermost.
    """
    n1 = 1.0
    n2_other = 1.0
    last_any = -T_MAX
    last_other = -T_MAX
    hit_inside = 0
    for j in range(_num_objects[None]):
        ts, mask = _intersect_object(j, origin, direction)
        count = 0
        last = -T_MAX
        for k in ti.static(range(4)):
            if mask[k] == 1 and ts[k] < hit_t:
                count += 1
                if ts[k] > last:
                    last = ts[k]
        if count % 2 == 1:
            if last > last_any:
                last_any = last
                n1 = _material_ior[j]
            if j == hit_object:
                hit_inside = 1
            elif last > last_other:
                last_other = last
                n2_other = _material_ior[j]

    n2 = _material_ior[hit_object]
    if hit_inside == 1:
        n2 = n2_other
    return n1, n2


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _local_normal(i: ti.i32, p: vec3) -> vec3:
    kind = _object_kind[i]
    eps = _epsilon[None]
    n = vec3(0.0, 0.0, 0.0)

    if kind == int(ShapeKind.SPHERE):
        n = p
    elif kind == int(ShapeKind.PLANE):
        n = vec3(0.0, 1.0, 0.0)
    elif kind == int(ShapeKind.CUBE):
        ax = ti.abs(p[0])
        ay = ti.abs(p[1])
        az = ti.abs(p[2])
        maxc = ti.max(ti.max(ax, ay), az)
        if maxc == ax:
            n = vec3(p[0], 0.0, 0.0)
        elif maxc == ay:
            n = vec3(0.0, p[1], 0.0)
        else:
            n = vec3(0.0, 0.0, p[2])
    else:
        minimum = _object_minimum[i]
        maximum = _object_maximum[i]
        dist = p[0] * p[0] + p[2] * p[2]
        is_cone = kind == int(ShapeKind.CONE)
        cap_high = maximum * maximum if is_cone else 1.0
        cap_low = minimum * minimum if is_cone else 1.0
        if dist < cap_high and p[1] >= maximum - eps:
            n = vec3(0.0, 1.0, 0.0)
        elif dist < cap_low and p[1] <= minimum + eps:
            n = vec3(0.0, -1.0, 0.0)
        elif is_cone:
            normal_y = ti.sqrt(dist)
            if p[1] > 0.0:
                normal_y = -normal_y
            n = vec3(p[0], normal_y, p[2])
        else:
            n = vec3(p[0], 0.0, p[2])
    return n


@ti.func
def _normal_at(i: ti.i32, world_point: vec3) -> vec3:
    local_point = _transform_point(_object_inverse[i], world_point)
    local_normal = _local_normal(i, local_point)
    return tm.normalize(_transform_vector(_object_normal[i], local_normal))


@ti.func
def _checker_parity(value: ti.f32) -> ti.i32:
    return ti.cast(ti.floor(value), ti.i32)


@ti.func
def _surface_color(i: ti.i32, world_point: vec3) -> vec3:
    color = _material_color[i]
    kind = _pattern_kind[i]
    if kind != int(PatternKind.NONE):
        p = _transform_point(_pattern_inverse[i], world_point)
        a = _pattern_a[i]
        b = _pattern_b[i]
        if kind == int(PatternKind.STRIPE):
            color = b
            if _checker_parity(p[0]) % 2 == 0:
                color = a
        elif kind == int(PatternKind.GRADIENT):
            color = a + (b - a) * (p[0] - ti.floor(p[0]))
        elif kind == int(PatternKind.RING):
            radius = ti.sqrt(p[0] * p[0] + p[2] * p[2])
            color = b
            if _checker_parity(radius) % 2 == 0:
                color = a
        elif kind == int(PatternKind.CHECKERS):
            total = _checker_parity(p[0]) + _checker_parity(p[1]) + _checker_parity(p[2])
            color = b
            if total % 2 == 0:
                color = a
        else:
            color = p
    return color


@ti.func
def _direct_lighting(i: ti.i32, point: vec3, eye: vec3, normal: vec3) -> vec3:
    """Phong shading of object ``i`` summed over every light with shadows."""
    surface = _surface_color(i, point)
    result = vec3(0.0, 0.0, 0.0)
    if _num_lights[None] == 0:
        result = surface * _material_ambient[i]
    for light in range(_num_lights[None]):
        intensity = _light_intensity[light]
        effective = surface * intensity
        result += effective * _material_ambient[i]
        to_light = _light_position[light] - point
        distance = tm.length(to_light)
        # A light sitting on the surface adds ambient only
        if distance >= _epsilon[None] and _is_shadowed(point, light) == 0:
            light_vector = to_light / distance
            light_dot_normal = tm.dot(light_vector, normal)
            if light_dot_normal >= 0.0:
                result += effective * _material_diffuse[i] * light_dot_normal
                reflect_vector = tm.reflect(-light_vector, normal)
                reflect_dot_eye = tm.dot(reflect_vector, eye)
                if reflect_dot_eye > 0.0:
                    factor = reflect_dot_eye ** _material_shininess[i]
                    result += intensity * _material_specular[i] * factor
    return result


# =============================================================================
# Whitted Tracing with an Explicit Work Stack
# =============================================================================


@ti.func
def _push(
    stack_origin,
    stack_direction,
    stack_weight,
    stack_depth,
    sp: ti.i32,
    origin: vec3,
    direction: vec3,
    weight: vec3,
    depth: ti.i32,
):
    """Return copies of the stack with an entry written at slot ``sp``.

    Slots are selected with static indices so the local matrices never need
    dynamic indexing.
    """
    new_origin = stack_origin
    new_direction = stack_direction
    new_weight = stack_weight
    new_depth = stack_depth
    for k in ti.static(range(MAX_STACK)):
        if k == sp:
            for c in ti.static(range(3)):
                new_origin[k, c] = origin[c]
                new_direction[k, c] = direction[c]
                new_weight[k, c] = weight[c]
            new_depth[k] = depth
    return new_origin, new_direction, new_weight, new_depth


@ti.func
def trace(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Trace a primary ray and all of its reflection/refraction descendants.

    Args:
        origin: World-space ray origin.
        direction: Unit world-space ray direction.
        max_depth: Remaining recursion budget for the primary ray.

    Returns:
        The accumulated linear color.
    """
    bias = _surface_bias[None]
    stack_origin = ti.Matrix.zero(ti.f32, MAX_STACK, 3)
    stack_direction = ti.Matrix.zero(ti.f32, MAX_STACK, 3)
    stack_weight = ti.Matrix.zero(ti.f32, MAX_STACK, 3)
    stack_depth = ti.Vector.zero(ti.i32, MAX_STACK)

    stack_origin, stack_direction, stack_weight, stack_depth = _push(
        stack_origin, stack_direction, stack_weight, stack_depth,
        0, origin, direction, vec3(1.0, 1.0, 1.0), max_depth,
    )
    sp = 1
    color = vec3(0.0, 0.0, 0.0)

    while sp > 0:
        sp -= 1
        ray_origin = vec3(0.0, 0.0, 0.0)
        ray_direction = vec3(0.0, 0.0, 0.0)
        weight = vec3(0.0, 0.0, 0.0)
        remaining = 0
        for k in ti.static(range(MAX_STACK)):
            if k == sp:
                ray_origin = vec3(stack_origin[k, 0], stack_origin[k, 1], stack_origin[k, 2])
                ray_direction = vec3(
                    stack_direction[k, 0], stack_direction[k, 1], stack_direction[k, 2]
                )
                weight = vec3(stack_weight[k, 0], stack_weight[k, 1], stack_weight[k, 2])
                remaining = stack_depth[k]

        t, hit_object = _closest_hit(ray_origin, ray_direction)
        if hit_object >= 0:
            point = ray_origin + t * ray_direction
            eye = -ray_direction
            normal = _normal_at(hit_object, point)
            if tm.dot(normal, eye) < 0.0:
                normal = -normal
            over_point = point + normal * bias
            under_point = point - normal * bias

            color += weight * _direct_lighting(hit_object, over_point, eye, normal)

            if remaining > 0:
                reflectivity = _material_reflectivity[hit_object]
                if reflectivity > 0.0 and sp < MAX_STACK:
                    stack_origin, stack_direction, stack_weight, stack_depth = _push(
                        stack_origin, stack_direction, stack_weight, stack_depth,
                        sp, over_point, tm.reflect(ray_direction, normal),
                        weight * reflectivity, remaining - 1,
                    )
                    sp += 1

                transparency = _material_transparency[hit_object]
                if transparency > 0.0 and sp < MAX_STACK:
                    n1, n2 = _refractive_indices(ray_origin, ray_direction, t, hit_object)
                    n_ratio = n1 / n2
                    cos_i = tm.dot(eye, normal)
                    sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
                    # Total internal reflection contributes nothing
                    if sin2_t <= 1.0:
                        cos_t = ti.sqrt(1.0 - sin2_t)
                        refracted = normal * (n_ratio * cos_i - cos_t) - eye * n_ratio
                        stack_origin, stack_direction, stack_weight, stack_depth = _push(
                            stack_origin, stack_direction, stack_weight, stack_depth,
                            sp, under_point, tm.normalize(refracted),
                            weight * transparency, remaining - 1,
                        )
                        sp += 1

    return color


@ti.func
def _camera_ray(px: ti.i32, py: ti.i32):
    """Generate the ray through the center of pixel (px, py)."""
    pixel_size = _camera_pixel_size[None]
    x_offset = (ti.cast(px, ti.f32) + 0.5) * pixel_size
    y_offset = (ti.cast(py, ti.f32) + 0.5) * pixel_size
    world_x = _camera_half_width[None] - x_offset
    world_y = _camera_half_height[None] - y_offset

    inverse = _camera_inverse[0]
    pixel = _transform_point(inverse, vec3(world_x, world_y, -1.0))
    origin = _transform_point(inverse, vec3(0.0, 0.0, 0.0))
    return origin, tm.normalize(pixel - origin)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Trace one ray per pixel; each iteration writes its own pixel."""
    for row, col in ti.ndrange(height, width):
        origin, direction = _camera_ray(col, row)
        _pixels[row, col] = trace(origin, direction, max_depth)


@ti.kernel
def _trace_single(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
) -> vec3:
    """Trace a single ray. Used for testing and debugging."""
    return trace(vec3(ox, oy, oz), vec3(dx, dy, dz), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(ray: "Ray", *, max_depth: "int | None" = None) -> tuple[float, float, float]:
    """Trace one world-space ray against the uploaded scene.

    Args:
        ray: The ray; its direction is normalized before tracing.
        max_depth: Recursion budget, defaults to the configured max_depth.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If no scene has been uploaded.
        ValueError: If ``max_depth`` does not fit in the work stack.
    """
    _check_scene_uploaded()
    if max_depth is None:
        max_depth = get_config().max_depth
    _check_depth(max_depth)

    direction = ray.direction.normalize()
    color = _trace_single(
        ray.origin.x, ray.origin.y, ray.origin.z,
        direction.x, direction.y, direction.z,
        max_depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(
    camera: "Camera", world: "World", *, max_depth: "int | None" = None
) -> npt.NDArray[np.float64]:
    """Upload ``world`` and ``camera`` and render every pixel in parallel.

    Args:
        camera: The camera.
        world: The scene.
        max_depth: Recursion budget, defaults to the configured max_depth.

    Returns:
        Linear colors as an array of shape (camera.vsize, camera.hsize, 3).

    Raises:
        ValueError: If the image, scene or depth exceeds the kernel limits.
    """
    if max_depth is None:
        max_depth = get_config().max_depth
    _check_depth(max_depth)

    upload_camera(camera)
    upload_scene(world)

    width, height = camera.hsize, camera.vsize
    _render_kernel(width, height, max_depth)

    image = _pixels.to_numpy()[:height, :width, :]
    return image.astype(np.float64)

"""Intersection records, hit selection and shading precomputation.

An ``Intersection`` pairs a ray parameter ``t`` with the shape that was hit.
``Intersections`` is an immutable, t-sorted collection of them. The sort is
stable, so intersections at equal ``t`` keep the order in which they were
produced.

``prepare_computations`` turns the visible hit into everything the shading
model needs: the hit point, eye and normal vectors, the offset points used
for shadow and refraction rays, and the refractive indices on either side of
the surface.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import point, vector
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.geometry.intersection import intersect, prepare_computations
    >>> r = Ray(point(0, 0, -5), vector(0, 0, 1))
    >>> xs = intersect(r, Sphere())
    >>> comps = prepare_computations(xs.hit(), r, xs)
    >>> comps.inside
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence, overload

from src.whitted.core.config import get_config
from src.whitted.core.tuples import Tuple

if TYPE_CHECKING:
    from src.whitted.core.ray import Ray
    from src.whitted.geometry.shape import Shape


@dataclass(frozen=True)
class Intersection:
    """A ray parameter and the shape hit at that parameter.

    Attributes:
        t: Distance along the ray, in units of the ray's direction length.
        shape: The primitive that was hit.
    """

    t: float
    shape: Shape


class Intersections(Sequence[Intersection]):
    """An immutable, stably t-sorted sequence of intersections."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Intersection] = ()) -> None:
        self._items: tuple[Intersection, ...] = tuple(sorted(items, key=_by_t))

    @overload
    def __getitem__(self, index: int) -> Intersection: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Intersection, ...]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Intersection]:
        return iter(self._items)

    def __add__(self, other: Iterable[Intersection]) -> Intersections:
        return Intersections((*self._items, *other))

    def __repr__(self) -> str:
        return f"Intersections({list(self._items)!r})"

    def hit(self) -> Intersection | None:
        """Return the intersection with the smallest non-negative t, or None."""
        return hit(self._items)


def _by_t(intersection: Intersection) -> float:
    return intersection.t


def hit(intersections: Iterable[Intersection]) -> Intersection | None:
    """Select the visible intersection.

    Args:
        intersections: Intersections in any order.

    Returns:
        The intersection with minimal ``t >= 0``; on ties the earliest in
        input order wins. None if every ``t`` is negative.
    """
    best: Intersection | None = None
    for candidate in intersections:
        if candidate.t < 0.0:
            continue
        if best is None or candidate.t < best.t:
            best = candidate
    return best


def intersect(ray: Ray, shape: Shape) -> Intersections:
    """Intersect a world-space ray with a shape."""
    return shape.intersect(ray)


# =============================================================================
# Shading precomputation
# =============================================================================


@dataclass(frozen=True, eq=False)
class Computations:
    """Precomputed state for shading a single hit.

    Attributes:
        t: Ray parameter of the hit.
        shape: The shape that was hit.
        point: World-space hit point.
        eye_vector: Unit vector from the hit back toward the ray origin.
        normal_vector: Unit surface normal, flipped to face the eye.
        inside: True when the ray started inside the shape.
        over_point: ``point`` nudged along the normal, for shadow and
            reflection rays.
        under_point: ``point`` nudged against the normal, for refraction rays.
        reflect_vector: Ray direction mirrored about the normal.
        n1: Refractive index of the medium the ray leaves.
        n2: Refractive index of the medium the ray enters.
    """

    t: float
    shape: Shape
    point: Tuple
    eye_vector: Tuple
    normal_vector: Tuple
    inside: bool
    over_point: Tuple
    under_point: Tuple
    reflect_vector: Tuple
    n1: float
    n2: float


def _refractive_indices(
    hit_: Intersection, intersections: Iterable[Intersection]
) -> tuple[float, float]:
    """Walk the sorted intersections, tracking which shapes contain the ray.

    Entering a shape pushes it, leaving pops it. At the hit, ``n1`` is the
    index of the innermost container before the hit and ``n2`` the one after.
    """
    n1 = n2 = 1.0
    containers: list[Shape] = []
    for candidate in intersections:
        is_hit = candidate == hit_
        if is_hit:
            n1 = containers[-1].material.refractive_index if containers else 1.0

        if candidate.shape in containers:
            containers.remove(candidate.shape)
        else:
            containers.append(candidate.shape)

        if is_hit:
            n2 = containers[-1].material.refractive_index if containers else 1.0
            break
    return n1, n2


def prepare_computations(
    hit_: Intersection,
    ray: Ray,
    intersections: Sequence[Intersection] | None = None,
) -> Computations:
    """Precompute everything needed to shade ``hit_``.

    Args:
        hit_: The visible intersection.
        ray: The ray that produced it.
        intersections: All intersections along the ray, sorted by t, used to
            determine n1/n2. Defaults to just the hit.

    Returns:
        The shading computations for the hit.
    """
    if intersections is None:
        intersections = (hit_,)

    bias = get_config().shadow_bias
    position = ray.position(hit_.t)
    eye = -ray.direction
    normal = hit_.shape.normal_at(position)

    inside = normal.dot(eye) < 0.0
    if inside:
        normal = -normal

    n1, n2 = _refractive_indices(hit_, intersections)

    return Computations(
        t=hit_.t,
        shape=hit_.shape,
        point=position,
        eye_vector=eye,
        normal_vector=normal,
        inside=inside,
        over_point=position + normal * bias,
        under_point=position - normal * bias,
        reflect_vector=ray.direction.reflect(normal),
        n1=n1,
        n2=n2,
    )

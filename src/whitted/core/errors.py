"""Exception types raised by the ray tracer.

Each error also derives from the built-in exception callers would naturally
catch, so ``except ValueError`` keeps working for code that does not know
about the tracer's own hierarchy.
"""


class RayTracerError(Exception):
    """Base class for all ray tracer errors."""


class NonInvertibleMatrixError(RayTracerError, ValueError):
    """Raised when inverting a matrix whose determinant is (nearly) zero."""


class DegenerateVectorError(RayTracerError, ValueError):
    """Raised when normalizing a zero-length vector."""


class InvalidOperandError(RayTracerError, TypeError):
    """Raised when an operation receives a point where a vector is required."""

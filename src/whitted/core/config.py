"""Process-wide numeric configuration for the ray tracer.

Every floating point tolerance used by the tracer lives in a single
``RenderConfig`` instance so that tuple equality, the shadow acne offset and
the matrix invertibility check always agree with one another.

The active configuration can be replaced for a block of work (tests do this)
or loaded from ``WHITTED_*`` environment variables.

Example:
    >>> from src.whitted.core.config import configure, get_config, set_config
    >>> previous = configure(max_depth=3)
    >>> get_config().max_depth
    3
    >>> set_config(previous)
"""

import os
from dataclasses import dataclass, fields, replace

# =============================================================================
# Defaults
# =============================================================================

# Tolerance for approximate tuple, color and matrix equality
DEFAULT_EPSILON = 1e-5

# Offset applied along the surface normal for over/under points
DEFAULT_SHADOW_BIAS = 1e-5

# Determinants smaller than this are treated as singular
DEFAULT_INVERTIBILITY_THRESHOLD = 1e-5

# Remaining recursion budget for reflection and refraction rays
DEFAULT_MAX_DEPTH = 5

# Surface offset used by the single precision parallel kernel
DEFAULT_KERNEL_BIAS = 1e-4

ENV_PREFIX = "WHITTED_"


@dataclass(frozen=True)
class RenderConfig:
    """Numeric tolerances shared by every part of the tracer.

    Attributes:
        epsilon: Absolute tolerance for approximate equality.
        shadow_bias: Distance the over/under points are pushed off a surface.
        invertibility_threshold: Minimum absolute determinant of an
            invertible matrix.
        max_depth: Default recursion budget for secondary rays.
        kernel_bias: Surface offset used by the Taichi render kernel, which
            runs in single precision.
    """

    epsilon: float = DEFAULT_EPSILON
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    invertibility_threshold: float = DEFAULT_INVERTIBILITY_THRESHOLD
    max_depth: int = DEFAULT_MAX_DEPTH
    kernel_bias: float = DEFAULT_KERNEL_BIAS

    def __post_init__(self) -> None:
        for name in ("epsilon", "shadow_bias", "invertibility_threshold", "kernel_bias"):
            value = getattr(self, name)
            if value <= 0.0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "RenderConfig":
        """Build a configuration from environment variables.

        Each field is read from ``<prefix><FIELD_NAME>`` (for example
        ``WHITTED_MAX_DEPTH``). Unset variables keep their default.

        Args:
            prefix: Environment variable prefix.

        Returns:
            A new RenderConfig.

        Raises:
            ValueError: If a variable cannot be parsed or is out of range.
        """
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            cast = int if f.name == "max_depth" else float
            try:
                overrides[f.name] = cast(raw)
            except ValueError as exc:
                raise ValueError(
                    f"Invalid value for {prefix}{f.name.upper()}: {raw!r}"
                ) from exc
        return cls(**overrides)


_config = RenderConfig()


def get_config() -> RenderConfig:
    """Return the active configuration."""
    return _config


def set_config(config: RenderConfig) -> RenderConfig:
    """Replace the active configuration.

    Args:
        config: The configuration to activate.

    Returns:
        The configuration that was active before the call.
    """
    global _config
    previous = _config
    _config = config
    return previous


def configure(**overrides: float) -> RenderConfig:
    """Activate a copy of the current configuration with some fields changed.

    Args:
        **overrides: Field values to change (e.g. ``max_depth=3``).

    Returns:
        The configuration that was active before the call.
    """
    return set_config(replace(_config, **overrides))

"""Matplotlib-based preview display for rendered canvases.

The renderer keeps colors linear and unclamped. This module maps them into
the displayable [0, 1] range, by plain clamping (the default) or by a tone
mapping operator for scenes with bright highlights, and optionally applies
gamma correction.

Features:
    - Clamp, Reinhard and exposure-based tone mapping
    - Gamma correction
    - Matplotlib preview window

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> from src.whitted.core.renderer import render
    >>>
    >>> canvas = render(camera, world)
    >>> show_preview(canvas, tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.whitted.core.canvas import Canvas


# Type alias for tone mapping options
ToneMapMethod = Literal["clamp", "reinhard", "exposure"]


def tone_map_clamp(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.float64]:
    """Clamp every channel to [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Clamped image.
    """
    return np.clip(image, 0.0, 1.0).astype(np.float64)


def tone_map_reinhard(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.float64]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1] range.
    """
    # Ensure non-negative values
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float64)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear image array of shape (H, W, 3).
        exposure: Exposure value (default 1.0). Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1] range.
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float64)


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Apply gamma correction: out = in^(1/gamma).

    Args:
        image: Image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value; 1.0 leaves the image unchanged.

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return np.asarray(image, dtype=np.float64)

    # Clamp before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float64)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Map a linear image into [0, 1] for display or export.

    Applies the tone mapping operator, then gamma correction, then a final
    clamp.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp", "reinhard" or "exposure").
        gamma: Gamma correction value (default 1.0, no correction).
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Processed image in [0, 1] range.

    Raises:
        ValueError: If ``tone_map`` is not a known method.
    """
    if tone_map == "clamp":
        result = tone_map_clamp(image)
    elif tone_map == "reinhard":
        result = tone_map_reinhard(image)
    elif tone_map == "exposure":
        result = tone_map_exposure(image, exposure)
    else:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    canvas: Canvas,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a canvas as a Matplotlib figure.

    Args:
        canvas: The rendered canvas.
        tone_map: Tone mapping method ("clamp", "reinhard" or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
        title: Custom title (default shows the canvas size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        canvas.to_numpy(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"{canvas.width}x{canvas.height}")

    fig.tight_layout()
    plt.show(block=block)

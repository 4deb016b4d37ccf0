"""Image export utilities for rendered canvases.

Supported formats:
    - PPM, plain text (P3) and binary (P6)
    - PNG (8-bit via Pillow)

Colors are mapped into [0, 1] by ``process_image_for_display`` (clamping
by default) and scaled to 0-255 with round-half-up, so 0.5 becomes 128.

The plain PPM writer keeps every line at most 70 characters long, starting a
new line for each image row, and ends the file with a newline.

Example:
    >>> from src.whitted.preview.export import save_png, save_ppm
    >>> save_ppm(canvas, "scene.ppm")
    >>> save_png(canvas, "scene.png", tone_map="reinhard")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from src.whitted.core.canvas import Canvas

# Longest line allowed in a plain PPM file
PPM_MAX_LINE_LENGTH = 70

PPM_MAX_COLOR_VALUE = 255


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for display or export.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp", "reinhard" or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return np.floor(processed * PPM_MAX_COLOR_VALUE + 0.5).astype(np.uint8)


def _ppm_header(magic: str, width: int, height: int) -> str:
    return f"{magic}\n{width} {height}\n{PPM_MAX_COLOR_VALUE}\n"


def canvas_to_ppm(canvas: Canvas, **display_options) -> str:
    """Serialize a canvas as plain (P3) PPM text.

    Args:
        canvas: The canvas to serialize.
        **display_options: Passed to ``image_to_uint8`` (tone_map, gamma,
            exposure).

    Returns:
        The PPM document.
    """
    pixels = image_to_uint8(canvas.to_numpy(), **display_options)
    lines = [_ppm_header("P3", canvas.width, canvas.height).rstrip("\n")]

    for row in pixels:
        line = ""
        for value in row.reshape(-1).tolist():
            token = str(value)
            if not line:
                line = token
            elif len(line) + 1 + len(token) > PPM_MAX_LINE_LENGTH:
                lines.append(line)
                line = token
            else:
                line = f"{line} {token}"
        lines.append(line)

    return "\n".join(lines) + "\n"


def canvas_to_ppm_bytes(canvas: Canvas, **display_options) -> bytes:
    """Serialize a canvas as binary (P6) PPM."""
    pixels = image_to_uint8(canvas.to_numpy(), **display_options)
    header = _ppm_header("P6", canvas.width, canvas.height).encode("ascii")
    return header + pixels.tobytes()


def save_ppm(
    canvas: Canvas,
    filepath: str | Path,
    *,
    binary: bool = False,
    **display_options,
) -> None:
    """Write a canvas to a PPM file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path.
        binary: Write P6 instead of P3.
        **display_options: Passed to ``image_to_uint8``.
    """
    path = Path(filepath)
    if binary:
        path.write_bytes(canvas_to_ppm_bytes(canvas, **display_options))
    else:
        path.write_text(canvas_to_ppm(canvas, **display_options), encoding="ascii")


def save_png(
    canvas: Canvas,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "clamp",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a canvas as an 8-bit RGB PNG file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("clamp", "reinhard" or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
    """
    image_uint8 = image_to_uint8(
        canvas.to_numpy(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(str(filepath))


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

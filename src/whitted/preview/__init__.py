"""Preview module for output and visualization.

Components:
    display: Tone mapping, gamma correction and Matplotlib preview
    export: PPM (P3/P6) and PNG export

Example:
    >>> from src.whitted.preview import save_png, save_ppm, show_preview
    >>> save_ppm(canvas, "scene.ppm")
    >>> save_png(canvas, "scene.png")
    >>> show_preview(canvas)
"""

from src.whitted.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    show_preview,
    tone_map_clamp,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.whitted.preview.export import (
    canvas_to_ppm,
    canvas_to_ppm_bytes,
    compute_rmse,
    image_to_uint8,
    save_png,
    save_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_clamp",
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "canvas_to_ppm",
    "canvas_to_ppm_bytes",
    "save_ppm",
    "save_png",
    "image_to_uint8",
    "compute_rmse",
]

"""Preview module: display transforms and image export.

Components:
    display: Tone mapping, gamma encoding and clamping
    export: Pixel-stream collection and Pillow-based file output

Example:
    >>> from glint.core.sampler import render_image
    >>> from glint.preview import save_image
    >>> save_image(render_image(scene, 320, 240), "out.png", tone_map="reinhard")
"""

from glint.preview.display import (
    TONE_MAP_METHODS,
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    tone_map_exposure,
    tone_map_reinhard,
)
from glint.preview.export import (
    compute_rmse,
    image_to_uint8,
    pixels_to_array,
    save_image,
    write_stream,
)

__all__ = [
    # Display transforms
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    "TONE_MAP_METHODS",
    # Export functions
    "pixels_to_array",
    "image_to_uint8",
    "save_image",
    "write_stream",
    "compute_rmse",
]

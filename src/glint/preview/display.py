"""Display transforms for rendered images.

Rendered colors are linear and unclamped: a bright highlight or several
overlapping lights can push a channel well above 1. Before an image is
written to an 8-bit format it passes through three steps:

1. Tone mapping (optional) to compress values above 1.
2. Gamma encoding (optional); the default of 1.0 keeps values linear.
3. Clamping to [0, 1].

Example:
    >>> from glint.preview.display import process_image_for_display
    >>> ready = process_image_for_display(image, tone_map="reinhard", gamma=2.2)
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

TONE_MAP_METHODS: tuple[str, ...] = ("none", "reinhard", "exposure")


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Reinhard operator ``c / (1 + c)``, applied per channel.

    Negative values are clipped to zero first.
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Exposure operator ``1 - exp(-c * exposure)``.

    Args:
        image: Linear image of shape (H, W, 3).
        exposure: Brightness scale; larger values brighten the image.

    Returns:
        Tone mapped image in [0, 1).
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Encode linear values with ``c ** (1 / gamma)``.

    Values are clamped to [0, 1] first. A gamma of 1.0 only clamps.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    image = np.clip(image, 0.0, 1.0)
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Tone map, gamma encode and clamp an image.

    Args:
        image: Linear image of shape (H, W, 3).
        tone_map: "none", "reinhard" or "exposure".
        gamma: Gamma for encoding (1.0 keeps values linear).
        exposure: Exposure for the "exposure" operator.

    Returns:
        float32 image in [0, 1], same shape as the input.

    Raises:
        ValueError: For an unknown tone mapping method.
    """
    if tone_map == "reinhard":
        result = tone_map_reinhard(image)
    elif tone_map == "exposure":
        result = tone_map_exposure(image, exposure)
    elif tone_map == "none":
        result = np.asarray(image, dtype=np.float32)
    else:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    return apply_gamma(result, gamma)

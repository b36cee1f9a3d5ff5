"""Image export for rendered images.

Renderers produce a row-major stream of linear float colors. This module
collects that stream into an array, runs it through the display transforms
and writes 8-bit RGB files with Pillow.

Supported formats:
    - Anything Pillow writes, chosen by file extension (PNG, PPM, BMP, ...)
    - Binary PPM (P6) when no extension or format is given

Example:
    >>> from glint.core.sampler import render
    >>> from glint.preview.export import pixels_to_array, save_image
    >>> image = pixels_to_array(render(scene, 320, 240), 320, 240)
    >>> save_image(image, "spheres.png", gamma=2.2)
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from glint.preview.display import ToneMapMethod, process_image_for_display

# Pillow format used for paths without an extension and for streams
DEFAULT_FORMAT = "PPM"


def pixels_to_array(
    pixels: Iterable[npt.ArrayLike],
    width: int,
    height: int,
) -> npt.NDArray[np.float32]:
    """Collect a row-major pixel stream into an image array.

    Args:
        pixels: width * height RGB colors, top row first.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        float32 array of shape (height, width, 3).

    Raises:
        ValueError: If the stream does not hold exactly width * height colors.
    """
    colors = [np.asarray(color, dtype=np.float32) for color in pixels]
    if len(colors) != width * height:
        raise ValueError(f"Expected {width * height} pixels, got {len(colors)}")
    if not colors:
        return np.zeros((height, width, 3), dtype=np.float32)
    return np.stack(colors).reshape(height, width, 3)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear image to rounded 8-bit values.

    Args:
        image: Linear image of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma for encoding (1.0 keeps values linear).
        exposure: Exposure for exposure tone mapping.

    Returns:
        uint8 array of shape (H, W, 3).
    """
    processed = process_image_for_display(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return np.rint(processed * 255.0).astype(np.uint8)


def _to_pil(image, tone_map, gamma, exposure) -> PILImage.Image:
    return PILImage.fromarray(image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure))


def save_image(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> Path:
    """Save a linear image to a file.

    The format follows the file extension; files without one are written as
    binary PPM.

    Args:
        image: Linear image of shape (H, W, 3).
        filepath: Output path.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma for encoding (1.0 keeps values linear).
        exposure: Exposure for exposure tone mapping.

    Returns:
        The path written.
    """
    path = Path(filepath)
    pil_image = _to_pil(image, tone_map, gamma, exposure)
    pil_image.save(path, format=None if path.suffix else DEFAULT_FORMAT)
    return path


def write_stream(
    image: npt.NDArray[np.floating],
    stream: BinaryIO,
    *,
    image_format: str = DEFAULT_FORMAT,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Write a linear image to a binary stream (e.g. ``sys.stdout.buffer``).

    Args:
        image: Linear image of shape (H, W, 3).
        stream: Writable binary file object.
        image_format: Pillow format name (default PPM).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma for encoding (1.0 keeps values linear).
        exposure: Exposure for exposure tone mapping.
    """
    _to_pil(image, tone_map, gamma, exposure).save(stream, format=image_format)
    stream.flush()


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

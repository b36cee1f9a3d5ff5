"""Image sampler: turns a scene into a stream of pixel colors.

Each output pixel covers a small quadrilateral of the camera's image plane.
Row 0 is the top of the image, so row indices are flipped before they are
mapped onto the plane (whose v axis points up). The pixel's color is the
average of ``g * g`` rays cast from the eye through a regular grid of points
inside that quadrilateral; with no grid a single ray passes through its
center.

Jittered (stratified) supersampling moves every grid point to a uniformly
random position inside its own grid cell. Jitter is used only when a grid is
requested and a NumPy random generator is passed in, so renders are
reproducible by default and tests can fix the seed.

Example:
    >>> import numpy as np
    >>> from glint.core.sampler import render, render_image
    >>> pixels = list(render(scene, 64, 48))          # 64*48 colors, row-major
    >>> image = render_image(scene, 64, 48, 3, rng=np.random.default_rng(7))
    >>> image.shape
    (48, 64, 3)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from glint.core.integrator import DEFAULT_BOUNCES, trace_color
from glint.core.ray import Ray, Vec, bilerp

if TYPE_CHECKING:
    from glint.scene.scene import Camera, Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]

# Corners of one pixel's footprint: (lower_left, lower_right, upper_left, upper_right)
PixelCorners = tuple[Vec, Vec, Vec, Vec]


def pixel_corners(camera: Camera, row: int, col: int, width: int, height: int) -> PixelCorners:
    """Compute the world-space corners of a pixel's footprint.

    Args:
        camera: The camera whose image plane is sampled.
        row: Pixel row, 0 at the top of the image.
        col: Pixel column, 0 at the left of the image.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The pixel's lower-left, lower-right, upper-left and upper-right corners.
    """
    flipped = height - 1 - row
    u0 = col / width
    u1 = (col + 1) / width
    v0 = flipped / height
    v1 = (flipped + 1) / height
    return (
        camera.image_point(u0, v0),
        camera.image_point(u1, v0),
        camera.image_point(u0, v1),
        camera.image_point(u1, v1),
    )


def sample_positions(
    grid_size: int | None,
    rng: np.random.Generator | None = None,
) -> list[tuple[float, float]]:
    """Return the (u, v) sample positions inside a unit pixel.

    Args:
        grid_size: Samples per side. None or a value below 1 means no
            supersampling: a single centered sample, never jittered.
        rng: Random generator for jitter. None disables jitter.

    Returns:
        ``grid_size ** 2`` positions in [0, 1) x [0, 1), ordered by v then u.
    """
    if grid_size is None or grid_size < 1:
        grid_size = 1
        rng = None

    positions = []
    for i in range(grid_size):
        for j in range(grid_size):
            if rng is None:
                du = dv = 0.5
            else:
                du, dv = rng.random(2)
            positions.append(((j + du) / grid_size, (i + dv) / grid_size))
    return positions


def sample_pixel(
    scene: Scene,
    corners: PixelCorners,
    grid_size: int | None = None,
    rng: np.random.Generator | None = None,
    bounces: int = DEFAULT_BOUNCES,
) -> Vec:
    """Average the colors of the rays cast through one pixel.

    Args:
        scene: The scene to render.
        corners: The pixel footprint from pixel_corners().
        grid_size: Samples per side (None for one centered sample).
        rng: Random generator for jitter (None disables jitter).
        bounces: Reflection bounces per ray.

    Returns:
        The averaged RGB color.
    """
    eye = scene.camera.eye
    positions = sample_positions(grid_size, rng)
    color = np.zeros(3)
    for u, v in positions:
        target = bilerp(*corners, u, v)
        color += trace_color(scene, Ray(origin=eye, direction=target - eye), bounces)
    return color / len(positions)


def render(
    scene: Scene,
    width: int,
    height: int,
    sample_grid_size: int | None = None,
    *,
    rng: np.random.Generator | None = None,
    bounces: int = DEFAULT_BOUNCES,
) -> Iterator[Vec]:
    """Render a scene as a stream of pixel colors.

    Colors are produced in row-major order, top row first and left to right
    within a row. They are unclamped; converting to an output format is the
    consumer's job.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        sample_grid_size: Supersampling grid size per pixel side.
        rng: Random generator for jittered sampling (None disables jitter).
        bounces: Reflection bounces per camera ray.

    Yields:
        One RGB color per pixel, ``width * height`` in total.

    Raises:
        ValueError: If width or height is negative.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")

    for row in range(height):
        for col in range(width):
            corners = pixel_corners(scene.camera, row, col, width, height)
            yield sample_pixel(scene, corners, sample_grid_size, rng, bounces)


def render_image(
    scene: Scene,
    width: int,
    height: int,
    sample_grid_size: int | None = None,
    *,
    rng: np.random.Generator | None = None,
    bounces: int = DEFAULT_BOUNCES,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float64]:
    """Render a scene into an image array.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        sample_grid_size: Supersampling grid size per pixel side.
        rng: Random generator for jittered sampling (None disables jitter).
        bounces: Reflection bounces per camera ray.
        callback: Optional callback called after each completed row with
            (rows_completed, height).

    Returns:
        Array of shape (height, width, 3); row 0 is the top of the image.
    """
    image = np.zeros((height, width, 3), dtype=np.float64)
    start_time = time.perf_counter()

    pixels = render(scene, width, height, sample_grid_size, rng=rng, bounces=bounces)
    for index, color in enumerate(pixels):
        row, col = divmod(index, width)
        image[row, col] = color
        if callback is not None and col == width - 1:
            callback(row + 1, height)

    logger.info(
        "Rendered %dx%d image (grid %s) in %.2fs",
        width,
        height,
        sample_grid_size,
        time.perf_counter() - start_time,
    )
    return image

#!/usr/bin/env python3
"""Render a scene description file.

Reads a scene file (or standard input), renders it with the Whitted-style
ray tracer and writes the image. Without --output the image goes to standard
output as binary PPM, so the script can sit in a pipeline.

Usage:
    python -m examples.render_scene [scene] [options]

Options:
    --size W H          Image size in pixels (default: 700 700)
    --output FILE       Output file; format follows the extension
    --samples G         Supersampling grid: G*G rays per pixel (default: none)
    --jitter-seed N     Jitter --samples inside their grid cells, seeded with N
    --bounces B         Reflection bounces per camera ray (default: 5)
    --tone-map METHOD   none, reinhard or exposure (default: none)
    --gamma GAMMA       Gamma for encoding (default: 1.0, linear)
    --kernel            Render with the compiled Taichi kernel
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene examples/scenes/spheres.scn --size 320 240 -o spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np
import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene description file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        default=None,
        help="Scene file (default: read standard input)",
    )
    parser.add_argument(
        "--size",
        "-s",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=(700, 700),
        help="Image size in pixels (default: 700 700)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output file path (default: PPM on standard output)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Supersampling grid size per pixel side (default: one ray per pixel)",
    )
    parser.add_argument(
        "--jitter-seed",
        type=int,
        default=None,
        help="Jitter the --samples grid with this random seed",
    )
    parser.add_argument(
        "--bounces",
        type=int,
        default=5,
        help="Reflection bounces per camera ray (default: 5)",
    )
    parser.add_argument(
        "--tone-map",
        choices=("none", "reinhard", "exposure"),
        default="none",
        help="Tone mapping method (default: none)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma for encoding (default: 1.0)",
    )
    parser.add_argument(
        "--kernel",
        action="store_true",
        help="Render with the compiled Taichi kernel",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    args = parser.parse_args(argv)
    if min(args.size) < 0:
        parser.error("--size values must be non-negative")
    return args


def render_scene_file(args: argparse.Namespace) -> np.ndarray:
    """Load the scene named by the arguments and render it.

    Returns:
        Linear image of shape (height, width, 3).
    """
    # Lazy imports so that Taichi is initialized before the kernel module loads
    from glint.core.sampler import render_image
    from glint.scene.loader import load_scene, load_scene_text

    width, height = args.size

    def log(*parts: object, **kwargs) -> None:
        if not args.quiet:
            print(*parts, file=sys.stderr, **kwargs)

    if args.scene is None:
        scene = load_scene_text(sys.stdin.read(), "<stdin>", Path.cwd())
    else:
        scene = load_scene(args.scene)

    log(f"Rendering {len(scene.objects)} objects at {width}x{height}...")
    start_time = time.time()

    if args.kernel:
        ti.init(arch=ti.cpu, random_seed=args.jitter_seed or 0)
        from glint.core.kernels import render_kernel_image, upload_scene

        upload_scene(scene)
        image = render_kernel_image(
            width,
            height,
            args.samples,
            jitter=args.jitter_seed is not None,
            bounces=args.bounces,
        )
    else:
        rng = None if args.jitter_seed is None else np.random.default_rng(args.jitter_seed)

        def progress_callback(rows: int, total: int) -> None:
            progress_pct = (rows / total) * 100 if total > 0 else 0
            log(f"\r  Progress: {rows}/{total} rows ({progress_pct:.1f}%)", end="", flush=True)

        image = render_image(
            scene,
            width,
            height,
            args.samples,
            rng=rng,
            bounces=args.bounces,
            callback=None if args.quiet else progress_callback,
        )
        log()  # Newline after progress

    log(f"Render time: {time.time() - start_time:.2f}s")
    return image


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.ERROR if args.quiet else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    from glint.preview.export import save_image, write_stream
    from glint.scene.loader import SceneParseError

    try:
        image = render_scene_file(args)
    except SceneParseError as e:
        # Each error was already logged with its line number
        print(f"Error: {len(e.errors)} error(s) in {e.filename}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output is None:
        write_stream(image, sys.stdout.buffer, tone_map=args.tone_map, gamma=args.gamma)
    else:
        output_file = save_image(image, args.output, tone_map=args.tone_map, gamma=args.gamma)
        if not args.quiet:
            print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

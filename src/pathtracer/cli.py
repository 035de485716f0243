#!/usr/bin/env python3
"""Command-line entry point: render a built-in scene to an image file.

Usage:
    python -m src.pathtracer.cli OUTPUT [options]
    pathtracer OUTPUT [options]

Options:
    -o, --output-file PATH  Output file, alternative to the positional OUTPUT.
                            ``.ppm`` (or no extension) writes plain-text PPM,
                            anything else goes through Pillow.
    --scene {demo,showcase} Scene to render (default: showcase)
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width / height (default: 16/9)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Maximum scattering depth (default: 50)
    --seed SEED             Render seed; omit for a fresh random render
    --scene-seed SEED       Showcase layout seed (default: the render seed)
    --gamma GAMMA           Display gamma (default: 2.0)
    --motion-blur           Animate the showcase's diffuse spheres
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --rows-per-batch ROWS   Rows per kernel launch (default: 16)
    --preview               Show the result in a Matplotlib window
    -v, --verbose           More progress output (repeatable)
    -q, --quiet             Only report errors

Example:
    pathtracer showcase.png --width 200 --samples 20 --seed 7 -v
"""

from __future__ import annotations

import argparse
import contextlib
import io
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti

from src.pathtracer.core.settings import RenderSettings

ARCHES = {"cpu": ti.cpu, "gpu": ti.gpu}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output file path",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        type=str,
        default=None,
        help="Output file path (alternative to the positional argument)",
    )
    parser.add_argument(
        "--scene",
        choices=("demo", "showcase"),
        default="showcase",
        help="Scene to render (default: showcase)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Image width divided by height (default: 16/9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum scattering depth (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Render seed for reproducible output (default: random)",
    )
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=None,
        help="Showcase layout seed (default: the render seed)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=2.0,
        help="Display gamma, 1.0 keeps the image linear (default: 2.0)",
    )
    parser.add_argument(
        "--motion-blur",
        action="store_true",
        help="Let the showcase's diffuse spheres move during the exposure",
    )
    parser.add_argument(
        "--arch",
        choices=tuple(ARCHES),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=16,
        help="Rows rendered per kernel launch (default: 16)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Print per-batch progress; twice adds backend and timing",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> RenderSettings:
    """Build validated render settings from parsed arguments.

    Raises:
        ValueError: If a setting is out of range.
    """
    return RenderSettings(
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        seed=args.seed,
        gamma=args.gamma,
        rows_per_batch=args.rows_per_batch,
    )


def render_to_file(
    args: argparse.Namespace,
    settings: RenderSettings,
    output_path: str,
) -> Path:
    """Render the selected scene and write it to output_path.

    Taichi must already be initialised.

    Args:
        args: Parsed command-line arguments.
        settings: Render settings built from args.
        output_path: Destination file.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the output file cannot be written.
    """
    # Lazy imports to allow Taichi initialization first
    from src.pathtracer.camera.thin_lens import Camera
    from src.pathtracer.core.renderer import Renderer
    from src.pathtracer.preview.export import save_image
    from src.pathtracer.scene.presets import create_scene

    quiet = args.quiet
    verbose = 0 if quiet else args.verbose

    scene_seed = args.scene_seed if args.scene_seed is not None else args.seed
    scene, camera_config = create_scene(
        args.scene,
        seed=scene_seed,
        motion_blur=args.motion_blur,
        aspect_ratio=settings.aspect_ratio,
    )

    renderer = Renderer(settings)
    camera = Camera(camera_config)

    if verbose >= 2:
        print(f"scene : {args.scene} ({len(scene)} primitives)")
        print(f"image : {settings.width}x{settings.height}, {settings.samples_per_pixel} spp")

    if not quiet:
        print("rendering...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if verbose >= 1:
            print(f"rendering row {done} / {total}", flush=True)

    image = renderer.render(scene, camera, callback=progress_callback)

    if not quiet:
        print("rendering finished")
    if verbose >= 2:
        print(f"seed : {renderer.last_seed}")
        print(f"render time : {time.time() - start_time:.2f}s")

    output_file = Path(output_path)
    save_image(image, output_file)
    if not quiet:
        print(f"write to file : {output_file}")

    if args.preview:
        from src.pathtracer.preview.display import show_image

        show_image(image, title=f"{args.scene} - {settings.samples_per_pixel} SPP")

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit status: 0 on success, 1 on any failure.
    """
    args = parse_args(argv)

    output_path = args.output_file if args.output_file is not None else args.output
    if output_path is None:
        print("Error: filename required", file=sys.stderr)
        return 1

    try:
        settings = build_settings(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # ti.init prints its backend banner unconditionally
    banner = contextlib.redirect_stdout(io.StringIO()) if args.quiet else contextlib.nullcontext()
    with banner:
        # NaN checks and IEEE infinities must survive compilation
        ti.init(arch=ARCHES[args.arch], fast_math=False)
    if args.verbose >= 2 and not args.quiet:
        print(f"backend : {args.arch}")

    try:
        render_to_file(args, settings, output_path)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

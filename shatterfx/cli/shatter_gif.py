"""CLI for rendering a shatter animation of an image to a GIF."""

import argparse
import sys
from pathlib import Path

from PIL import Image
from tqdm import tqdm

from shatterfx import ShatterConfig, ShatterEngine, ShatterError
from shatterfx.render import PILTextureProvider, ShatterRenderer, save_gif


def positive_float(value: str) -> float:
    """argparse type for strictly positive floats."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_config(args: argparse.Namespace) -> ShatterConfig:
    """Config from --config YAML (if any) with command-line overrides applied."""
    cfg = ShatterConfig.from_yaml(args.config) if args.config else ShatterConfig()
    overrides = cfg.to_dict()
    if args.grid is not None:
        overrides["grid"] = tuple(args.grid)
    if args.mode is not None:
        overrides["animation"] = args.mode
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.heatmap:
        overrides["show_heatmap"] = True
    return ShatterConfig.from_dict(overrides)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render a triangle-grid shatter effect to an animated GIF")
    parser.add_argument("input", type=Path, help="Input image path")
    parser.add_argument("output", type=Path, help="Output GIF path")
    parser.add_argument("--grid", type=int, nargs=2, metavar=("COLS", "ROWS"), help="Grid resolution (clamped to 2-24)")
    parser.add_argument("--mode", choices=["manual", "automatic"], help="Progress sweep or fixed-duration playback")
    parser.add_argument("--frames", type=int, default=60, help="Frames of the progress sweep in manual mode")
    parser.add_argument("--fps", type=positive_float, default=30.0, help="Frames per second")
    parser.add_argument("--hold", type=float, default=0.15, help="Fraction of frames showing the intact image first")
    parser.add_argument("--margin", type=int, default=200, help="Canvas padding around the image in pixels")
    parser.add_argument("--seed", type=int, help="Random seed (OS entropy when omitted)")
    parser.add_argument("--heatmap", action="store_true", help="Tint fragments by blast intensity")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")

    args = parser.parse_args(argv)

    try:
        cfg = build_config(args)
        image = Image.open(args.input).convert("RGBA")
        engine = ShatterEngine(cfg)
        result = engine.shatter(image)
    except (ShatterError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Shattered {image.width}x{image.height} image into {len(result)} fragments "
          f"({result.grid[0]}x{result.grid[1]} grid)")

    renderer = ShatterRenderer(
        result,
        PILTextureProvider(image),
        margin=args.margin,
        heatmap=cfg.show_heatmap,
        background=(0, 0, 0, 255),
    )

    if cfg.animation == "automatic":
        playback = engine.playback()
        values = playback.frame_times(args.fps)
        render = lambda t: renderer.render_time(playback, t)
    else:
        n = max(args.frames - 1, 1)
        values = [i / n for i in range(n + 1)]
        render = lambda p: renderer.render_progress(p, cfg)
    hold_frames = int(len(values) * args.hold)

    frames = [renderer.render_rest() for _ in range(hold_frames)]
    iterator = tqdm(values, desc="Rendering") if not args.no_progress else values
    for value in iterator:
        frames.append(render(value))

    save_gif(args.output, frames, args.fps)
    print(f"Saved {len(frames)} frames -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

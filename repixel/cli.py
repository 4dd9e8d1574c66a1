from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import RepixelConfig, load_config
from .errors import RepixelError
from .pipeline import rearrange
from .utils.export import export_animation, render_frames
from .utils.image_ops import load_image, match_sizes, resize_to_fit, to_pixel_grid

logger = logging.getLogger("repixel")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repixel",
        description="Rearrange the pixels of SOURCE into the picture of TARGET and export the animation.",
    )
    parser.add_argument("source", help="Image whose pixels are moved")
    parser.add_argument("target", help="Image the pixels are arranged into")
    parser.add_argument("-o", "--output", default="repixel.gif", help="Output .gif or .mp4 (default: repixel.gif)")
    parser.add_argument("--duration", type=float, dest="duration_ms", help="Animation length in ms")
    parser.add_argument("--fps", type=int, help="Export frame rate")
    parser.add_argument("--max-width", type=int, help="Bounding box width both images are fitted into")
    parser.add_argument("--max-height", type=int, help="Bounding box height both images are fitted into")
    parser.add_argument("--hold", type=int, dest="hold_frames", help="Extra frames showing the finished image")
    parser.add_argument("--config", help="JSON file with default settings")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else RepixelConfig()
        cfg = cfg.replace(
            duration_ms=args.duration_ms,
            fps=args.fps,
            max_width=args.max_width,
            max_height=args.max_height,
            hold_frames=args.hold_frames,
            log_level=args.log_level,
        )
    except RepixelError as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
        logger.error("%s", e)
        return 1

    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        target = resize_to_fit(load_image(args.target), cfg.max_width, cfg.max_height)
        source = resize_to_fit(load_image(args.source), cfg.max_width, cfg.max_height)
        source = match_sizes(source, target)
        particles, width, height = rearrange(to_pixel_grid(source), to_pixel_grid(target))
        frames = render_frames(particles, width, height, cfg.duration_ms, cfg.fps, cfg.hold_frames)
        export_animation(frames, args.output, fps=cfg.fps)
    except RepixelError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

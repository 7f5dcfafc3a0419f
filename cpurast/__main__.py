"""
Command-line entry point for cpurast.

Usage:
    python -m cpurast model.obj diffuse.tga --normal-map nm.tga -o output.png
"""

import argparse
import logging
import sys

from cpurast import log
from cpurast.config import RenderConfig
from cpurast.errors import AssetError, ConfigError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpurast",
        description="Render a textured OBJ mesh with shadows on the CPU",
    )
    parser.add_argument("mesh", type=str, help="Path to .obj file")
    parser.add_argument("texture", type=str, help="Path to diffuse texture")
    parser.add_argument(
        "--normal-map", "-n",
        type=str,
        default=None,
        help="Path to normal map texture",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="output.png",
        help="Output image (default: output.png)",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="JSON render config; flags below override it",
    )
    parser.add_argument("--width", "-W", type=int, default=None, help="Output width")
    parser.add_argument("--height", "-H", type=int, default=None, help="Output height")
    parser.add_argument(
        "--shadow-size",
        type=int,
        default=None,
        help="Shadow map resolution (square)",
    )
    parser.add_argument(
        "--no-normal-map",
        action="store_true",
        help="Use interpolated mesh normals even if a normal map is given",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    handler = log.setup_console(logging.DEBUG if args.verbose else logging.INFO)

    from cpurast.renderer import render_files

    try:
        config = RenderConfig.load(args.config) if args.config else RenderConfig()
        config = config.with_overrides(
            width=args.width,
            height=args.height,
            shadow_width=args.shadow_size,
            shadow_height=args.shadow_size,
            use_normal_map=False if args.no_normal_map else None,
        )
        render_files(args.mesh, args.texture, args.output, config, args.normal_map)
    except (AssetError, ConfigError) as e:
        log.error(e, "Render aborted")
        return 1
    finally:
        logging.getLogger("cpurast").removeHandler(handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())

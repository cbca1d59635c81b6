"""Command-line interface for terrain generation and normal map derivation."""

import argparse
import logging
import time
from pathlib import Path

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Procedural terrain synthesis: heightmaps, meshes and splat maps"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate terrain buffers")
    generate.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path or name of terrain TOML config (default: built-in defaults)",
    )
    generate.add_argument("--seed", type=int, default=None, help="Override noise seed")
    generate.add_argument(
        "--resolution", type=int, default=None, help="Override vertices per edge"
    )
    generate.add_argument(
        "--world-size", type=float, default=None, help="Override terrain edge length"
    )
    generate.add_argument(
        "--output",
        "-o",
        type=str,
        default="terrain.npz",
        help="Output path (default: terrain.npz)",
    )
    generate.add_argument(
        "--debug-images",
        type=str,
        default=None,
        help="Directory to save preview images (optional)",
    )

    normal_map = subparsers.add_parser(
        "normal-map", help="Derive a normal map from an image"
    )
    normal_map.add_argument("input", type=str, help="Source image path")
    normal_map.add_argument("output", type=str, help="Normal map output path")
    normal_map.add_argument(
        "--strength", type=float, default=2.0, help="Bump strength (default: 2.0)"
    )

    return parser


def run_generate(args: argparse.Namespace) -> None:
    """Generate terrain from config plus CLI overrides and save it."""
    from .config import default_state, find_config, load_config
    from .generator import generate_terrain
    from .persistence import save_terrain

    logger = structlog.get_logger()

    if args.config:
        config_path = find_config(args.config)
        state = load_config(config_path)
        logger.info("config_loaded", path=str(config_path))
    else:
        state = default_state()
        logger.info("using_default_config")

    if args.seed is not None:
        state = state.with_noise(seed=args.seed)
    if args.resolution is not None or args.world_size is not None:
        state = state.with_terrain_size(
            world_size=args.world_size, resolution=args.resolution
        )

    start_time = time.time()
    result = generate_terrain(
        state,
        debug_output_dir=Path(args.debug_images) if args.debug_images else None,
    )
    logger.info("generation_complete", seconds=round(time.time() - start_time, 2))

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_terrain(output_path, result)


def run_normal_map(args: argparse.Namespace) -> None:
    """Derive a normal map from an image file."""
    from .texture import derive_normal_map, load_image, save_image

    logger = structlog.get_logger()

    pixels = load_image(Path(args.input))
    normal_map = derive_normal_map(pixels, args.strength)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_image(output_path, normal_map)

    logger.info(
        "normal_map_saved",
        path=str(output_path),
        width=normal_map.shape[1],
        height=normal_map.shape[0],
        strength=args.strength,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    from pydantic import ValidationError

    from .exceptions import TerrainError

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    try:
        if args.command == "generate":
            run_generate(args)
        else:
            run_normal_map(args)
    except (TerrainError, ValidationError, FileNotFoundError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        raise SystemExit(1)


if __name__ == "__main__":
    main()

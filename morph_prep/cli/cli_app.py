#!/usr/bin/env python3
"""
Command Line Interface for morph-prep
"""

import argparse
import sys

from ..config.settings import ConfigManager
from ..precompute import precompute_models, generate_palettes
from ..utils.performance import performance_monitor
from ..utils.validation import check_system_requirements, validate_config


def create_parser():
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        prog="morph-prep",
        description="Precompute morph-ready point clouds and paired color palettes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the morph manifest from a folder of GLB models
  morph-prep models public/models -o public/precomputed

  # Smaller clouds for quick previews
  morph-prep models public/models -o public/precomputed --preset preview

  # Extract 32-color palettes and pair them against one image
  morph-prep palettes public/srefs -o public/palettes.json --colors 32 --pair-with base.jpg
        """
    )

    # Shared options
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Configuration file")
    common.add_argument("--preset", choices=["preview", "balanced", "high_detail"],
                        help="Use preset configuration")
    common.add_argument("--stats", action="store_true",
                        help="Print a performance summary when done")
    common.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose output")
    common.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress progress output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    models = subparsers.add_parser("models", parents=[common],
                                   help="Normalize, equalize and align model point clouds")
    models.add_argument("input_dir", help="Directory containing model files")
    models.add_argument("-o", "--output", required=True, help="Output directory")
    models.add_argument("--max-vertices", type=int,
                        help="Maximum vertices per model (default: 20000)")
    models.add_argument("--target-size", type=float,
                        help="Largest bounding box dimension after scaling (default: 3.0)")
    models.add_argument("--trim-fraction", type=float,
                        help="Fraction of the height range trimmed from the bottom (default: 0.01)")
    models.add_argument("--grid-divisions", type=int,
                        help="Spatial grid cells along the largest dimension (default: 20)")
    models.add_argument("--max-ring-radius", type=int,
                        help="Grid rings searched before a full scan (default: 2)")
    models.add_argument("--parallel", action="store_true",
                        help="Align models in parallel processes")
    models.add_argument("--workers", type=int, help="Number of worker processes")

    palettes = subparsers.add_parser("palettes", parents=[common],
                                     help="Extract color palettes from images")
    palettes.add_argument("image_dir", help="Directory containing images")
    palettes.add_argument("-o", "--output", required=True, help="Output JSON file")
    palettes.add_argument("--colors", type=int, help="Colors per palette (default: 64)")
    palettes.add_argument("--pair-with",
                          help="Image whose palette order the other palettes are paired to")

    return parser


def build_config(args) -> ConfigManager:
    """Layer configuration file, preset and command line overrides"""
    config_manager = ConfigManager(args.config, verbose=args.verbose) if args.config \
        else ConfigManager(verbose=False)

    if args.preset:
        config_manager.apply_preset(args.preset)
        if args.verbose:
            print(f"Applied preset: {args.preset}")

    overrides = {
        "geometry.max_vertex_count": getattr(args, "max_vertices", None),
        "geometry.target_size": getattr(args, "target_size", None),
        "geometry.trim_fraction": getattr(args, "trim_fraction", None),
        "correspondence.grid_divisions": getattr(args, "grid_divisions", None),
        "correspondence.max_ring_radius": getattr(args, "max_ring_radius", None),
        "performance.n_workers": getattr(args, "workers", None),
        "palette.color_count": getattr(args, "colors", None),
    }
    for key_path, value in overrides.items():
        if value is not None:
            config_manager.set(key_path, value)
    if getattr(args, "parallel", False):
        config_manager.set("performance.parallel_processing", True)

    return config_manager


def progress_callback(message, progress, quiet=False):
    """Progress callback for the geometry pipeline"""
    if not quiet:
        print(f"[{progress*100:.1f}%] {message}")


def run_models(args, config_manager):
    return precompute_models(
        args.input_dir,
        args.output,
        config=config_manager,
        progress_callback=lambda msg, prog: progress_callback(msg, prog, args.quiet),
        monitor=args.monitor,
        verbose=not args.quiet,
    )


def run_palettes(args, config_manager):
    return generate_palettes(
        args.image_dir,
        args.output,
        config=config_manager,
        pair_with=args.pair_with,
        verbose=not args.quiet,
    )


def main(argv=None):
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose and not args.quiet:
        meets_requirements, req_message = check_system_requirements()
        print(f"System: {req_message}")
        if not meets_requirements:
            sys.exit(1)

    config_manager = build_config(args)
    is_valid, message = validate_config(config_manager.config)
    if not is_valid:
        print(f"Invalid configuration: {message}")
        sys.exit(1)

    commands = {"models": run_models, "palettes": run_palettes}

    with performance_monitor(args.command, report=args.stats) as monitor:
        args.monitor = monitor
        try:
            commands[args.command](args, config_manager)
        except (ValueError, FileNotFoundError, OSError) as e:
            print(f"Error: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()

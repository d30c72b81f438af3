"""
dexclc CLI: Command-line interface for class loader context computation.

Provides commands for:
- compute: Print the compiler flags, build paths and uses-libs of a module
- show: Render a module's class loader context as a tree
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dexclc.errors import ClassLoaderContextError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dexclc",
        description="dexclc: class loader context for <uses-library> dependencies",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # compute
    compute_parser = subparsers.add_parser(
        "compute",
        help="Print the class loader context flags of a module",
    )
    compute_parser.add_argument(
        "--config", "-c",
        help="Config file (default: .dexclc.toml in cwd or a parent)",
    )
    compute_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # show
    show_parser = subparsers.add_parser(
        "show",
        help="Render the class loader context of a module as a tree",
    )
    show_parser.add_argument(
        "--config", "-c",
        help="Config file (default: .dexclc.toml in cwd or a parent)",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "compute":
        return handle_compute(args)
    elif args.command == "show":
        return handle_show(args)
    else:
        parser.print_help()
        return 0


def _load(args: argparse.Namespace):
    from dexclc.config import ProjectConfig
    from dexclc.generate import generate_class_loader_context

    if args.config:
        config = ProjectConfig.load_file(Path(args.config))
    else:
        config = ProjectConfig.load()
    return config, generate_class_loader_context(config.module, config.global_config)


def handle_compute(args: argparse.Namespace) -> int:
    """Handle the compute command."""
    from dexclc.serialize import (
        class_loader_context_flag,
        compute_class_loader_context,
        to_json_dict,
    )

    try:
        config, clc_map = _load(args)
    except (ClassLoaderContextError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if clc_map is None:
        paths: list[str] = []
        uses_libs: list[str] = []
        tiers: dict = {}
    else:
        paths = compute_class_loader_context(clc_map)[1]
        uses_libs = clc_map.uses_libs()
        tiers = to_json_dict(clc_map)
    flags = class_loader_context_flag(clc_map)

    if args.json_output:
        print(
            json.dumps(
                {
                    "module": config.module.name,
                    "class_loader_context": flags,
                    "paths": paths,
                    "uses_libs": uses_libs,
                    "tiers": tiers,
                },
                indent=2,
            )
        )
    else:
        print(f"Module: {config.module.name}")
        print(f"  Class loader context: {flags}")
        print(f"  Paths: {' '.join(paths)}")
        print(f"  Uses libs: {' '.join(uses_libs)}")

    return 0


def handle_show(args: argparse.Namespace) -> int:
    """Handle the show command."""
    from dexclc.display import display_class_loader_context

    try:
        config, clc_map = _load(args)
    except (ClassLoaderContextError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    display_class_loader_context(clc_map, title=config.module.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())

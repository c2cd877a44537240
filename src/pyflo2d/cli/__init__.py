"""
pyflo2d command-line interface.

Usage:
    pyflo2d info PATH [options]     Summarize a FLO-2D model
    pyflo2d export PATH [options]   Write dataset groups to an HDF5 container
"""

from __future__ import annotations

import argparse
import logging


def configure_logging(debug: bool) -> None:
    """Configure root logging for a subcommand run."""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pyflo2d",
        description="Python tools for FLO-2D flood simulation outputs.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Register subcommands
    from pyflo2d.cli.export import add_export_parser
    from pyflo2d.cli.info import add_info_parser

    add_info_parser(subparsers)
    add_export_parser(subparsers)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to the subcommand handler
    result: int = args.func(args)
    return result


__all__ = ["main"]

"""
``pyflo2d export`` subcommand.

Loads a FLO-2D model and writes its dataset groups to an HDF5 container.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def add_export_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``export`` subcommand."""
    p = subparsers.add_parser(
        "export",
        help="Write dataset groups to a FLO-2D HDF5 container.",
        description=(
            "Load a FLO-2D model and append its dataset groups to an HDF5 "
            "container, creating it if needed."
        ),
    )

    p.add_argument(
        "path",
        type=Path,
        help="Any file in the model directory (e.g. TIMDEP.OUT) or the directory itself",
    )
    p.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Output HDF5 file",
    )
    p.add_argument(
        "--group",
        dest="groups",
        action="append",
        metavar="NAME",
        help="Dataset group to export (repeatable, default: all)",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    p.set_defaults(func=run_export)


def run_export(args: argparse.Namespace) -> int:
    """Run the ``export`` subcommand."""
    from pyflo2d.cli import configure_logging
    from pyflo2d.io.flo2d import Flo2DDriver

    configure_logging(args.debug)

    driver = Flo2DDriver()
    result = driver.load_mesh(args.path)
    if not result.ok or result.mesh is None:
        print(f"ERROR: Failed to load model ({result.status.value}): {result.message}")
        return 1

    mesh = result.mesh
    groups = mesh.dataset_groups
    if args.groups:
        missing = [name for name in args.groups if name not in mesh.dataset_group_names]
        if missing:
            print(f"ERROR: Unknown dataset group(s): {', '.join(missing)}")
            return 1
        groups = [g for g in groups if g.name in args.groups]

    output = args.output.resolve()
    failed = 0
    for group in groups:
        if driver.persist(group, mesh.n_faces, output):
            print(f"  Exported: {group.name}")
        else:
            logger.warning("Export of '%s' failed", group.name)
            print(f"  Export failed: {group.name}")
            failed += 1

    print()
    print(f"Export complete. {len(groups) - failed} group(s) written to {output}")
    return 1 if failed else 0

"""
``pyflo2d info`` subcommand.

Loads a FLO-2D model and prints its mesh and dataset group summary.
"""

from __future__ import annotations

import argparse
from pathlib import Path


def add_info_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``info`` subcommand."""
    p = subparsers.add_parser(
        "info",
        help="Summarize a FLO-2D model.",
        description="Load a FLO-2D model and print its mesh and dataset groups.",
    )

    p.add_argument(
        "path",
        type=Path,
        help="Any file in the model directory (e.g. TIMDEP.OUT) or the directory itself",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    p.set_defaults(func=run_info)


def run_info(args: argparse.Namespace) -> int:
    """Run the ``info`` subcommand."""
    from pyflo2d.cli import configure_logging
    from pyflo2d.io.flo2d import load_mesh

    configure_logging(args.debug)

    result = load_mesh(args.path)
    if not result.ok or result.mesh is None:
        print(f"ERROR: Failed to load model ({result.status.value}): {result.message}")
        return 1

    mesh = result.mesh
    xmin, ymin, xmax, ymax = mesh.bounding_box
    print(f"Mesh: {mesh.n_vertices} vertices, {mesh.n_faces} faces")
    print(f"Extent: ({xmin}, {ymin}) to ({xmax}, {ymax})")
    print(f"Dataset groups: {len(mesh.dataset_groups)}")
    for group in mesh.dataset_groups:
        kind = "scalar" if group.is_scalar else "vector"
        st = group.statistics
        print(
            f"  {group.name:<24} {kind:<7} {group.n_datasets:>5} steps  "
            f"min={st.minimum:g} max={st.maximum:g}"
        )
    return 0

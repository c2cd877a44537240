"""Pytest configuration and fixtures for pyflo2d tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


def _write_lines(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], Path]:
    """Return a helper writing ``lines`` to a text file."""
    return _write_lines


@pytest.fixture
def grid_2x2_cadpts() -> list[str]:
    """
    Cell centers of a 2x2 grid with cell size 10.

    Layout (cell ids):
        3 | 4
        --+--
        1 | 2
    """
    return [
        "1 5.0 5.0",
        "2 15.0 5.0",
        "3 5.0 15.0",
        "4 15.0 15.0",
    ]


@pytest.fixture
def grid_2x2_fplain() -> list[str]:
    """Connectivity (ID N E S W MANNING BED) of the 2x2 grid."""
    return [
        "1 3 2 0 0 0.04 100.0",
        "2 4 0 0 1 0.04 101.0",
        "3 0 4 1 0 0.04 102.0",
        "4 0 0 2 3 0.04 103.0",
    ]


@pytest.fixture
def grid_2x2_timdep() -> list[str]:
    """TIMDEP.OUT with two time steps; 0.0 is the no-data value."""
    return [
        "0.50",
        "1 0.5 1.0 0.6 0.8",
        "2 0.0 0.0 0.0 0.0",
        "3 1.5 2.0 1.2 1.6 103.5",
        "4 0.25 0.3 0.3 0.0",
        "1.00",
        "1 1.0 1.0 1.0 1.0",
        "2 2.0 1.0 1.0 1.0",
        "3 3.0 1.0 1.0 1.0",
        "4 4.0 1.0 1.0 1.0",
    ]


@pytest.fixture
def grid_2x2_dir(
    tmp_path: Path, grid_2x2_cadpts: list[str], grid_2x2_fplain: list[str]
) -> Path:
    """Model directory with only the 2x2 topology files."""
    model_dir = tmp_path / "model"
    model_dir.mkdir()
    _write_lines(model_dir / "CADPTS.DAT", grid_2x2_cadpts)
    _write_lines(model_dir / "FPLAIN.DAT", grid_2x2_fplain)
    return model_dir


@pytest.fixture
def grid_2x2_results_dir(grid_2x2_dir: Path, grid_2x2_timdep: list[str]) -> Path:
    """Model directory with topology and every text result file."""
    _write_lines(grid_2x2_dir / "TIMDEP.OUT", grid_2x2_timdep)
    _write_lines(
        grid_2x2_dir / "DEPTH.OUT",
        ["1 5.0 5.0 2.0", "2 15.0 5.0 0.0", "3 5.0 15.0 1.0", "4 15.0 15.0 0.5"],
    )
    _write_lines(
        grid_2x2_dir / "VELFP.OUT",
        ["1 5.0 5.0 1.0", "2 15.0 5.0 0.0", "3 5.0 15.0 3.0", "4 15.0 15.0 0.0"],
    )
    _write_lines(
        grid_2x2_dir / "VELOC.OUT",
        ["1 5.0 5.0 0.0", "2 15.0 5.0 2.0", "3 5.0 15.0 0.0", "4 15.0 15.0 0.0"],
    )
    return grid_2x2_dir


@pytest.fixture
def grid_2x2_elevations() -> list[float]:
    return [100.0, 101.0, 102.0, 103.0]

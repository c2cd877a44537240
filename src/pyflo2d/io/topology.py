"""
Mesh reconstruction from FLO-2D cell-center files.

FLO-2D stores only cell centers (``CADPTS.DAT``) and the N/E/S/W
neighbor table (``FPLAIN.DAT``). Vertices are synthesized by offsetting
each center by half a cell size, and corners shared by adjacent cells are
merged into a single vertex.

File formats::

    CADPTS.DAT  ID  X  Y
    FPLAIN.DAT  ID  N  E  S  W  MANNING_N  BED_ELEVATION

IDs are 1-based; a neighbor of 0 marks a boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from pyflo2d.core.exceptions import (
    FileFormatError,
    Flo2DFileNotFoundError,
    IncompatibleMeshError,
)
from pyflo2d.core.mesh import Mesh
from pyflo2d.io.config import DEFAULT_VERTEX_TOLERANCE, Flo2DFileConfig
from pyflo2d.io.flo2d_reader import expect_fields, iter_records, parse_float, parse_int

logger = logging.getLogger(__name__)

BOUNDARY = -1

# Neighbor slots in FPLAIN.DAT order
NORTH, EAST, SOUTH, WEST = range(4)

# Corner offsets (dx, dy) in units of half a cell: SE, NE, NW, SW
CORNER_OFFSETS: tuple[tuple[int, int], ...] = ((1, -1), (1, 1), (-1, 1), (-1, -1))


@dataclass
class CellCenter:
    """
    A FLO-2D grid cell center, used only while building the mesh.

    Attributes:
        id: 0-based cell id
        x: Center x coordinate
        y: Center y coordinate
        conn: Neighbor cell ids in N, E, S, W order, -1 for boundary
    """

    id: int
    x: float
    y: float
    conn: list[int] = field(default_factory=lambda: [BOUNDARY] * 4)

    @property
    def is_isolated(self) -> bool:
        return all(n == BOUNDARY for n in self.conn)


def parse_cadpts(filepath: Path | str) -> list[CellCenter]:
    """
    Read cell centers from a ``CADPTS.DAT`` file.

    The id on each line must match the 1-based line order (blank lines
    excluded).

    Args:
        filepath: Path to the cell-center file

    Returns:
        Cell centers in id order

    Raises:
        Flo2DFileNotFoundError: If the file does not exist
        FileFormatError: If a line is not ``ID X Y``
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise Flo2DFileNotFoundError(f"Cell center file not found: {filepath}", filepath)

    cells: list[CellCenter] = []
    for line_num, parts in iter_records(filepath):
        expect_fields(parts, 3, "CADPTS.DAT", line_num)
        cell_id = parse_int(parts[0], "cell id", line_num)
        if cell_id != len(cells) + 1:
            raise FileFormatError(
                f"Cell id {cell_id} out of sequence, expected {len(cells) + 1}",
                line_number=line_num,
            )
        cells.append(
            CellCenter(
                id=cell_id - 1,
                x=parse_float(parts[1], "cell x", line_num),
                y=parse_float(parts[2], "cell y", line_num),
            )
        )

    logger.debug("Read %d cell centers from %s", len(cells), filepath)
    return cells


def parse_fplain(filepath: Path | str, cells: list[CellCenter]) -> NDArray[np.float64]:
    """
    Read cell connectivity from an ``FPLAIN.DAT`` file into ``cells``.

    Rows must appear in cell id order so that the returned bed elevations
    line up with face indices.

    Args:
        filepath: Path to the connectivity file
        cells: Cell centers from :func:`parse_cadpts`, updated in place

    Returns:
        Bed elevation per cell, in cell id order

    Raises:
        Flo2DFileNotFoundError: If the file does not exist
        FileFormatError: If a line is malformed or rows are out of order
        IncompatibleMeshError: If ids or row count disagree with ``cells``
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise Flo2DFileNotFoundError(f"Connectivity file not found: {filepath}", filepath)

    n_cells = len(cells)
    elevations: list[float] = []
    for line_num, parts in iter_records(filepath):
        expect_fields(parts, 7, "FPLAIN.DAT", line_num)
        cell_id = parse_int(parts[0], "cell id", line_num)
        if cell_id < 1 or cell_id > n_cells:
            raise IncompatibleMeshError(
                f"FPLAIN.DAT line {line_num}: cell id {cell_id} outside 1..{n_cells}"
            )
        if cell_id != len(elevations) + 1:
            raise FileFormatError(
                f"Cell id {cell_id} out of sequence, expected {len(elevations) + 1}",
                line_number=line_num,
            )

        cell = cells[cell_id - 1]
        for j in range(4):
            neighbor = parse_int(parts[j + 1], "neighbor id", line_num)
            if neighbor < 0 or neighbor > n_cells:
                raise IncompatibleMeshError(
                    f"FPLAIN.DAT line {line_num}: neighbor id {neighbor} outside 0..{n_cells}"
                )
            cell.conn[j] = neighbor - 1

        parse_float(parts[5], "manning-n", line_num)
        elevations.append(parse_float(parts[6], "bed elevation", line_num))

    if len(elevations) != n_cells:
        raise IncompatibleMeshError(
            f"FPLAIN.DAT has {len(elevations)} rows, CADPTS.DAT has {n_cells} cells"
        )

    logger.debug("Read connectivity for %d cells from %s", n_cells, filepath)
    return np.array(elevations, dtype=np.float64)


def calculate_cell_size(cells: list[CellCenter]) -> float:
    """
    Return the grid cell size.

    The first cell (in id order) with a neighbor is the reference: the
    distance between the two centers along the axis of that neighbor's
    direction is the cell size of the whole grid.

    Raises:
        IncompatibleMeshError: If no cell has a neighbor or the distance is zero
    """
    for cell in cells:
        for direction in (NORTH, EAST, SOUTH, WEST):
            idx = cell.conn[direction]
            if idx == BOUNDARY:
                continue
            neighbor = cells[idx]
            if direction in (NORTH, SOUTH):
                size = abs(neighbor.y - cell.y)
            else:
                size = abs(neighbor.x - cell.x)
            if size == 0.0:
                raise IncompatibleMeshError(
                    f"Cell {cell.id + 1} and its neighbor {idx + 1} share a center coordinate"
                )
            return size
    raise IncompatibleMeshError("No connected cells found, cannot derive cell size")


def create_vertex(position: int, half_cell_size: float, cell: CellCenter) -> tuple[float, float]:
    """Return corner ``position`` (0=SE, 1=NE, 2=NW, 3=SW) of a cell."""
    dx, dy = CORNER_OFFSETS[position]
    return (cell.x + dx * half_cell_size, cell.y + dy * half_cell_size)


def build_mesh(
    cells: list[CellCenter],
    half_cell_size: float,
    uri: str = "",
    tolerance: float = DEFAULT_VERTEX_TOLERANCE,
) -> Mesh:
    """
    Create quad faces and deduplicated vertices from cell centers.

    Corners are merged when their coordinates round to the same multiple
    of ``tolerance``.

    Args:
        cells: Cell centers in id order
        half_cell_size: Half of the grid cell size
        uri: Source locator stored on the mesh
        tolerance: Coordinate quantization step for vertex identity

    Returns:
        Mesh with one face per cell
    """
    vertex_ids: dict[tuple[int, int], int] = {}
    vertices: list[tuple[float, float]] = []
    faces = np.empty((len(cells), 4), dtype=np.int64)

    for i, cell in enumerate(cells):
        for position in range(4):
            x, y = create_vertex(position, half_cell_size, cell)
            key = (round(x / tolerance), round(y / tolerance))
            vid = vertex_ids.get(key)
            if vid is None:
                vid = len(vertices)
                vertex_ids[key] = vid
                vertices.append((x, y))
            faces[i, position] = vid

    return Mesh(vertices=np.array(vertices, dtype=np.float64), faces=faces, uri=uri)


def read_topology(
    config: Flo2DFileConfig, uri: str = ""
) -> tuple[Mesh, NDArray[np.float64]]:
    """
    Reconstruct the mesh of a FLO-2D model.

    Args:
        config: File configuration of the model
        uri: Source locator stored on the mesh

    Returns:
        Tuple of (mesh, bed elevation per face)
    """
    cells = parse_cadpts(config.cadpts_path)
    elevations = parse_fplain(config.fplain_path, cells)
    cell_size = calculate_cell_size(cells)
    mesh = build_mesh(cells, cell_size / 2.0, uri=uri, tolerance=config.vertex_tolerance)

    logger.info(
        "Reconstructed mesh: %d cells, %d vertices, cell size %g",
        mesh.n_faces,
        mesh.n_vertices,
        cell_size,
    )
    return mesh, elevations

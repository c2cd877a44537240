"""
Readers for FLO-2D text result files.

All files handled here are optional; a missing file is skipped.

- ``TIMDEP.OUT``: time-varying depth and velocity. A line holding a
  single number starts a new time step; the following lines hold one
  face each (``ID DEPTH VEL VELX VELY [WSE]``) in face order.
- ``DEPTH.OUT``: maximum depth per face (``ID X Y VALUE``).
- ``VELFP.OUT`` / ``VELOC.OUT``: maximum floodplain and channel velocity
  per face (``ID X Y VALUE``). Channel values override floodplain values
  where present.

Water level is derived as depth plus bed elevation and is missing
wherever depth is missing.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from pyflo2d.core.datasets import Dataset, DatasetGroup, create_static_group
from pyflo2d.core.exceptions import FileFormatError, IncompatibleMeshError
from pyflo2d.io.config import Flo2DFileConfig
from pyflo2d.io.flo2d_reader import expect_fields, iter_records, parse_float
from pyflo2d.io.sentinel import decode

logger = logging.getLogger(__name__)

DEPTH = "Depth"
VELOCITY = "Velocity"
WATER_LEVEL = "Water Level"
MAX_DEPTH = "Depth/Maximums"
MAX_WATER_LEVEL = "Water Level/Maximums"
MAX_VELOCITY = "Velocity/Maximums"


def water_level(depth: float, bed_elevation: float) -> float:
    """Return depth + bed elevation, or NaN if depth is missing."""
    if math.isnan(depth):
        return math.nan
    return depth + bed_elevation


class _TimestepBuilder:
    """Accumulates the depth/velocity/water level datasets of one time step."""

    def __init__(
        self,
        groups: tuple[DatasetGroup, DatasetGroup, DatasetGroup],
        n_faces: int,
        time: float,
    ) -> None:
        depth_grp, velocity_grp, level_grp = groups
        self.depth = Dataset.empty(depth_grp, n_faces, time)
        self.velocity = Dataset.empty(velocity_grp, n_faces, time)
        self.level = Dataset.empty(level_grp, n_faces, time)
        self.n_faces = n_faces
        self.face_idx = 0

    def add_face(self, parts: list[str], elevations: NDArray[np.float64], line_num: int) -> None:
        if self.face_idx == self.n_faces:
            raise IncompatibleMeshError(
                f"TIMDEP.OUT line {line_num}: more than {self.n_faces} faces in time step "
                f"{self.depth.time}"
            )
        i = self.face_idx
        depth = decode(parse_float(parts[1], "depth", line_num))
        self.depth.values[i] = depth
        self.velocity.values[2 * i] = decode(parse_float(parts[3], "velocity x", line_num))
        self.velocity.values[2 * i + 1] = decode(parse_float(parts[4], "velocity y", line_num))
        self.level.values[i] = water_level(depth, float(elevations[i]))
        self.face_idx += 1

    def flush(self) -> None:
        """Append the datasets to their groups if any face was written."""
        if self.face_idx == 0:
            return
        for ds in (self.depth, self.velocity, self.level):
            ds.group.add_dataset(ds)


def read_timdep_out(
    filepath: Path | str,
    n_faces: int,
    elevations: NDArray[np.float64],
    uri: str = "",
) -> list[DatasetGroup]:
    """
    Read time-varying depth, velocity and water level from ``TIMDEP.OUT``.

    Args:
        filepath: Path to TIMDEP.OUT
        n_faces: Number of mesh faces
        elevations: Bed elevation per face
        uri: Source locator stored on the groups

    Returns:
        ``[Depth, Velocity, Water Level]`` groups, or an empty list if
        the file does not exist

    Raises:
        FileFormatError: If a line has an unexpected field count or a face
            line precedes the first time line
        IncompatibleMeshError: If a time step lists more faces than the mesh
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        logger.debug("Optional file %s not found, skipping", filepath)
        return []

    depth_grp = DatasetGroup(name=DEPTH, uri=uri, is_on_vertices=False, is_scalar=True)
    velocity_grp = DatasetGroup(name=VELOCITY, uri=uri, is_on_vertices=False, is_scalar=False)
    level_grp = DatasetGroup(name=WATER_LEVEL, uri=uri, is_on_vertices=False, is_scalar=True)
    groups = (depth_grp, velocity_grp, level_grp)

    step: _TimestepBuilder | None = None
    for line_num, parts in iter_records(filepath):
        if len(parts) == 1:
            time = parse_float(parts[0], "time", line_num)
            if step is not None:
                step.flush()
            step = _TimestepBuilder(groups, n_faces, time)
        elif len(parts) in (5, 6):
            if step is None:
                raise FileFormatError(
                    "Face record before first time line in TIMDEP.OUT", line_number=line_num
                )
            step.add_face(parts, elevations, line_num)
        else:
            expect_fields(parts, (1, 5, 6), "TIMDEP.OUT", line_num)

    if step is not None:
        step.flush()

    for grp in groups:
        grp.update_statistics()

    logger.debug("Read %d time steps from %s", depth_grp.n_datasets, filepath)
    return list(groups)


def _read_max_values(filepath: Path, n_faces: int, name: str) -> NDArray[np.float64]:
    """Read the decoded 4th column of an ``ID X Y VALUE`` file in face order."""
    values = np.full(n_faces, np.nan)
    face_idx = 0
    for line_num, parts in iter_records(filepath):
        if face_idx == n_faces:
            raise IncompatibleMeshError(f"{name} line {line_num}: more than {n_faces} faces")
        expect_fields(parts, 4, name, line_num)
        values[face_idx] = decode(parse_float(parts[3], "maximum value", line_num))
        face_idx += 1
    return values


def read_depth_out(
    filepath: Path | str,
    n_faces: int,
    elevations: NDArray[np.float64],
    uri: str = "",
) -> list[DatasetGroup]:
    """
    Read maximum depth from ``DEPTH.OUT``.

    Returns:
        ``[Depth/Maximums, Water Level/Maximums]`` groups, or an empty
        list if the file does not exist
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        logger.debug("Optional file %s not found, skipping", filepath)
        return []

    max_depth = _read_max_values(filepath, n_faces, "DEPTH.OUT")
    max_level = np.where(np.isnan(max_depth), np.nan, max_depth + elevations)

    return [
        create_static_group(MAX_DEPTH, max_depth, uri=uri),
        create_static_group(MAX_WATER_LEVEL, max_level, uri=uri),
    ]


def read_velocity_maxima(
    velfp_path: Path | str,
    veloc_path: Path | str,
    n_faces: int,
    uri: str = "",
) -> list[DatasetGroup]:
    """
    Read maximum velocity from ``VELFP.OUT`` and ``VELOC.OUT``.

    ``VELFP.OUT`` gives the floodplain maximum for every face. Where
    ``VELOC.OUT`` has a value for a face, it replaces the floodplain value.

    Returns:
        ``[Velocity/Maximums]``, or an empty list if ``VELFP.OUT`` does
        not exist
    """
    velfp_path = Path(velfp_path)
    veloc_path = Path(veloc_path)
    if not velfp_path.is_file():
        logger.debug("Optional file %s not found, skipping", velfp_path)
        return []

    max_vel = _read_max_values(velfp_path, n_faces, "VELFP.OUT")
    if veloc_path.is_file():
        channel = _read_max_values(veloc_path, n_faces, "VELOC.OUT")
        max_vel = combine_velocity_maxima(max_vel, channel)
    else:
        logger.debug("Optional file %s not found, using floodplain maxima only", veloc_path)

    return [create_static_group(MAX_VELOCITY, max_vel, uri=uri)]


def combine_velocity_maxima(
    baseline: NDArray[np.float64], overrides: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Return ``baseline`` with every non-missing value of ``overrides`` applied."""
    baseline = np.asarray(baseline, dtype=np.float64)
    overrides = np.asarray(overrides, dtype=np.float64)
    return np.where(np.isnan(overrides), baseline, overrides)


def read_text_results(
    config: Flo2DFileConfig,
    n_faces: int,
    elevations: NDArray[np.float64],
    uri: str = "",
) -> list[DatasetGroup]:
    """Read every available text result file of a model, in load order."""
    groups: list[DatasetGroup] = []
    groups.extend(read_timdep_out(config.timdep_path, n_faces, elevations, uri))
    groups.extend(read_depth_out(config.depth_path, n_faces, elevations, uri))
    groups.extend(read_velocity_maxima(config.velfp_path, config.veloc_path, n_faces, uri))
    logger.info("Read %d dataset groups from text results in %s", len(groups), config.model_dir)
    return groups

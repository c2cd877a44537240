"""I/O handlers for FLO-2D file formats."""

from __future__ import annotations

from pyflo2d.io.config import Flo2DFileConfig
from pyflo2d.io.flo2d import (
    Capability,
    Flo2DDriver,
    LoadResult,
    load_datasets,
    load_mesh,
    persist,
)
from pyflo2d.io.hdf5 import (
    HDF5ResultsReader,
    HDF5ResultsWriter,
    read_hdf5_results,
    write_dataset_group,
)
from pyflo2d.io.text_results import (
    read_depth_out,
    read_text_results,
    read_timdep_out,
    read_velocity_maxima,
)
from pyflo2d.io.topology import (
    CellCenter,
    build_mesh,
    calculate_cell_size,
    parse_cadpts,
    parse_fplain,
    read_topology,
)

__all__ = [
    # Config
    "Flo2DFileConfig",
    # Driver
    "Capability",
    "Flo2DDriver",
    "LoadResult",
    "load_mesh",
    "load_datasets",
    "persist",
    # Topology
    "CellCenter",
    "parse_cadpts",
    "parse_fplain",
    "calculate_cell_size",
    "build_mesh",
    "read_topology",
    # Text results
    "read_timdep_out",
    "read_depth_out",
    "read_velocity_maxima",
    "read_text_results",
    # HDF5
    "HDF5ResultsReader",
    "HDF5ResultsWriter",
    "read_hdf5_results",
    "write_dataset_group",
]

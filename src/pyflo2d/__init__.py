"""
pyflo2d - Python package for FLO-2D flood simulation outputs.

This package provides tools for:
- Reconstructing the quad mesh of a FLO-2D grid from its cell centers
- Reading time-varying and maximum results from text and HDF5 files
- Writing dataset groups to FLO-2D HDF5 containers
"""

from __future__ import annotations

__version__ = "0.1.0"

from pyflo2d.core.datasets import Dataset, DatasetGroup, Statistics
from pyflo2d.core.exceptions import (
    FileFormatError,
    Flo2DFileNotFoundError,
    Flo2DIOError,
    Flo2DStatus,
    IncompatibleMeshError,
    InvalidDataError,
    PyFlo2DError,
)
from pyflo2d.core.mesh import Extent, Mesh, Vertex
from pyflo2d.io.flo2d import Flo2DDriver, LoadResult, load_datasets, load_mesh, persist

__all__ = [
    "__version__",
    # Core classes
    "Vertex",
    "Extent",
    "Mesh",
    "Dataset",
    "DatasetGroup",
    "Statistics",
    # Driver
    "Flo2DDriver",
    "LoadResult",
    "load_mesh",
    "load_datasets",
    "persist",
    # Exceptions
    "Flo2DStatus",
    "PyFlo2DError",
    "Flo2DIOError",
    "Flo2DFileNotFoundError",
    "FileFormatError",
    "IncompatibleMeshError",
    "InvalidDataError",
]

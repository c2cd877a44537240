"""Core data structures for pyflo2d."""

from __future__ import annotations

from pyflo2d.core.datasets import (
    Dataset,
    DatasetGroup,
    Statistics,
    calculate_statistics,
    create_static_group,
    merge_statistics,
)
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

__all__ = [
    # Mesh classes
    "Vertex",
    "Extent",
    "Mesh",
    # Dataset classes
    "Dataset",
    "DatasetGroup",
    "Statistics",
    "calculate_statistics",
    "merge_statistics",
    "create_static_group",
    # Exceptions
    "Flo2DStatus",
    "PyFlo2DError",
    "Flo2DIOError",
    "Flo2DFileNotFoundError",
    "FileFormatError",
    "IncompatibleMeshError",
    "InvalidDataError",
]

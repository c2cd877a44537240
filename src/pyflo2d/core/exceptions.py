"""Custom exceptions and load status codes for pyflo2d package."""

from __future__ import annotations

from enum import Enum


class Flo2DStatus(Enum):
    """Outcome of a load operation."""

    NONE = "none"
    FILE_NOT_FOUND = "file_not_found"
    UNKNOWN_FORMAT = "unknown_format"
    INCOMPATIBLE_MESH = "incompatible_mesh"
    INVALID_DATA = "invalid_data"

    @property
    def is_error(self) -> bool:
        """Return True for every status except NONE."""
        return self is not Flo2DStatus.NONE


class PyFlo2DError(Exception):
    """Base exception for all pyflo2d errors."""

    status = Flo2DStatus.INVALID_DATA


class Flo2DIOError(PyFlo2DError):
    """Error related to file I/O operations."""

    pass


class Flo2DFileNotFoundError(Flo2DIOError, FileNotFoundError):
    """Error raised when a mandatory model file is absent."""

    status = Flo2DStatus.FILE_NOT_FOUND

    def __init__(self, message: str, filepath: object = None) -> None:
        super().__init__(message)
        self.filepath = filepath


class FileFormatError(Flo2DIOError):
    """Error raised when file format is invalid."""

    status = Flo2DStatus.UNKNOWN_FORMAT

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class IncompatibleMeshError(PyFlo2DError):
    """Error raised when a data source disagrees with the mesh topology."""

    status = Flo2DStatus.INCOMPATIBLE_MESH


class InvalidDataError(Flo2DIOError):
    """Error raised when a container is readable but semantically malformed."""

    status = Flo2DStatus.INVALID_DATA

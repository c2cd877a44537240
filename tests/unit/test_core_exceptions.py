"""Unit tests for pyflo2d custom exceptions (core/exceptions.py)."""

from __future__ import annotations

import pytest

from pyflo2d.core.exceptions import (
    FileFormatError,
    Flo2DFileNotFoundError,
    Flo2DIOError,
    Flo2DStatus,
    IncompatibleMeshError,
    InvalidDataError,
    PyFlo2DError,
)


class TestExceptionHierarchy:
    """Tests for the exception class hierarchy."""

    def test_pyflo2d_error_is_exception(self) -> None:
        assert issubclass(PyFlo2DError, Exception)

    def test_io_error_inherits(self) -> None:
        assert issubclass(Flo2DIOError, PyFlo2DError)

    def test_file_not_found_is_builtin_file_not_found(self) -> None:
        assert issubclass(Flo2DFileNotFoundError, Flo2DIOError)
        assert issubclass(Flo2DFileNotFoundError, FileNotFoundError)

    def test_file_format_error_inherits_from_io(self) -> None:
        assert issubclass(FileFormatError, Flo2DIOError)

    def test_incompatible_mesh_error_inherits(self) -> None:
        assert issubclass(IncompatibleMeshError, PyFlo2DError)

    def test_invalid_data_error_inherits(self) -> None:
        assert issubclass(InvalidDataError, Flo2DIOError)


class TestExceptionStatus:
    """Each exception maps to a load status."""

    @pytest.mark.parametrize(
        "exc, status",
        [
            (Flo2DFileNotFoundError("missing"), Flo2DStatus.FILE_NOT_FOUND),
            (FileFormatError("bad"), Flo2DStatus.UNKNOWN_FORMAT),
            (IncompatibleMeshError("mesh"), Flo2DStatus.INCOMPATIBLE_MESH),
            (InvalidDataError("data"), Flo2DStatus.INVALID_DATA),
        ],
    )
    def test_status(self, exc: PyFlo2DError, status: Flo2DStatus) -> None:
        assert exc.status is status
        assert exc.status.is_error

    def test_none_status_is_not_error(self) -> None:
        assert not Flo2DStatus.NONE.is_error


class TestExceptionInstantiation:
    """Tests for exception creation and attributes."""

    def test_file_format_error_line_number(self) -> None:
        exc = FileFormatError("bad line", line_number=42)
        assert str(exc) == "bad line"
        assert exc.line_number == 42

    def test_file_format_error_default_line_number(self) -> None:
        assert FileFormatError("bad").line_number is None

    def test_file_not_found_filepath(self) -> None:
        exc = Flo2DFileNotFoundError("missing", filepath="CADPTS.DAT")
        assert exc.filepath == "CADPTS.DAT"

    def test_catch_as_base(self) -> None:
        with pytest.raises(PyFlo2DError):
            raise IncompatibleMeshError("too many faces")

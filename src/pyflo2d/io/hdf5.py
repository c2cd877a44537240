"""
HDF5 file I/O handlers for FLO-2D time-varying results.

This module reads and writes the ``TIMDEP.HDF5`` container (an XMDF-like
layout) produced by FLO-2D:

    /File Version                       float32 scalar (1.0)
    /File Type                          fixed string ("Xmdf")
    /TIMDEP NETCDF OUTPUT RESULTS/      attrs: Grouptype="Generic"
        {group name}/                   attrs: Grouptype, TimeUnits,
                                               Data Type, DatasetCompression
            Times                       float64 (T,)
            Values                      float32 (T, F) or (T, F, 2)
            Mins, Maxs                  float32 (T,)

Values use the FLO-2D no-data sentinel (see :mod:`pyflo2d.io.sentinel`).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import h5py
import numpy as np
from numpy.typing import NDArray

from pyflo2d.core.datasets import Dataset, DatasetGroup
from pyflo2d.core.exceptions import IncompatibleMeshError, InvalidDataError
from pyflo2d.io.sentinel import decode_array, encode, encode_array

logger = logging.getLogger(__name__)

RESULTS_GROUP = "TIMDEP NETCDF OUTPUT RESULTS"
HDF_MAX_NAME = 1024
FILE_VERSION = 1.0
FILE_TYPE = "Xmdf"
TIME_UNITS = "Hours"
SCALAR_GROUPTYPE = "DATASET SCALAR"
VECTOR_GROUPTYPE = "DATASET VECTOR"
GENERIC_GROUPTYPE = "Generic"

_STRING_DTYPE = h5py.string_dtype(encoding="ascii", length=HDF_MAX_NAME)


def _attr_to_str(value: Any) -> str:
    """Convert an HDF5 string attribute (bytes, str or 1-element array) to str."""
    if isinstance(value, np.ndarray):
        value = value.flat[0] if value.size else ""
    if isinstance(value, bytes):
        return value.decode("ascii", errors="replace").rstrip("\x00")
    return str(value)


def _write_string_attr(obj: h5py.Group, name: str, value: str) -> None:
    obj.attrs.create(name, np.array(value.encode("ascii"), dtype=_STRING_DTYPE))


class HDF5ResultsReader:
    """
    Reader for the result groups of a FLO-2D HDF5 container.

    Example:
        >>> with HDF5ResultsReader("TIMDEP.HDF5") as reader:
        ...     groups = reader.read_dataset_groups(n_faces=mesh.n_faces)
    """

    def __init__(self, filepath: Path | str) -> None:
        """
        Initialize the reader.

        Args:
            filepath: Path to the HDF5 file
        """
        self.filepath = Path(filepath)
        self._file: h5py.File | None = None

    def __enter__(self) -> HDF5ResultsReader:
        self._file = h5py.File(self.filepath, "r")
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        if self._file:
            self._file.close()

    def has_results(self) -> bool:
        """Return True if the top-level results group exists."""
        if self._file is None:
            raise RuntimeError("File not open")
        return isinstance(self._file.get(RESULTS_GROUP), h5py.Group)

    def list_groups(self) -> list[str]:
        """Return the names of the result groups in enumeration order."""
        if self._file is None:
            raise RuntimeError("File not open")
        if not self.has_results():
            raise InvalidDataError(f"No '{RESULTS_GROUP}' group in {self.filepath}")
        results = self._file[RESULTS_GROUP]
        return [name for name in results if isinstance(results[name], h5py.Group)]

    def read_dataset_group(self, name: str, n_faces: int) -> DatasetGroup:
        """
        Read one result group.

        Args:
            name: Child group name under the results group
            n_faces: Number of mesh faces

        Returns:
            DatasetGroup with one dataset per time step

        Raises:
            InvalidDataError: If attributes or datasets are missing, or the
                value count does not match ``n_faces`` and the time count
        """
        if self._file is None:
            raise RuntimeError("File not open")

        grp = self._file[RESULTS_GROUP][name]
        if "Grouptype" not in grp.attrs:
            raise InvalidDataError(f"Group '{name}' has no Grouptype attribute")
        for ds_name in ("Times", "Values"):
            if not isinstance(grp.get(ds_name), h5py.Dataset):
                raise InvalidDataError(f"Group '{name}' has no {ds_name} dataset")

        is_vector = "vector" in _attr_to_str(grp.attrs["Grouptype"]).lower()
        times_ds = grp["Times"]
        values_ds = grp["Values"]
        n_times = int(times_ds.size)

        expected = n_faces * n_times * (2 if is_vector else 1)
        if values_ds.size != expected:
            raise InvalidDataError(
                f"Group '{name}' has {values_ds.size} values, expected {expected} "
                f"({n_times} time steps x {n_faces} faces)"
            )

        times = np.asarray(times_ds[()], dtype=np.float64).ravel()
        values = np.asarray(values_ds[()], dtype=np.float32).ravel()

        group = DatasetGroup(
            name=name,
            uri=str(self.filepath),
            is_on_vertices=False,
            is_scalar=not is_vector,
        )
        group.metadata["time_units"] = _attr_to_str(grp.attrs.get("TimeUnits", ""))

        step = n_faces * (2 if is_vector else 1)
        for ts in range(n_times):
            chunk = values[ts * step : (ts + 1) * step]
            group.add_dataset(Dataset(group=group, time=times[ts], values=decode_array(chunk)))

        group.update_statistics()
        return group

    def read_dataset_groups(self, n_faces: int) -> list[DatasetGroup]:
        """Read every result group; fails as a whole on the first bad group."""
        return [self.read_dataset_group(name, n_faces) for name in self.list_groups()]


class HDF5ResultsWriter:
    """
    Writer appending dataset groups to a FLO-2D HDF5 container.

    A new container is bootstrapped with the file version/type markers
    and the results group. An existing container must already hold the
    results group.
    """

    def __init__(self, filepath: Path | str) -> None:
        """
        Initialize the writer.

        Args:
            filepath: Path to the HDF5 file (created if it does not exist)
        """
        self.filepath = Path(filepath)
        self._file: h5py.File | None = None

    def __enter__(self) -> HDF5ResultsWriter:
        if self.filepath.exists():
            self._file = h5py.File(self.filepath, "r+")
            if RESULTS_GROUP not in self._file:
                self._file.close()
                self._file = None
                raise InvalidDataError(f"No '{RESULTS_GROUP}' group in {self.filepath}")
        else:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            self._file = h5py.File(self.filepath, "w-")
            self._bootstrap()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        if self._file:
            self._file.close()

    def _bootstrap(self) -> None:
        """Write the root markers and the results group of a new container."""
        assert self._file is not None
        self._file.create_dataset("File Version", data=np.float32(FILE_VERSION))
        self._file.create_dataset(
            "File Type", data=np.array(FILE_TYPE.encode("ascii"), dtype=_STRING_DTYPE)
        )
        results = self._file.create_group(RESULTS_GROUP)
        _write_string_attr(results, "Grouptype", GENERIC_GROUPTYPE)

    def unique_group_name(self, name: str) -> str:
        """Return ``name`` or the first free ``name_<i>`` under the results group."""
        if self._file is None:
            raise RuntimeError("File not open")
        results = self._file[RESULTS_GROUP]
        base = name.replace("/", "_")
        candidate = base
        suffix = 0
        while candidate in results:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate

    def write_dataset_group(self, group: DatasetGroup, n_faces: int) -> str:
        """
        Append ``group`` to the container.

        Args:
            group: Face-resident dataset group
            n_faces: Number of mesh faces

        Returns:
            Name of the HDF5 group that was written

        Raises:
            IncompatibleMeshError: If the group is vertex-resident or a
                dataset does not cover ``n_faces`` faces
        """
        if self._file is None:
            raise RuntimeError("File not open")
        if group.is_on_vertices:
            raise IncompatibleMeshError(
                f"Dataset group '{group.name}' is defined on vertices, FLO-2D supports faces only"
            )

        return self.write_arrays(group, _prepare_arrays(group, n_faces))

    def write_arrays(
        self,
        group: DatasetGroup,
        arrays: tuple[
            NDArray[np.float64], NDArray[np.float32], NDArray[np.float32], NDArray[np.float32]
        ],
    ) -> str:
        """Append ``group`` from the Times, Mins, Maxs and Values built by ``_prepare_arrays``."""
        if self._file is None:
            raise RuntimeError("File not open")
        times, mins, maxs, values = arrays

        name = self.unique_group_name(group.name)
        grp = self._file[RESULTS_GROUP].create_group(name)
        grp.attrs.create("Data Type", 0, dtype=np.int32)
        grp.attrs.create("DatasetCompression", -1, dtype=np.int32)
        _write_string_attr(grp, "Grouptype", SCALAR_GROUPTYPE if group.is_scalar else VECTOR_GROUPTYPE)
        _write_string_attr(grp, "TimeUnits", TIME_UNITS)

        grp.create_dataset("Maxs", data=maxs)
        grp.create_dataset("Mins", data=mins)
        grp.create_dataset("Times", data=times)
        grp.create_dataset("Values", data=values)

        logger.debug(
            "Wrote group '%s' (%d time steps) to %s", name, group.n_datasets, self.filepath
        )
        return name


def _prepare_arrays(
    group: DatasetGroup, n_faces: int
) -> tuple[NDArray[np.float64], NDArray[np.float32], NDArray[np.float32], NDArray[np.float32]]:
    """Build the Times, Mins, Maxs and Values arrays of a group."""
    n_times = group.n_datasets
    times = np.empty(n_times, dtype=np.float64)
    mins = np.empty(n_times, dtype=np.float32)
    maxs = np.empty(n_times, dtype=np.float32)
    if group.is_scalar:
        values = np.empty((n_times, n_faces), dtype=np.float32)
    else:
        values = np.empty((n_times, n_faces, 2), dtype=np.float32)

    for i, ds in enumerate(group.datasets):
        if ds.n_values != n_faces:
            raise IncompatibleMeshError(
                f"Dataset at t={ds.time} of '{group.name}' has {ds.n_values} values, "
                f"mesh has {n_faces} faces"
            )
        if group.is_scalar:
            row = ds.scalar_data(0, n_faces)
        else:
            row = ds.vector_data(0, n_faces).reshape(n_faces, 2)
        values[i] = encode_array(row)
        mins[i] = encode(ds.statistics.minimum)
        maxs[i] = encode(ds.statistics.maximum)
        times[i] = ds.time

    return times, mins, maxs, values


# Convenience functions


def read_hdf5_results(filepath: Path | str, n_faces: int) -> tuple[bool, list[DatasetGroup]]:
    """
    Read all result groups from a FLO-2D HDF5 container.

    Never raises for container problems: a missing or unreadable file, a
    missing results group, or any malformed child group yields
    ``(False, [])`` so the caller can fall back to the text results.

    Args:
        filepath: Path to the HDF5 file
        n_faces: Number of mesh faces

    Returns:
        Tuple of (success, dataset groups)
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        logger.debug("HDF5 results file %s not found", filepath)
        return False, []

    try:
        with HDF5ResultsReader(filepath) as reader:
            groups = reader.read_dataset_groups(n_faces)
    except (OSError, KeyError, TypeError, ValueError, InvalidDataError) as exc:
        logger.warning("Cannot read HDF5 results from %s: %s", filepath, exc)
        return False, []

    logger.info("Read %d dataset groups from %s", len(groups), filepath)
    return True, groups


def write_dataset_group(
    group: DatasetGroup, n_faces: int, filepath: Path | str | None = None
) -> bool:
    """
    Write a dataset group to a FLO-2D HDF5 container.

    Args:
        group: Face-resident dataset group to write
        n_faces: Number of mesh faces
        filepath: Target container, defaults to ``group.uri``

    Returns:
        True on success, False if the container cannot be opened or
        created, or the group cannot be stored
    """
    target = Path(filepath) if filepath is not None else Path(group.uri)
    if group.is_on_vertices:
        logger.warning("FLO-2D only supports data on faces, not writing '%s'", group.name)
        return False

    # Validate before the container is opened so a rejected group creates no file.
    try:
        arrays = _prepare_arrays(group, n_faces)
    except IncompatibleMeshError as exc:
        logger.warning("Cannot write group '%s' to %s: %s", group.name, target, exc)
        return False

    try:
        with HDF5ResultsWriter(target) as writer:
            writer.write_arrays(group, arrays)
    except (OSError, KeyError, ValueError, InvalidDataError) as exc:
        logger.warning("Cannot write group '%s' to %s: %s", group.name, target, exc)
        return False
    return True


def is_results_file(filepath: Path | str) -> bool:
    """Return True if ``filepath`` is an HDF5 file holding the results group."""
    filepath = Path(filepath)
    if not filepath.is_file():
        return False
    try:
        with HDF5ResultsReader(filepath) as reader:
            return reader.has_results()
    except OSError:
        return False

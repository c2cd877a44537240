"""
FLO-2D driver: mesh loading, dataset loading and persistence.

Loading a model builds the mesh from ``CADPTS.DAT``/``FPLAIN.DAT``,
attaches the bed elevation, and then reads results. ``TIMDEP.HDF5`` is
preferred; if it is absent or malformed, the text result files are read
instead. The two sources are never merged.

Example
-------
>>> from pyflo2d import load_mesh
>>> result = load_mesh("model/TIMDEP.OUT")
>>> if result.ok:
...     print(result.mesh.dataset_group_names)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Flag, auto
from pathlib import Path

from pyflo2d.core.datasets import DatasetGroup, create_static_group
from pyflo2d.core.exceptions import Flo2DStatus, PyFlo2DError
from pyflo2d.core.mesh import Mesh
from pyflo2d.io.config import Flo2DFileConfig
from pyflo2d.io.hdf5 import is_results_file, read_hdf5_results, write_dataset_group
from pyflo2d.io.text_results import read_text_results
from pyflo2d.io.topology import read_topology

logger = logging.getLogger(__name__)

BED_ELEVATION = "Bed Elevation"


class Capability(Flag):
    """Operations a driver supports."""

    READ_MESH = auto()
    READ_DATASETS = auto()
    WRITE_DATASETS = auto()


@dataclass
class LoadResult:
    """Outcome of :meth:`Flo2DDriver.load_mesh`; ``mesh`` is None on failure."""

    mesh: Mesh | None
    status: Flo2DStatus = Flo2DStatus.NONE
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.mesh is not None and not self.status.is_error


class Flo2DDriver:
    """Reads FLO-2D models and writes FLO-2D HDF5 result groups."""

    name = "FLO2D"
    long_name = "Flo2D"
    filters = "*.nc"
    capabilities = Capability.READ_MESH | Capability.READ_DATASETS | Capability.WRITE_DATASETS

    def __init__(self, vertex_tolerance: float | None = None) -> None:
        self.vertex_tolerance = vertex_tolerance

    def _config(self, uri: Path | str) -> Flo2DFileConfig:
        if self.vertex_tolerance is None:
            return Flo2DFileConfig.from_results_file(uri)
        return Flo2DFileConfig.from_results_file(uri, vertex_tolerance=self.vertex_tolerance)

    def can_read_mesh(self, uri: Path | str) -> bool:
        """Return True if the topology files exist beside ``uri``."""
        return self._config(uri).has_topology()

    def can_read_datasets(self, uri: Path | str) -> bool:
        """Return True if ``uri`` is an HDF5 container with FLO-2D results."""
        return is_results_file(uri)

    def read_mesh(self, uri: Path | str) -> Mesh:
        """
        Build the mesh of the model containing ``uri`` with all its results.

        Raises:
            PyFlo2DError: On missing topology files, malformed records, or
                result files that disagree with the mesh
        """
        config = self._config(uri)
        mesh, elevations = read_topology(config, uri=str(uri))

        groups: list[DatasetGroup] = [
            create_static_group(BED_ELEVATION, elevations, uri=str(uri))
        ]

        ok, hdf5_groups = read_hdf5_results(config.timdep_hdf5_path, mesh.n_faces)
        if ok:
            groups.extend(hdf5_groups)
        else:
            logger.info("Using text results for %s", config.model_dir)
            groups.extend(read_text_results(config, mesh.n_faces, elevations, uri=str(uri)))

        for group in groups:
            mesh.add_dataset_group(group)
        return mesh

    def load_mesh(self, uri: Path | str) -> LoadResult:
        """
        Load the model containing ``uri``.

        Errors are reported through the returned status; the mesh is None
        whenever the status is not ``Flo2DStatus.NONE``.
        """
        try:
            mesh = self.read_mesh(uri)
        except PyFlo2DError as exc:
            logger.error("Failed to load FLO-2D mesh from %s: %s", uri, exc)
            return LoadResult(mesh=None, status=exc.status, message=str(exc))

        logger.info(
            "Loaded %s: %d faces, %d dataset groups", uri, mesh.n_faces, len(mesh.dataset_groups)
        )
        return LoadResult(mesh=mesh)

    def load_datasets(self, uri: Path | str, mesh: Mesh) -> Flo2DStatus:
        """
        Append the result groups of an HDF5 container to an existing mesh.

        The mesh is left unchanged unless every group could be read.
        """
        if not isinstance(mesh, Mesh):
            return Flo2DStatus.INCOMPATIBLE_MESH
        if not Path(uri).is_file():
            return Flo2DStatus.FILE_NOT_FOUND

        ok, groups = read_hdf5_results(uri, mesh.n_faces)
        if not ok:
            return Flo2DStatus.INVALID_DATA
        for group in groups:
            mesh.add_dataset_group(group)
        return Flo2DStatus.NONE

    def persist(
        self, group: DatasetGroup, n_faces: int, uri: Path | str | None = None
    ) -> bool:
        """
        Write ``group`` to an HDF5 container (``group.uri`` by default).

        Returns:
            True on success, False on failure
        """
        return write_dataset_group(group, n_faces, uri)


# Convenience functions


def load_mesh(uri: Path | str) -> LoadResult:
    """Load a FLO-2D model; see :meth:`Flo2DDriver.load_mesh`."""
    return Flo2DDriver().load_mesh(uri)


def load_datasets(uri: Path | str, mesh: Mesh) -> Flo2DStatus:
    """Append HDF5 results to ``mesh``; see :meth:`Flo2DDriver.load_datasets`."""
    return Flo2DDriver().load_datasets(uri, mesh)


def persist(group: DatasetGroup, n_faces: int, uri: Path | str | None = None) -> bool:
    """Write a dataset group; see :meth:`Flo2DDriver.persist`."""
    return Flo2DDriver().persist(group, n_faces, uri)

"""
Mesh classes for FLO-2D model representation.

This module provides the core mesh data structures:

- :class:`Vertex`: a 2D mesh vertex
- :class:`Extent`: bounding box of the vertex table
- :class:`Mesh`: quad faces over deduplicated vertices plus dataset groups

FLO-2D never stores vertices; they are synthesized from cell centers by
:mod:`pyflo2d.io.topology`. Face ``i`` is the quad of cell ``i`` and its
four vertex indices are ordered SE, NE, NW, SW.

Example
-------
>>> import numpy as np
>>> from pyflo2d.core.mesh import Mesh
>>> vertices = np.array([[1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]])
>>> faces = np.array([[0, 1, 2, 3]])
>>> mesh = Mesh(vertices=vertices, faces=faces)
>>> print(f"Mesh: {mesh.n_vertices} vertices, {mesh.n_faces} faces")
Mesh: 4 vertices, 1 faces
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from pyflo2d.core.datasets import DatasetGroup
from pyflo2d.core.exceptions import IncompatibleMeshError

VERTICES_PER_FACE = 4


@dataclass(frozen=True)
class Vertex:
    """A mesh vertex with double precision coordinates."""

    x: float
    y: float

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (x, y) coordinate tuple."""
        return (self.x, self.y)


@dataclass(frozen=True)
class Extent:
    """Bounding box as (xmin, ymin, xmax, ymax)."""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_vertices(cls, vertices: NDArray[np.float64]) -> Extent:
        """Compute the elementwise min/max over an ``(n, 2)`` vertex array."""
        if len(vertices) == 0:
            return cls(np.nan, np.nan, np.nan, np.nan)
        mins = vertices.min(axis=0)
        maxs = vertices.max(axis=0)
        return cls(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)


@dataclass(eq=False)
class Mesh:
    """
    A FLO-2D quad mesh with attached dataset groups.

    Parameters
    ----------
    vertices : ndarray
        ``(n_vertices, 2)`` float64 coordinates.
    faces : ndarray
        ``(n_faces, 4)`` vertex indices, aligned 1:1 with cell ids.
    uri : str, optional
        Path of the file the mesh was loaded from.
    dataset_groups : list of DatasetGroup, optional
        Face-resident dataset groups in load order.

    Raises
    ------
    IncompatibleMeshError
        If the arrays have the wrong shape or a face references a vertex
        outside ``[0, n_vertices)``.

    Notes
    -----
    Topology arrays are made read-only on construction. Only the list of
    dataset groups may grow afterwards.
    """

    vertices: NDArray[np.float64]
    faces: NDArray[np.int64]
    uri: str = ""
    dataset_groups: list[DatasetGroup] = field(default_factory=list)
    extent: Extent = field(init=False)

    def __post_init__(self) -> None:
        self.vertices = np.array(self.vertices, dtype=np.float64).reshape(-1, 2)
        self.faces = np.array(self.faces, dtype=np.int64).reshape(-1, VERTICES_PER_FACE)
        self.validate()
        self.vertices.setflags(write=False)
        self.faces.setflags(write=False)
        self.extent = Extent.from_vertices(self.vertices)

    @property
    def n_vertices(self) -> int:
        """Return number of vertices in the mesh."""
        return len(self.vertices)

    @property
    def n_faces(self) -> int:
        """Return number of faces in the mesh."""
        return len(self.faces)

    @property
    def max_vertices_per_face(self) -> int:
        return VERTICES_PER_FACE

    @property
    def bounding_box(self) -> tuple[float, float, float, float]:
        """Return bounding box as (xmin, ymin, xmax, ymax)."""
        return self.extent.as_tuple()

    def get_vertex(self, index: int) -> Vertex:
        """Get a vertex by 0-based index. Raises IndexError if not found."""
        x, y = self.vertices[index]
        return Vertex(float(x), float(y))

    def get_face(self, index: int) -> tuple[int, int, int, int]:
        """Get the four vertex indices of a face (SE, NE, NW, SW)."""
        a, b, c, d = (int(v) for v in self.faces[index])
        return (a, b, c, d)

    def iter_vertices(self) -> Iterator[Vertex]:
        """Iterate over vertices in index order."""
        for x, y in self.vertices:
            yield Vertex(float(x), float(y))

    def iter_faces(self) -> Iterator[tuple[int, int, int, int]]:
        """Iterate over faces in cell id order."""
        for i in range(self.n_faces):
            yield self.get_face(i)

    def get_face_centroid(self, index: int) -> tuple[float, float]:
        """Calculate the centroid of a face."""
        coords = self.vertices[self.faces[index]]
        cx, cy = coords.mean(axis=0)
        return (float(cx), float(cy))

    def add_dataset_group(self, group: DatasetGroup) -> None:
        """
        Attach a dataset group to the mesh.

        Raises:
            IncompatibleMeshError: If the group is vertex-resident or its
                datasets do not cover exactly ``n_faces`` faces.
        """
        if group.is_on_vertices:
            raise IncompatibleMeshError(
                f"Dataset group '{group.name}' is defined on vertices, FLO-2D data is on faces"
            )
        for ds in group.datasets:
            if ds.n_values != self.n_faces:
                raise IncompatibleMeshError(
                    f"Dataset group '{group.name}' has {ds.n_values} values at "
                    f"t={ds.time}, mesh has {self.n_faces} faces"
                )
        self.dataset_groups.append(group)

    def get_dataset_group(self, name: str) -> DatasetGroup:
        """Get the first dataset group with ``name``. Raises KeyError if not found."""
        for group in self.dataset_groups:
            if group.name == name:
                return group
        raise KeyError(name)

    @property
    def dataset_group_names(self) -> list[str]:
        return [group.name for group in self.dataset_groups]

    def validate(self) -> None:
        """
        Validate mesh integrity.

        Raises:
            IncompatibleMeshError: If mesh is invalid
        """
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 2:
            raise IncompatibleMeshError(f"Vertices must be (n, 2), got {self.vertices.shape}")
        if self.faces.size == 0:
            return
        if self.faces.min() < 0 or self.faces.max() >= self.n_vertices:
            raise IncompatibleMeshError(
                f"Face vertex index out of range [0, {self.n_vertices})"
            )

    def __repr__(self) -> str:
        return (
            f"Mesh(n_vertices={self.n_vertices}, n_faces={self.n_faces}, "
            f"n_dataset_groups={len(self.dataset_groups)})"
        )

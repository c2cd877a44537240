"""
Time-varying dataset classes attached to a FLO-2D mesh.

This module provides:

- :class:`Statistics`: minimum/maximum over non-missing values
- :class:`Dataset`: one time step of per-face values
- :class:`DatasetGroup`: a named, time-ordered collection of datasets

Missing values are stored as NaN. Vector datasets store interleaved
``(x, y)`` pairs, so a vector buffer holds ``2 * n_values`` entries.

Example
-------
>>> import numpy as np
>>> from pyflo2d.core.datasets import Dataset, DatasetGroup
>>> group = DatasetGroup(name="Depth", uri="TIMDEP.OUT")
>>> ds = Dataset(group=group, time=0.5, values=np.array([1.0, np.nan, 3.0]))
>>> group.add_dataset(ds)
>>> group.update_statistics()
>>> group.statistics
Statistics(minimum=1.0, maximum=3.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class Statistics:
    """Minimum and maximum of the non-missing values (NaN when empty)."""

    minimum: float = math.nan
    maximum: float = math.nan

    @property
    def is_empty(self) -> bool:
        """Return True if no values contributed to the statistics."""
        return math.isnan(self.minimum) and math.isnan(self.maximum)


def calculate_statistics(values: ArrayLike, is_scalar: bool = True) -> Statistics:
    """
    Compute statistics over a flat value buffer.

    Scalar buffers are reduced directly. Vector buffers are read as
    interleaved ``(x, y)`` pairs and reduced over the vector magnitudes;
    a pair with either component missing is skipped.

    Args:
        values: Flat value buffer
        is_scalar: False for interleaved vector data

    Returns:
        Statistics of the present values, NaN/NaN if none are present
    """
    arr = np.asarray(values, dtype=np.float64)
    if not is_scalar:
        pairs = arr.reshape(-1, 2)
        arr = np.hypot(pairs[:, 0], pairs[:, 1])

    present = arr[~np.isnan(arr)]
    if present.size == 0:
        return Statistics()
    return Statistics(minimum=float(present.min()), maximum=float(present.max()))


def merge_statistics(stats: list[Statistics]) -> Statistics:
    """Combine several statistics, ignoring empty ones."""
    minimum = math.nan
    maximum = math.nan
    for st in stats:
        if st.is_empty:
            continue
        if math.isnan(minimum) or st.minimum < minimum:
            minimum = st.minimum
        if math.isnan(maximum) or st.maximum > maximum:
            maximum = st.maximum
    return Statistics(minimum=minimum, maximum=maximum)


@dataclass(eq=False)
class Dataset:
    """
    A single time step of a dataset group.

    Parameters
    ----------
    group : DatasetGroup
        Owning group; its ``is_scalar`` flag defines the buffer layout.
    time : float
        Time coordinate of the snapshot.
    values : ndarray
        Flat float64 buffer, ``n`` entries for scalar groups and ``2 * n``
        interleaved entries for vector groups.
    """

    group: DatasetGroup
    time: float
    values: NDArray[np.float64]
    statistics: Statistics = field(default_factory=Statistics)

    def __post_init__(self) -> None:
        self.time = float(self.time)
        self.values = np.asarray(self.values, dtype=np.float64)
        if not self.group.is_scalar and self.values.size % 2 != 0:
            raise ValueError(
                f"Vector dataset needs an even number of values, got {self.values.size}"
            )

    @classmethod
    def empty(cls, group: DatasetGroup, n_values: int, time: float = 0.0) -> Dataset:
        """Create a dataset with every value missing."""
        size = n_values if group.is_scalar else 2 * n_values
        return cls(group=group, time=time, values=np.full(size, np.nan))

    @property
    def n_values(self) -> int:
        """Number of faces (or vertices) covered by this dataset."""
        if self.group.is_scalar:
            return int(self.values.size)
        return int(self.values.size // 2)

    def scalar_data(self, start: int = 0, count: int | None = None) -> NDArray[np.float64]:
        """Return a copy of scalar values ``[start, start + count)``."""
        if not self.group.is_scalar:
            raise ValueError(f"Dataset group '{self.group.name}' is not scalar")
        stop = self.n_values if count is None else start + count
        return self.values[start:stop].copy()

    def vector_data(self, start: int = 0, count: int | None = None) -> NDArray[np.float64]:
        """Return a copy of interleaved vector values for ``[start, start + count)``."""
        if self.group.is_scalar:
            raise ValueError(f"Dataset group '{self.group.name}' is not vector")
        stop = self.n_values if count is None else start + count
        return self.values[2 * start : 2 * stop].copy()

    def update_statistics(self) -> Statistics:
        """Recompute and store statistics for this dataset."""
        self.statistics = calculate_statistics(self.values, self.group.is_scalar)
        return self.statistics

    def __repr__(self) -> str:
        return f"Dataset(group='{self.group.name}', time={self.time}, n_values={self.n_values})"


@dataclass(eq=False)
class DatasetGroup:
    """
    A named, time-ordered collection of datasets sharing the same layout.

    Parameters
    ----------
    name : str
        Group name, e.g. ``"Depth"`` or ``"Velocity/Maximums"``.
    uri : str
        Locator of the file the group was read from (or will be written to).
    is_on_vertices : bool
        True for vertex-resident data. FLO-2D data is always face-resident.
    is_scalar : bool
        False for vector data (two values per face).
    """

    name: str
    uri: str = ""
    is_on_vertices: bool = False
    is_scalar: bool = True
    datasets: list[Dataset] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_datasets(self) -> int:
        """Return number of time steps."""
        return len(self.datasets)

    @property
    def times(self) -> NDArray[np.float64]:
        """Return time coordinates of all datasets."""
        return np.array([ds.time for ds in self.datasets], dtype=np.float64)

    def add_dataset(self, dataset: Dataset) -> None:
        """
        Append a dataset, computing its statistics.

        Datasets without values are ignored.
        """
        if dataset.group is not self:
            raise ValueError(f"Dataset belongs to group '{dataset.group.name}'")
        if dataset.values.size == 0:
            return
        dataset.update_statistics()
        self.datasets.append(dataset)

    def update_statistics(self) -> Statistics:
        """Recompute aggregate statistics over all datasets."""
        self.statistics = merge_statistics([ds.statistics for ds in self.datasets])
        return self.statistics

    def iter_datasets(self) -> Iterator[Dataset]:
        """Iterate over datasets in time order."""
        yield from self.datasets

    def __repr__(self) -> str:
        kind = "scalar" if self.is_scalar else "vector"
        return f"DatasetGroup(name='{self.name}', {kind}, n_datasets={self.n_datasets})"


def create_static_group(
    name: str,
    values: ArrayLike,
    uri: str = "",
    time: float = 0.0,
) -> DatasetGroup:
    """Build a single-timestep, face-resident scalar group with statistics."""
    group = DatasetGroup(name=name, uri=uri, is_on_vertices=False, is_scalar=True)
    group.add_dataset(Dataset(group=group, time=time, values=np.array(values, dtype=np.float64)))
    group.update_statistics()
    return group

"""
No-data sentinel handling for FLO-2D files.

FLO-2D has no native missing-value marker. A value of ``0.0`` on disk
stands for "no data"; in memory, missing values are NaN.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

NODATA = 0.0
NODATA_TOLERANCE = 1e-8


def decode(value: float) -> float:
    """Convert an on-disk value to its in-memory form (NaN for no data)."""
    value = float(value)
    if abs(value - NODATA) <= NODATA_TOLERANCE:
        return math.nan
    return value


def encode(value: float) -> float:
    """Convert an in-memory value to its on-disk form (sentinel for NaN)."""
    value = float(value)
    if math.isnan(value):
        return NODATA
    return value


def decode_array(values: ArrayLike) -> NDArray[np.float64]:
    """Elementwise :func:`decode` returning a new float64 array."""
    arr = np.array(values, dtype=np.float64)
    arr[np.abs(arr - NODATA) <= NODATA_TOLERANCE] = np.nan
    return arr


def encode_array(values: ArrayLike) -> NDArray[np.float64]:
    """Elementwise :func:`encode` returning a new float64 array."""
    arr = np.array(values, dtype=np.float64)
    arr[np.isnan(arr)] = NODATA
    return arr

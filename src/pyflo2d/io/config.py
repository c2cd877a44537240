"""
File configuration for FLO-2D model I/O.

FLO-2D writes its outputs as a set of fixed-name files in one directory.
:class:`Flo2DFileConfig` holds those names and resolves them against the
model directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_VERTEX_TOLERANCE = 1e-6


@dataclass
class Flo2DFileConfig:
    """
    Configuration for the files of one FLO-2D model.

    Mandatory topology files are ``CADPTS.DAT`` (cell centers) and
    ``FPLAIN.DAT`` (connectivity). Every result file is optional.
    """

    model_dir: Path
    cadpts_file: str = "CADPTS.DAT"
    fplain_file: str = "FPLAIN.DAT"
    timdep_file: str = "TIMDEP.OUT"
    depth_file: str = "DEPTH.OUT"
    velfp_file: str = "VELFP.OUT"
    veloc_file: str = "VELOC.OUT"
    timdep_hdf5_file: str = "TIMDEP.HDF5"

    # Quantization step for deduplicating synthesized vertices
    vertex_tolerance: float = DEFAULT_VERTEX_TOLERANCE

    def __post_init__(self) -> None:
        self.model_dir = Path(self.model_dir)
        if self.vertex_tolerance <= 0:
            raise ValueError(f"vertex_tolerance must be positive, got {self.vertex_tolerance}")

    @classmethod
    def from_results_file(cls, uri: Path | str, **kwargs: object) -> Flo2DFileConfig:
        """Build a config for the directory containing ``uri`` (or ``uri`` itself if a directory)."""
        path = Path(uri)
        model_dir = path if path.is_dir() else path.parent
        return cls(model_dir=model_dir, **kwargs)  # type: ignore[arg-type]

    @property
    def cadpts_path(self) -> Path:
        return self.model_dir / self.cadpts_file

    @property
    def fplain_path(self) -> Path:
        return self.model_dir / self.fplain_file

    @property
    def timdep_path(self) -> Path:
        return self.model_dir / self.timdep_file

    @property
    def depth_path(self) -> Path:
        return self.model_dir / self.depth_file

    @property
    def velfp_path(self) -> Path:
        return self.model_dir / self.velfp_file

    @property
    def veloc_path(self) -> Path:
        return self.model_dir / self.veloc_file

    @property
    def timdep_hdf5_path(self) -> Path:
        return self.model_dir / self.timdep_hdf5_file

    def has_topology(self) -> bool:
        """Return True if both mandatory topology files exist."""
        return self.cadpts_path.is_file() and self.fplain_path.is_file()

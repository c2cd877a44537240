"""Unit tests for mesh reconstruction from cell centers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from pyflo2d.core.exceptions import (
    FileFormatError,
    Flo2DFileNotFoundError,
    IncompatibleMeshError,
)
from pyflo2d.io.config import Flo2DFileConfig
from pyflo2d.io.topology import (
    BOUNDARY,
    CellCenter,
    build_mesh,
    calculate_cell_size,
    create_vertex,
    parse_cadpts,
    parse_fplain,
    read_topology,
)

WriteLines = Callable[[Path, list[str]], Path]


class TestParseCadpts:
    def test_read(self, tmp_path: Path, write_lines: WriteLines, grid_2x2_cadpts: list[str]) -> None:
        cells = parse_cadpts(write_lines(tmp_path / "CADPTS.DAT", grid_2x2_cadpts))
        assert len(cells) == 4
        assert cells[0] == CellCenter(id=0, x=5.0, y=5.0)
        assert cells[3].id == 3
        assert cells[3].x == 15.0 and cells[3].y == 15.0
        assert cells[0].conn == [BOUNDARY] * 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(Flo2DFileNotFoundError):
            parse_cadpts(tmp_path / "CADPTS.DAT")

    def test_wrong_field_count(self, tmp_path: Path, write_lines: WriteLines) -> None:
        path = write_lines(tmp_path / "CADPTS.DAT", ["1 5.0 5.0", "2 15.0 5.0 9.0"])
        with pytest.raises(FileFormatError) as exc_info:
            parse_cadpts(path)
        assert exc_info.value.line_number == 2

    def test_non_numeric(self, tmp_path: Path, write_lines: WriteLines) -> None:
        path = write_lines(tmp_path / "CADPTS.DAT", ["1 abc 5.0"])
        with pytest.raises(FileFormatError):
            parse_cadpts(path)

    def test_out_of_sequence_id(self, tmp_path: Path, write_lines: WriteLines) -> None:
        path = write_lines(tmp_path / "CADPTS.DAT", ["1 5.0 5.0", "3 15.0 5.0"])
        with pytest.raises(FileFormatError):
            parse_cadpts(path)

    def test_blank_lines_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "CADPTS.DAT"
        path.write_text("1 5.0 5.0\n\n2 15.0 5.0\n   \n")
        assert len(parse_cadpts(path)) == 2


class TestParseFplain:
    @pytest.fixture
    def cells(self) -> list[CellCenter]:
        return [
            CellCenter(id=0, x=5.0, y=5.0),
            CellCenter(id=1, x=15.0, y=5.0),
            CellCenter(id=2, x=5.0, y=15.0),
            CellCenter(id=3, x=15.0, y=15.0),
        ]

    def test_read(
        self,
        tmp_path: Path,
        write_lines: WriteLines,
        grid_2x2_fplain: list[str],
        cells: list[CellCenter],
    ) -> None:
        elevations = parse_fplain(write_lines(tmp_path / "FPLAIN.DAT", grid_2x2_fplain), cells)
        np.testing.assert_array_equal(elevations, [100.0, 101.0, 102.0, 103.0])
        assert cells[0].conn == [2, 1, BOUNDARY, BOUNDARY]
        assert cells[3].conn == [BOUNDARY, BOUNDARY, 1, 2]

    def test_missing_file(self, tmp_path: Path, cells: list[CellCenter]) -> None:
        with pytest.raises(Flo2DFileNotFoundError):
            parse_fplain(tmp_path / "FPLAIN.DAT", cells)

    def test_wrong_field_count(
        self, tmp_path: Path, write_lines: WriteLines, cells: list[CellCenter]
    ) -> None:
        path = write_lines(tmp_path / "FPLAIN.DAT", ["1 3 2 0 0 0.04"])
        with pytest.raises(FileFormatError):
            parse_fplain(path, cells)

    def test_rows_out_of_order(
        self, tmp_path: Path, write_lines: WriteLines, cells: list[CellCenter]
    ) -> None:
        path = write_lines(
            tmp_path / "FPLAIN.DAT",
            [
                "2 4 0 0 1 0.04 101.0",
                "1 3 2 0 0 0.04 100.0",
                "3 0 4 1 0 0.04 102.0",
                "4 0 0 2 3 0.04 103.0",
            ],
        )
        with pytest.raises(FileFormatError):
            parse_fplain(path, cells)

    def test_cell_id_beyond_cells(
        self, tmp_path: Path, write_lines: WriteLines, cells: list[CellCenter]
    ) -> None:
        path = write_lines(tmp_path / "FPLAIN.DAT", ["5 0 0 0 0 0.04 100.0"])
        with pytest.raises(IncompatibleMeshError):
            parse_fplain(path, cells)

    def test_neighbor_beyond_cells(
        self, tmp_path: Path, write_lines: WriteLines, cells: list[CellCenter]
    ) -> None:
        path = write_lines(tmp_path / "FPLAIN.DAT", ["1 9 2 0 0 0.04 100.0"])
        with pytest.raises(IncompatibleMeshError):
            parse_fplain(path, cells)

    def test_too_few_rows(
        self, tmp_path: Path, write_lines: WriteLines, cells: list[CellCenter]
    ) -> None:
        path = write_lines(tmp_path / "FPLAIN.DAT", ["1 3 2 0 0 0.04 100.0"])
        with pytest.raises(IncompatibleMeshError):
            parse_fplain(path, cells)


class TestCellSize:
    def test_vertical_neighbor(self) -> None:
        cells = [
            CellCenter(id=0, x=0.0, y=0.0, conn=[1, -1, -1, -1]),
            CellCenter(id=1, x=0.0, y=20.0, conn=[-1, -1, 0, -1]),
        ]
        assert calculate_cell_size(cells) == 20.0

    def test_east_neighbor_uses_x_distance(self) -> None:
        cells = [
            CellCenter(id=0, x=5.0, y=5.0, conn=[-1, 1, -1, -1]),
            CellCenter(id=1, x=15.0, y=5.0, conn=[-1, -1, -1, 0]),
        ]
        assert calculate_cell_size(cells) == 10.0

    def test_skips_isolated_cells(self) -> None:
        cells = [
            CellCenter(id=0, x=100.0, y=100.0),
            CellCenter(id=1, x=5.0, y=5.0, conn=[-1, -1, -1, 2]),
            CellCenter(id=2, x=-3.0, y=5.0, conn=[-1, 1, -1, -1]),
        ]
        assert cells[0].is_isolated
        assert calculate_cell_size(cells) == 8.0

    def test_no_connected_cells(self) -> None:
        with pytest.raises(IncompatibleMeshError):
            calculate_cell_size([CellCenter(id=0, x=0.0, y=0.0)])

    def test_no_cells(self) -> None:
        with pytest.raises(IncompatibleMeshError):
            calculate_cell_size([])


class TestBuildMesh:
    def test_corner_order(self) -> None:
        cell = CellCenter(id=0, x=10.0, y=20.0)
        corners = [create_vertex(p, 5.0, cell) for p in range(4)]
        assert corners == [(15.0, 15.0), (15.0, 25.0), (5.0, 25.0), (5.0, 15.0)]

    def test_2x2_grid_shares_vertices(self) -> None:
        cells = [
            CellCenter(id=0, x=5.0, y=5.0),
            CellCenter(id=1, x=15.0, y=5.0),
            CellCenter(id=2, x=5.0, y=15.0),
            CellCenter(id=3, x=15.0, y=15.0),
        ]
        mesh = build_mesh(cells, 5.0)

        assert mesh.n_vertices == 9
        assert mesh.n_faces == 4
        assert mesh.get_face(0) == (0, 1, 2, 3)
        assert mesh.get_face(1) == (4, 5, 1, 0)
        assert mesh.get_face(2) == (1, 6, 7, 2)
        assert mesh.get_face(3) == (5, 8, 6, 1)
        assert mesh.bounding_box == (0.0, 0.0, 20.0, 20.0)

    def test_shared_corner_with_rounding_noise(self) -> None:
        cells = [
            CellCenter(id=0, x=0.1, y=0.1),
            CellCenter(id=1, x=0.30000000000000004, y=0.1),
        ]
        mesh = build_mesh(cells, 0.1)
        assert mesh.n_vertices == 6

    def test_face_indices_in_range(self) -> None:
        cells = [CellCenter(id=i, x=float(i % 5) * 2, y=float(i // 5) * 2) for i in range(15)]
        mesh = build_mesh(cells, 1.0)
        assert mesh.n_faces == 15
        assert mesh.n_vertices == 6 * 4
        assert mesh.faces.min() >= 0
        assert mesh.faces.max() < mesh.n_vertices


class TestReadTopology:
    def test_read(self, grid_2x2_dir: Path) -> None:
        mesh, elevations = read_topology(Flo2DFileConfig(model_dir=grid_2x2_dir), uri="x")
        assert mesh.n_faces == 4
        assert mesh.n_vertices == 9
        assert mesh.uri == "x"
        np.testing.assert_array_equal(elevations, [100.0, 101.0, 102.0, 103.0])

    def test_missing_fplain(self, grid_2x2_dir: Path) -> None:
        (grid_2x2_dir / "FPLAIN.DAT").unlink()
        with pytest.raises(Flo2DFileNotFoundError):
            read_topology(Flo2DFileConfig(model_dir=grid_2x2_dir))

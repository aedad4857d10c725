from __future__ import annotations

import json

import pytest

from rover_sim.grid import GridMap, InvalidCoordinateError


def test_neighbors_are_orthogonal_and_in_bounds() -> None:
    grid = GridMap(10)
    assert sorted(grid.neighbors((0, 0))) == [(0, 1), (1, 0)]
    assert sorted(grid.neighbors((9, 9))) == [(8, 9), (9, 8)]
    assert sorted(grid.neighbors((4, 4))) == [(3, 4), (4, 3), (4, 5), (5, 4)]
    assert GridMap(1).neighbors((0, 0)) == []


def test_neighbors_skip_blocked_cells() -> None:
    grid = GridMap(10, blocked=[(1, 0)])
    assert grid.neighbors((0, 0)) == [(0, 1)]
    assert grid.is_blocked((1, 0))
    grid.set_blocked((1, 0), False)
    assert sorted(grid.neighbors((0, 0))) == [(0, 1), (1, 0)]


def test_out_of_bounds_cells_count_as_blocked() -> None:
    grid = GridMap(3)
    assert grid.is_blocked((-1, 0))
    assert grid.is_blocked((3, 3))
    assert not grid.is_blocked((2, 2))


def test_distance_is_euclidean_and_heuristic_is_manhattan() -> None:
    assert GridMap.distance((0, 0), (3, 4)) == 5.0
    assert GridMap.distance((2, 2), (2, 3)) == 1.0
    h = GridMap.heuristic((0, 0), (3, 4))
    assert h == 7.0
    assert isinstance(h, float)


def test_validate_rejects_out_of_bounds() -> None:
    grid = GridMap(10)
    assert grid.validate((9, 0)) == (9, 0)
    with pytest.raises(InvalidCoordinateError) as excinfo:
        grid.validate((20, 20))
    assert excinfo.value.coord == (20, 20)
    assert excinfo.value.size == 10
    assert isinstance(excinfo.value, ValueError)


def test_set_blocked_out_of_bounds_raises() -> None:
    with pytest.raises(InvalidCoordinateError):
        GridMap(5).set_blocked((5, 0))


def test_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        GridMap(0)


def test_map_dict_round_trip_and_file(tmp_path) -> None:
    data = {"size": 4, "blocked": [[2, 1], [0, 3]], "name": "ignored"}
    grid = GridMap.from_map_dict(data)
    assert grid.blocked_cells() == [(0, 3), (2, 1)]
    assert grid.to_dict() == {"size": 4, "blocked": [[0, 3], [2, 1]]}

    path = tmp_path / "map.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    loaded = GridMap.from_map_file(str(path))
    assert loaded.size == 4
    assert loaded.is_blocked((2, 1))


def test_map_dict_with_cell_outside_grid_raises() -> None:
    with pytest.raises(InvalidCoordinateError):
        GridMap.from_map_dict({"size": 3, "blocked": [[3, 0]]})


def test_fractional_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        GridMap(10.7)
    with pytest.raises(ValueError):
        GridMap.from_map_dict({"size": 4.5})
    assert GridMap(4.0).size == 4

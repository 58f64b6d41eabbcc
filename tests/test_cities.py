import math

import networkx as nx
import numpy as np
import pytest

from tour_ga.cities import City, CityTable
from tour_ga.errors import MalformedInputError


def test_distance_is_euclidean_and_symmetric(square):
    assert square.distance(0, 1) == 10.0
    assert square.distance(0, 2) == pytest.approx(math.sqrt(200))
    for i in range(len(square)):
        assert square.distance(i, i) == 0.0
        for j in range(len(square)):
            assert square.distance(i, j) == square.distance(j, i)


def test_names_and_indices(square):
    assert square.names == ["A", "B", "C", "D"]
    assert [c.index for c in square] == [0, 1, 2, 3]
    assert square[2] == City(index=2, x=10.0, y=10.0, name="C")


def test_unnamed_cities_are_named_by_index():
    table = CityTable.load([(0, 0), (3, 4)])
    assert table.names == ["0", "1"]
    assert table.distance(0, 1) == 5.0


def test_accepts_mappings_and_arrays():
    table = CityTable.load([{"x": 1, "y": 1, "name": "p"}, np.array([4.0, 5.0])])
    assert table.names == ["p", "1"]
    assert table.distance(1, 0) == 5.0


def test_duplicate_positions_allowed():
    table = CityTable.load([(1, 1), (1, 1), (2, 1)])
    assert table.distance(0, 1) == 0.0


@pytest.mark.parametrize(
    "cities",
    [
        [],
        [(0, 0)],
        [(0, 0), ("a", "b", 1)],
        [(0, 0), (1, "north")],
        [(0, 0), (1, float("nan"))],
        [(0, 0), (True, 1)],
        [(0, 0), (1, 2, 3, 4)],
        [(0, 0), "1,2"],
    ],
)
def test_load_rejects_bad_input(cities):
    with pytest.raises(MalformedInputError):
        CityTable.load(cities)


def test_invalid_index_raises_index_error(square):
    with pytest.raises(IndexError):
        square.distance(0, 4)
    with pytest.raises(IndexError):
        square.distance(-1, 0)


def test_matrix_is_read_only(square):
    with pytest.raises(ValueError):
        square.matrix[0, 1] = 3.0


def test_from_graph_uses_coord_attribute():
    graph = nx.Graph()
    graph.add_node(1, coord=[0.0, 0.0])
    graph.add_node(2, coord=[6.0, 8.0])
    table = CityTable.from_graph(graph)
    assert table.names == ["1", "2"]
    assert table.distance(0, 1) == 10.0


def test_from_graph_without_coordinates():
    graph = nx.complete_graph(3)
    with pytest.raises(MalformedInputError):
        CityTable.from_graph(graph)


def test_overflowing_distances_rejected():
    with pytest.raises(MalformedInputError) as info:
        CityTable.load([(-1e308, 0), (1e308, 0), (0, 1)])
    assert "overflow" in str(info.value)


def test_large_but_representable_coordinates():
    table = CityTable.load([(-1e150, 0), (1e150, 0)])
    assert table.distance(0, 1) == pytest.approx(2e150)

import math
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Sequence

import networkx as nx
import numpy as np

from .errors import MalformedInputError


@dataclass(frozen=True)
class City:
    index: int
    x: float
    y: float
    name: str = ""

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", str(self.index))


def _coordinate(value: Any, index: int, axis: str) -> float:
    if isinstance(value, bool):
        raise MalformedInputError(f"city {index}: {axis} coordinate {value!r} is not numeric")
    try:
        coord = float(value)
    except (TypeError, ValueError):
        raise MalformedInputError(
            f"city {index}: {axis} coordinate {value!r} is not numeric"
        ) from None
    if not math.isfinite(coord):
        raise MalformedInputError(f"city {index}: {axis} coordinate {value!r} is not finite")
    return coord


def _unpack(item: Any, index: int):
    if isinstance(item, City):
        return item.name, item.x, item.y
    if isinstance(item, Mapping):
        if "x" not in item or "y" not in item:
            raise MalformedInputError(f"city {index}: expected 'x' and 'y' fields")
        return item.get("name", ""), item["x"], item["y"]
    if isinstance(item, np.ndarray):
        item = item.tolist()
    if isinstance(item, (str, bytes)) or not isinstance(item, Sequence):
        raise MalformedInputError(f"city {index}: expected (x, y) or (name, x, y), got {item!r}")
    if len(item) == 2:
        return "", item[0], item[1]
    if len(item) == 3:
        return item[0], item[1], item[2]
    raise MalformedInputError(f"city {index}: expected 2 or 3 fields, got {len(item)}")


class CityTable:
    """
    Immutable table of cities with a precomputed Euclidean distance matrix.
    City indices are dense 0..N-1 in load order.
    """

    def __init__(self, cities: Sequence[City]):
        if len(cities) < 2:
            raise MalformedInputError(f"need at least 2 cities, got {len(cities)}")
        self._cities = tuple(cities)
        coords = np.array([(c.x, c.y) for c in self._cities], dtype=np.float64)
        with np.errstate(over="ignore", invalid="ignore"):
            dx = coords[:, 0][:, None] - coords[:, 0][None, :]
            dy = coords[:, 1][:, None] - coords[:, 1][None, :]
            self._matrix = np.hypot(dx, dy)
        if not np.isfinite(self._matrix).all():
            raise MalformedInputError("coordinates too large: pairwise distances overflow")
        self._matrix.setflags(write=False)

    @classmethod
    def load(cls, cities: Sequence[Any]) -> "CityTable":
        if cities is None:
            raise MalformedInputError("no cities supplied")
        items = list(cities)
        if len(items) < 2:
            raise MalformedInputError(f"need at least 2 cities, got {len(items)}")
        table: List[City] = []
        for idx, item in enumerate(items):
            name, x, y = _unpack(item, idx)
            table.append(
                City(
                    index=idx,
                    x=_coordinate(x, idx, "x"),
                    y=_coordinate(y, idx, "y"),
                    name=str(name) if name is not None else "",
                )
            )
        return cls(table)

    @classmethod
    def from_graph(cls, graph: nx.Graph) -> "CityTable":
        """Build a table from a graph whose nodes carry a ``coord`` attribute."""
        rows = []
        for node, attrs in graph.nodes(data=True):
            coord = attrs.get("coord")
            if coord is None or len(coord) < 2:
                raise MalformedInputError(f"node {node!r} has no coordinates")
            rows.append((node, coord[0], coord[1]))
        return cls.load(rows)

    def distance(self, i: int, j: int) -> float:
        if i < 0 or j < 0:
            raise IndexError(f"city index out of range: ({i}, {j})")
        return float(self._matrix[i, j])

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def names(self) -> List[str]:
        return [c.name for c in self._cities]

    def __len__(self) -> int:
        return len(self._cities)

    def __getitem__(self, index: int) -> City:
        return self._cities[index]

    def __iter__(self) -> Iterator[City]:
        return iter(self._cities)

    def __repr__(self) -> str:
        return f"CityTable(cities={len(self._cities)})"

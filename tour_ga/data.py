import csv
import math
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import tsplib95

from .cities import City, CityTable
from .errors import MalformedInputError
from .evaluation import tour_length


NAME_COLUMNS = ("name", "id", "city")


def _parse_float(value: str, path: Path, line: int, axis: str) -> float:
    try:
        coord = float(value.strip())
    except ValueError:
        raise MalformedInputError(
            f"{path}:{line}: {axis} coordinate {value!r} is not numeric"
        ) from None
    if not math.isfinite(coord):
        raise MalformedInputError(f"{path}:{line}: {axis} coordinate {value!r} is not finite")
    return coord


def _columns(first_row: List[str], path: Path, line: int) -> Tuple[bool, Optional[int], int, int]:
    lowered = [c.strip().lower() for c in first_row]
    if "x" in lowered and "y" in lowered:
        name_col = next((lowered.index(n) for n in NAME_COLUMNS if n in lowered), None)
        return True, name_col, lowered.index("x"), lowered.index("y")
    if len(first_row) == 2:
        return False, None, 0, 1
    if len(first_row) == 3:
        return False, 0, 1, 2
    raise MalformedInputError(
        f"{path}:{line}: expected 'x,y' or 'name,x,y' records, got {len(first_row)} fields"
    )


def load_csv(path: Path, delimiter: str = ",") -> CityTable:
    """
    Read cities from a delimited file. A header naming ``x`` and ``y`` (and
    optionally ``name``/``id``/``city``) is honoured; otherwise rows are
    ``x,y`` or ``name,x,y``. Blank lines are ignored.
    """
    path = Path(path)
    if not path.is_file():
        raise MalformedInputError(f"{path}: city file not found")
    cities: List[City] = []
    layout = None
    try:
        with path.open("r", newline="", encoding="utf-8") as f:
            reader = csv.reader(f, delimiter=delimiter)
            width = 0
            for row in reader:
                line = reader.line_num
                if not any(field.strip() for field in row):
                    continue
                if layout is None:
                    layout = _columns(row, path, line)
                    width = len(row)
                    if layout[0]:
                        continue
                has_header, name_col, x_col, y_col = layout
                if (has_header and len(row) < width) or (not has_header and len(row) != width):
                    raise MalformedInputError(
                        f"{path}:{line}: expected {width} fields, got {len(row)}"
                    )
                idx = len(cities)
                cities.append(
                    City(
                        index=idx,
                        x=_parse_float(row[x_col], path, line, "x"),
                        y=_parse_float(row[y_col], path, line, "y"),
                        name=row[name_col].strip() if name_col is not None else "",
                    )
                )
    except UnicodeDecodeError as exc:
        raise MalformedInputError(
            f"{path}: not valid UTF-8 text ({exc.reason} at byte {exc.start})"
        ) from exc
    except OSError as exc:
        raise MalformedInputError(f"{path}: cannot read city file ({exc.strerror or exc})") from exc
    if layout is None:
        raise MalformedInputError(f"{path}: city file is empty")
    if len(cities) < 2:
        raise MalformedInputError(f"{path}: need at least 2 city records, got {len(cities)}")
    return CityTable(cities)


def load_tsplib(path: Path) -> CityTable:
    path = Path(path)
    if not path.is_file():
        raise MalformedInputError(f"{path}: city file not found")
    try:
        problem = tsplib95.load(path)
        graph = problem.get_graph()
    except Exception as exc:
        raise MalformedInputError(f"{path}: could not parse TSPLIB file ({exc})") from exc
    return CityTable.from_graph(graph)


def load_cities(path: Path) -> CityTable:
    path = Path(path)
    if path.suffix.lower() == ".tsp":
        return load_tsplib(path)
    return load_csv(path)


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def load_optimum(path: Path, table: CityTable) -> Optional[float]:
    """Length of a known optimal tour stored beside a TSPLIB instance, if any."""
    path = Path(path)
    if path.suffix.lower() != ".tsp":
        return None
    index_of = {name: i for i, name in enumerate(table.names)}
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            nodes = list(tour_file.tours[0])
            order = [index_of[str(n)] for n in nodes]
        except Exception:
            continue
        if sorted(order) != list(range(len(table))):
            continue
        return tour_length(table, order)
    return None

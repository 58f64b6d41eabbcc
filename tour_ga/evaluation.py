import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .cities import CityTable


def tour_length(table: CityTable, order: Sequence[int]) -> float:
    """Length of the closed cycle visiting ``order`` and returning to its start."""
    if len(order) == 0:
        return 0.0
    idx = np.asarray(order, dtype=np.intp)
    if idx.min() < 0:
        raise IndexError(f"city index out of range: {int(idx.min())}")
    return float(table.matrix[idx, np.roll(idx, -1)].sum())


@dataclass
class GenerationStats:
    generation: int
    best: float
    mean: float
    worst: float
    best_so_far: float


@dataclass
class SolveResult:
    tour: List[int]
    length: float
    generations: int
    optimum: Optional[float] = None
    history: List[GenerationStats] = field(default_factory=list)

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum

    def labels(self, table: CityTable) -> List[str]:
        return [table[i].name for i in self.tour]

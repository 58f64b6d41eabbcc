from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .cities import CityTable
from .evaluation import tour_length


@dataclass(frozen=True)
class Tour:
    """A closed tour: each city index 0..N-1 appears exactly once in ``order``."""

    order: Tuple[int, ...]

    def __post_init__(self):
        if not isinstance(self.order, tuple):
            object.__setattr__(self, "order", tuple(self.order))

    @staticmethod
    def random(city_count: int, rng: random.Random) -> "Tour":
        order = list(range(city_count))
        # random.Random.shuffle is Fisher-Yates, so every permutation is reachable.
        rng.shuffle(order)
        return Tour(order)

    def fitness(self, table: CityTable) -> float:
        return tour_length(table, self.order)

    def crossover(self, other: "Tour", rng: random.Random) -> "Tour":
        """
        Order crossover (OX).

        A random slice ``[start, end]`` of this tour is copied into the child at the
        same positions; the remaining positions are filled left to right with the
        other parent's cities in the order they appear there, skipping any city
        already taken from the slice.
        """
        size = len(self.order)
        if size != len(other.order):
            raise ValueError(f"parents differ in length: {size} != {len(other.order)}")
        if size < 2:
            return Tour(self.order)
        start = rng.randrange(size)
        end = rng.randrange(size)
        if start > end:
            start, end = end, start

        child: List[Optional[int]] = [None] * size
        child[start : end + 1] = self.order[start : end + 1]
        taken = set(self.order[start : end + 1])
        filler = (city for city in other.order if city not in taken)
        for i in range(size):
            if child[i] is None:
                child[i] = next(filler)
        return Tour(child)

    def mutate(self, rate: float, rng: random.Random) -> "Tour":
        """Swap mutation applied per position; returns a new tour."""
        order = list(self.order)
        n = len(order)
        if n < 2:
            return Tour(order)
        for i in range(n):
            if rng.random() < rate:
                # Partner is drawn from the other n - 1 positions.
                j = rng.randrange(n - 1)
                if j >= i:
                    j += 1
                order[i], order[j] = order[j], order[i]
        return Tour(order)

    def is_valid(self, city_count: int) -> bool:
        return len(self.order) == city_count and sorted(self.order) == list(range(city_count))

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self):
        return iter(self.order)

    def __getitem__(self, index):
        return self.order[index]

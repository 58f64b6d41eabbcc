import math
import random
from typing import Iterator, List, Sequence, Tuple

from .cities import CityTable
from .tour import Tour


Ranked = List[Tuple[Tour, float]]


def elite_count(fraction: float, size: int) -> int:
    return min(size, max(0, math.floor(fraction * size)))


class Population:
    def __init__(self, tours: Sequence[Tour]):
        self.tours: List[Tour] = list(tours)

    @classmethod
    def initialize(cls, size: int, city_count: int, rng: random.Random) -> "Population":
        return cls([Tour.random(city_count, rng) for _ in range(size)])

    def evaluate(self, table: CityTable) -> Ranked:
        """Score every member and return ``(tour, fitness)`` pairs, best first."""
        scored = [(tour, tour.fitness(table)) for tour in self.tours]
        # Stable sort: equal fitnesses keep population order.
        scored.sort(key=lambda x: x[1])
        return scored

    @staticmethod
    def select(ranked: Ranked, rng: random.Random, tournament_size: int = 3) -> Tour:
        """
        Tournament selection: draw ``tournament_size`` members uniformly (with
        replacement) and return the one with the lowest fitness. Exact ties are
        broken uniformly at random.
        """
        if not ranked:
            raise ValueError("cannot select from an empty population")
        k = max(2, tournament_size)
        contenders = [ranked[rng.randrange(len(ranked))] for _ in range(k)]
        best = min(score for _, score in contenders)
        tied = [tour for tour, score in contenders if score == best]
        if len(tied) == 1:
            return tied[0]
        return rng.choice(tied)

    @staticmethod
    def elites(ranked: Ranked, count: int) -> List[Tour]:
        return [tour for tour, _ in ranked[:count]]

    def __len__(self) -> int:
        return len(self.tours)

    def __iter__(self) -> Iterator[Tour]:
        return iter(self.tours)

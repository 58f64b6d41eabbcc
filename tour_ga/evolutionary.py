import math
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from .cities import CityTable
from .errors import ConfigurationError
from .evaluation import GenerationStats, SolveResult
from .population import Population, Ranked, elite_count
from .tour import Tour


ProgressCallback = Callable[[int, float], None]


def _check_int(name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(name, f"expected an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(name, f"must be >= {minimum}, got {value}")


def _check_rate(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(name, f"expected a number, got {value!r}")
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ConfigurationError(name, f"must lie in [0, 1], got {value}")


@dataclass(frozen=True)
class EvolutionConfig:
    generations: int = 200
    population_size: int = 50
    crossover_rate: float = 0.4
    mutation_rate: float = 0.01
    elite_fraction: float = 0.2
    tournament_size: int = 3
    stall_generations: Optional[int] = None
    random_seed: Optional[int] = 123

    def validate(self) -> None:
        _check_int("generations", self.generations, 0)
        _check_int("population_size", self.population_size, 1)
        _check_rate("crossover_rate", self.crossover_rate)
        _check_rate("mutation_rate", self.mutation_rate)
        _check_rate("elite_fraction", self.elite_fraction)
        _check_int("tournament_size", self.tournament_size, 2)
        if self.stall_generations is not None:
            _check_int("stall_generations", self.stall_generations, 1)
        if self.random_seed is not None:
            _check_int("random_seed", self.random_seed, 0)

    @property
    def elite_count(self) -> int:
        return elite_count(self.elite_fraction, self.population_size)


class EvolutionarySearch:
    """
    Generational GA over closed tours.

    Each generation keeps the elite slice of the ranked population unchanged and
    fills the remaining slots with children bred from two tournament-selected
    parents (order crossover with probability ``crossover_rate``, otherwise a copy
    of the first parent), followed by per-position swap mutation. The next
    generation is built in full before it replaces the current one.
    """

    def __init__(
        self,
        config: EvolutionConfig,
        table: CityTable,
        rng: random.Random = None,
        optimum: Optional[float] = None,
    ):
        config.validate()
        if table is None or len(table) < 2:
            raise ConfigurationError("cities", "need at least 2 cities")
        self.cfg = config
        self.table = table
        self.optimum = optimum
        self.rng = rng if rng is not None else random.Random(config.random_seed)
        self.population: Optional[Population] = None
        self.ranked: Ranked = []
        self.generation = 0
        self.best_tour: Optional[Tour] = None
        self.best_fitness = float("inf")
        self.history: List[GenerationStats] = []
        self._stalled = 0

    def initialize(self) -> None:
        self.population = Population.initialize(
            self.cfg.population_size, len(self.table), self.rng
        )
        self.generation = 0
        self.best_tour = None
        self.best_fitness = float("inf")
        self.history = []
        self._stalled = 0
        self._evaluate()

    def _evaluate(self) -> bool:
        self.ranked = self.population.evaluate(self.table)
        assert len(self.ranked) == self.cfg.population_size
        leader, leader_fitness = self.ranked[0]
        improved = self.best_tour is None or leader_fitness < self.best_fitness
        if improved:
            self.best_tour = leader
            self.best_fitness = leader_fitness
            self._stalled = 0
        else:
            self._stalled += 1
        scores = [score for _, score in self.ranked]
        self.history.append(
            GenerationStats(
                generation=self.generation,
                best=leader_fitness,
                mean=sum(scores) / len(scores),
                worst=scores[-1],
                best_so_far=self.best_fitness,
            )
        )
        return improved

    def breed(self) -> Population:
        n = len(self.table)
        new_pop: List[Tour] = Population.elites(self.ranked, self.cfg.elite_count)
        while len(new_pop) < self.cfg.population_size:
            parent_a = Population.select(self.ranked, self.rng, self.cfg.tournament_size)
            parent_b = Population.select(self.ranked, self.rng, self.cfg.tournament_size)
            if self.rng.random() < self.cfg.crossover_rate:
                child = parent_a.crossover(parent_b, self.rng)
            else:
                child = parent_a
            child = child.mutate(self.cfg.mutation_rate, self.rng)
            assert child.is_valid(n), f"invalid tour produced: {child.order}"
            new_pop.append(child)
        return Population(new_pop)

    def step(self) -> bool:
        if self.population is None:
            self.initialize()
        self.population = self.breed()
        self.generation += 1
        return self._evaluate()

    def converged(self) -> bool:
        limit = self.cfg.stall_generations
        return limit is not None and self._stalled >= limit

    def run(self, callback: Optional[ProgressCallback] = None) -> SolveResult:
        self.initialize()
        if callback:
            callback(self.generation, self.best_fitness)
        while self.generation < self.cfg.generations and not self.converged():
            self.step()
            if callback:
                callback(self.generation, self.best_fitness)
        return self.result()

    def result(self) -> SolveResult:
        if self.best_tour is None:
            raise RuntimeError("search has not been initialized")
        return SolveResult(
            tour=list(self.best_tour.order),
            length=self.best_fitness,
            generations=self.generation,
            optimum=self.optimum,
            history=list(self.history),
        )

    def best(self) -> Tour:
        return self.best_tour

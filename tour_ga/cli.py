import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

from tour_ga.cities import CityTable
from tour_ga.data import load_cities, load_optimum
from tour_ga.errors import ConfigurationError, MalformedInputError
from tour_ga.evaluation import SolveResult
from tour_ga.evolutionary import EvolutionConfig, EvolutionarySearch


EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", file=sys.stderr, flush=True)


def format_result(result: SolveResult, table: CityTable) -> str:
    lines = ["Solution:", f"Length {result.length}"]
    if result.optimum is not None:
        lines.append(f"Optimum {result.optimum} (gap {result.gap:.2%})")
    lines.append("->".join(result.labels(table)))
    return "\n".join(lines)


def result_json(result: SolveResult, table: CityTable) -> str:
    payload = {
        "tour": result.tour,
        "names": result.labels(table),
        "length": result.length,
        "generations": result.generations,
        "optimum": result.optimum,
        "gap": None if result.optimum is None else result.gap,
    }
    return json.dumps(payload, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tour-ga", description="Genetic algorithm search for short closed tours"
    )
    parser.add_argument("generations", type=int, help="Number of generations to evolve")
    parser.add_argument("pop_size", type=int, help="Population size")
    parser.add_argument("crossover_rate", type=float, help="Crossover probability in [0, 1]")
    parser.add_argument("mutation_rate", type=float, help="Per-position swap probability in [0, 1]")
    parser.add_argument("elitism", type=float, help="Fraction of the population kept unchanged")
    parser.add_argument("csv", type=Path, help="City file (CSV, or TSPLIB .tsp)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument("--tournament-size", type=int, default=3)
    parser.add_argument(
        "--stall", type=int, default=None, help="Stop after this many generations without improvement"
    )
    parser.add_argument("--progress-every", type=int, default=50, help="Log every N generations (0 = off)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress logging")
    return parser


def run(args) -> int:
    cfg = EvolutionConfig(
        generations=args.generations,
        population_size=args.pop_size,
        crossover_rate=args.crossover_rate,
        mutation_rate=args.mutation_rate,
        elite_fraction=args.elitism,
        tournament_size=args.tournament_size,
        stall_generations=args.stall,
        random_seed=args.seed,
    )
    try:
        cfg.validate()
    except ConfigurationError as exc:
        print(f"tour-ga: invalid parameter {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        table = load_cities(args.csv)
    except MalformedInputError as exc:
        print(f"tour-ga: invalid input {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    optimum = load_optimum(args.csv, table)
    quiet = args.quiet
    if not quiet:
        log(f"loaded {len(table)} cities from {args.csv}")

    every = args.progress_every

    def progress(generation: int, best: float) -> None:
        if not quiet and every > 0 and (generation % every == 0 or generation == cfg.generations):
            log(f"gen {generation}: best_len={best:.3f}")

    t0 = time.perf_counter()
    search = EvolutionarySearch(cfg, table, optimum=optimum)
    result = search.run(callback=progress)
    if not quiet:
        log(f"finished {result.generations} generations in {time.perf_counter() - t0:.2f}s")

    if args.json:
        print(result_json(result, table))
    else:
        print(format_result(result, table))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

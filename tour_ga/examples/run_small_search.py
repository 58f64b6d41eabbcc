from tour_ga.cities import CityTable
from tour_ga.evolutionary import EvolutionConfig, EvolutionarySearch


def main():
    table = CityTable.load(
        [
            ("A", 0.0, 0.0),
            ("B", 10.0, 0.0),
            ("C", 10.0, 10.0),
            ("D", 0.0, 10.0),
            ("E", 5.0, 15.0),
            ("F", -5.0, 5.0),
        ]
    )
    cfg = EvolutionConfig(
        generations=100,
        population_size=30,
        crossover_rate=0.6,
        mutation_rate=0.02,
        elite_fraction=0.1,
        random_seed=7,
    )

    def report(generation: int, best: float) -> None:
        if generation % 20 == 0:
            print(f"gen {generation}: best_len={best:.2f}")

    result = EvolutionarySearch(cfg, table).run(callback=report)
    print(f"best {result.length:.2f}: {'->'.join(result.labels(table))}")


if __name__ == "__main__":
    main()

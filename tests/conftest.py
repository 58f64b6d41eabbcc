import random

import pytest

from tour_ga.cities import CityTable


@pytest.fixture
def square():
    return CityTable.load(
        [("A", 0, 0), ("B", 10, 0), ("C", 10, 10), ("D", 0, 10)]
    )


@pytest.fixture
def scattered():
    rng = random.Random(99)
    return CityTable.load([(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(25)])


@pytest.fixture
def rng():
    return random.Random(2024)

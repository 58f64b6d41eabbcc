"""
Genetic-algorithm search for short closed tours over 2-D cities.
"""

__all__ = [
    "cities",
    "data",
    "errors",
    "evaluation",
    "evolutionary",
    "population",
    "tour",
]

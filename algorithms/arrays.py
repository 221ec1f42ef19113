"""Random input arrays for the sorting visualizer."""

import random
from typing import List, Optional

MIN_VALUE = 5
MAX_VALUE = 100


def generate_random_array(
    size: int,
    low: int = MIN_VALUE,
    high: int = MAX_VALUE,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """`size` integers drawn uniformly from [low, high]."""
    if size < 0:
        raise ValueError("size must be non-negative")
    if low > high:
        raise ValueError("low must not exceed high")
    rng = rng or random.Random()
    return [rng.randint(low, high) for _ in range(size)]

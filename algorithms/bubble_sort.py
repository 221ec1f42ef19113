"""
bubble_sort.py — Bubble Sort
=============================
Generator-based bubble sort.  Yields a SortStep at every event:
  1. Compare adjacent pair (j, j+1)
  2. Swap the pair when it is out of order
  3. Final step  →  array sorted, both index lists empty

O(N²) comparisons, stable, in-place on a private copy of the input.
"""

import logging
from typing import Generator, List, Sequence

from algorithms.step import SortStep, compare_step, swap_step, sorted_step

logger = logging.getLogger(__name__)


def bubble_sort(array: Sequence[float]) -> Generator[SortStep, None, None]:
    arr: List[float] = list(array)
    n = len(arr)
    logger.debug("bubble sort on %d values", n)

    for i in range(n - 1):
        for j in range(n - i - 1):
            yield compare_step(arr, j, j + 1, description=f"Comparing {arr[j]} and {arr[j + 1]}")

            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                yield swap_step(arr, j, j + 1, description=f"Swapped {arr[j]} and {arr[j + 1]}")

    yield sorted_step(arr)

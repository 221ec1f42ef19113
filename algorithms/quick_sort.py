"""
quick_sort.py — Quick Sort (Lomuto partition)
==============================================
The last element of each sub-range is the pivot.  Yields:
  1. "Choosing pivot" step  →  comparing (high,)
  2. One comparing step per element scanned against the pivot
  3. One swap step per exchange during partitioning (skipped when i == j)
  4. One "placed pivot" step when the pivot moves to its final index

Recurses on [low, pi-1] then [pi+1, high].
"""

import logging
from typing import Generator, List, Sequence

from algorithms.step import SortStep, compare_step, swap_step, sorted_step

logger = logging.getLogger(__name__)


def quick_sort(array: Sequence[float]) -> Generator[SortStep, None, None]:
    arr: List[float] = list(array)
    logger.debug("quick sort on %d values", len(arr))

    yield from _sort(arr, 0, len(arr) - 1)
    yield sorted_step(arr)


def _sort(arr: List[float], low: int, high: int) -> Generator[SortStep, None, None]:
    if low < high:
        pi = yield from _partition(arr, low, high)
        yield from _sort(arr, low, pi - 1)
        yield from _sort(arr, pi + 1, high)


def _partition(arr: List[float], low: int, high: int) -> Generator[SortStep, None, int]:
    pivot = arr[high]
    i = low - 1
    yield compare_step(arr, high, description=f"Choosing pivot: {pivot}")

    for j in range(low, high):
        yield compare_step(arr, j, high, description=f"Comparing {arr[j]} with pivot {pivot}")
        if arr[j] <= pivot:
            i += 1
            if i != j:
                arr[i], arr[j] = arr[j], arr[i]
                yield swap_step(arr, i, j, description=f"Swapped {arr[i]} and {arr[j]}")

    if i + 1 != high:
        arr[i + 1], arr[high] = arr[high], arr[i + 1]
        yield swap_step(arr, i + 1, high, description=f"Placed pivot {pivot} in its final position")

    return i + 1

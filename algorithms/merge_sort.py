"""
merge_sort.py — Top-down Merge Sort
====================================
Yields a SortStep at:
  1. Every split of [start, end] at mid  →  "dividing" step, indices (start, mid, end)
  2. Every pair considered during a merge  →  comparing step
  3. Every element written into the merged region  →  placed step

The left half is fully processed before the right half, the same order
as the textbook recursion.
"""

import logging
from typing import Generator, List, Sequence

from algorithms.step import SortStep, compare_step, swap_step, sorted_step

logger = logging.getLogger(__name__)


def merge_sort(array: Sequence[float]) -> Generator[SortStep, None, None]:
    arr: List[float] = list(array)
    logger.debug("merge sort on %d values", len(arr))

    yield from _sort(arr, 0, len(arr) - 1)
    yield sorted_step(arr)


def _sort(arr: List[float], start: int, end: int) -> Generator[SortStep, None, None]:
    if start >= end:
        return
    mid = (start + end) // 2
    yield compare_step(arr, start, mid, end, description=f"Dividing array from index {start} to {end}")

    yield from _sort(arr, start, mid)
    yield from _sort(arr, mid + 1, end)
    yield from _merge(arr, start, mid, end)


def _merge(arr: List[float], start: int, mid: int, end: int) -> Generator[SortStep, None, None]:
    left  = arr[start:mid + 1]
    right = arr[mid + 1:end + 1]
    i = j = 0
    k = start

    while i < len(left) and j < len(right):
        yield compare_step(
            arr, start + i, mid + 1 + j,
            description=f"Comparing {left[i]} and {right[j]}",
        )
        # <= keeps equal elements in their original order
        if left[i] <= right[j]:
            arr[k] = left[i]
            yield swap_step(arr, k, description=f"Placing {left[i]} at position {k}")
            i += 1
        else:
            arr[k] = right[j]
            yield swap_step(arr, k, description=f"Placing {right[j]} at position {k}")
            j += 1
        k += 1

    while i < len(left):
        arr[k] = left[i]
        yield swap_step(arr, k, description=f"Placing remaining element {left[i]} at position {k}")
        i += 1
        k += 1

    while j < len(right):
        arr[k] = right[j]
        yield swap_step(arr, k, description=f"Placing remaining element {right[j]} at position {k}")
        j += 1
        k += 1

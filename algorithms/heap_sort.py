"""
heap_sort.py — Heap Sort
=========================
Phase 1 builds a max-heap bottom-up, yielding one step per heapify root
plus the comparison / swap steps of each sift-down.
Phase 2 repeatedly swaps the root with the last unsorted element (one swap
step per extraction) and sifts the new root down.
"""

import logging
from typing import Generator, List, Sequence

from algorithms.step import SortStep, compare_step, swap_step, sorted_step

logger = logging.getLogger(__name__)


def heap_sort(array: Sequence[float]) -> Generator[SortStep, None, None]:
    arr: List[float] = list(array)
    n = len(arr)
    logger.debug("heap sort on %d values", n)

    # build max heap
    for i in range(n // 2 - 1, -1, -1):
        yield compare_step(arr, i, description=f"Building max heap, processing index {i}")
        yield from _heapify(arr, n, i)

    # extract
    for i in range(n - 1, 0, -1):
        arr[0], arr[i] = arr[i], arr[0]
        yield swap_step(arr, 0, i, description=f"Moving largest element {arr[i]} to position {i}")
        yield from _heapify(arr, i, 0)

    yield sorted_step(arr)


def _heapify(arr: List[float], size: int, root: int) -> Generator[SortStep, None, None]:
    largest = root
    left  = 2 * root + 1
    right = 2 * root + 2

    if left < size:
        yield compare_step(
            arr, largest, left,
            description=f"Comparing root {arr[largest]} with left child {arr[left]}",
        )
        if arr[left] > arr[largest]:
            largest = left

    if right < size:
        yield compare_step(
            arr, largest, right,
            description=f"Comparing largest {arr[largest]} with right child {arr[right]}",
        )
        if arr[right] > arr[largest]:
            largest = right

    if largest != root:
        arr[root], arr[largest] = arr[largest], arr[root]
        yield swap_step(arr, root, largest, description=f"Swapped {arr[root]} with {arr[largest]}")
        yield from _heapify(arr, size, largest)

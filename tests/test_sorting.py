# tests/test_sorting.py
import random

import pytest

from algorithms import get_algorithm, list_algorithms, SORTING, REGISTRY
from algorithms.arrays import generate_random_array
from algorithms.bubble_sort import bubble_sort
from algorithms.heap_sort import heap_sort
from algorithms.merge_sort import merge_sort
from algorithms.quick_sort import quick_sort

SORTS = [bubble_sort, merge_sort, quick_sort, heap_sort]


def test_bubble_sort_counts_on_small_array():
    steps = list(bubble_sort([5, 3, 8, 1]))
    comparisons = [s for s in steps if s.is_comparison]
    swaps = [s for s in steps if s.is_swap]

    assert len(comparisons) == 6
    assert len(swaps) == 4
    assert steps[-1].is_final
    assert steps[-1].array == (1, 3, 5, 8)
    assert steps[-1].description == "Array is now sorted!"


def test_bubble_sort_first_steps():
    steps = list(bubble_sort([5, 3, 8, 1]))
    assert steps[0].comparing_indices == (0, 1)
    assert steps[0].description == "Comparing 5 and 3"
    assert steps[1].swapped_indices == (0, 1)
    assert steps[1].array == (3, 5, 8, 1)


@pytest.mark.parametrize("sort", SORTS)
def test_every_sort_ends_sorted_with_one_final_step(sort):
    data = generate_random_array(30, rng=random.Random(7))
    steps = list(sort(data))

    assert steps[-1].array == tuple(sorted(data))
    assert [s.is_final for s in steps].count(True) == 1
    assert steps[-1].is_final


def test_all_sorts_agree():
    data = generate_random_array(25, rng=random.Random(21))
    finals = {sort.__name__: list(sort(data))[-1].array for sort in SORTS}
    assert len(set(finals.values())) == 1


@pytest.mark.parametrize("sort", SORTS)
def test_every_non_final_step_has_exactly_one_index_kind(sort):
    for step in sort([9, 2, 7, 2, 5, 1]):
        if step.is_final:
            continue
        assert bool(step.comparing_indices) != bool(step.swapped_indices)
        assert len(step.comparing_indices) <= 3


@pytest.mark.parametrize("sort", SORTS)
def test_input_is_not_mutated(sort):
    data = [4, 1, 3, 2]
    list(sort(data))
    assert data == [4, 1, 3, 2]


@pytest.mark.parametrize("sort", SORTS)
def test_trivial_inputs_yield_only_the_final_step(sort):
    assert [s.array for s in sort([])] == [()]
    assert [s.array for s in sort([42])] == [(42,)]


def test_steps_are_lazy():
    gen = bubble_sort(list(range(1000, 0, -1)))
    first = next(gen)
    assert first.comparing_indices == (0, 1)
    gen.close()


def test_merge_sort_divide_step_marks_three_indices():
    steps = list(merge_sort([4, 3, 2, 1]))
    assert steps[0].comparing_indices == (0, 1, 3)
    assert steps[0].description == "Dividing array from index 0 to 3"
    # writes during merging touch a single index
    assert all(len(s.swapped_indices) == 1 for s in steps if s.is_swap)


def test_merge_sort_is_stable_on_equal_keys():
    steps = list(merge_sort([2.0, 1.0, 2.0, 1.0]))
    assert steps[-1].array == (1.0, 1.0, 2.0, 2.0)


def test_quick_sort_announces_pivot():
    steps = list(quick_sort([3, 1, 2]))
    assert steps[0].comparing_indices == (2,)
    assert steps[0].description == "Choosing pivot: 2"


def test_heap_sort_moves_largest_to_end_first():
    steps = list(heap_sort([1, 5, 3]))
    first_swap_to_end = next(s for s in steps if s.description.startswith("Moving largest"))
    assert first_swap_to_end.array[-1] == 5


def test_registry_lists_sorting_algorithms_in_order():
    keys = [a.key for a in list_algorithms(SORTING)]
    assert keys == ["bubble", "merge", "quick", "heap"]
    assert get_algorithm("bubble").complexity_time == "O(n²)"
    assert get_algorithm("nope") is None
    assert set(REGISTRY["merge"].to_dict()) >= {"key", "label", "kind", "complexity_time"}


def test_generate_random_array_range_and_errors():
    data = generate_random_array(200, rng=random.Random(3))
    assert len(data) == 200
    assert all(5 <= v <= 100 for v in data)
    assert generate_random_array(0) == []
    with pytest.raises(ValueError):
        generate_random_array(-1)
    with pytest.raises(ValueError):
        generate_random_array(3, low=10, high=1)

# tests/test_generator.py
import random

import pytest

from algorithms.sudoku_solver import SudokuSolver, REMOVAL_TARGETS, has_unique_solution
from grid import is_valid_grid


def empties(grid):
    return sum(row.count(0) for row in grid)


def test_easy_puzzle_is_unique_with_forty_holes():
    solver = SudokuSolver(rng=random.Random(42))
    puzzle = solver.generate_puzzle("easy")

    assert is_valid_grid(puzzle)
    assert empties(puzzle) == REMOVAL_TARGETS["easy"]
    assert has_unique_solution(puzzle)


@pytest.mark.parametrize("difficulty", ["medium", "hard"])
def test_harder_puzzles_stay_unique(difficulty):
    solver = SudokuSolver(rng=random.Random(7))
    puzzle = solver.generate_puzzle(difficulty)

    assert empties(puzzle) <= REMOVAL_TARGETS[difficulty]
    assert empties(puzzle) > REMOVAL_TARGETS["easy"] - 1
    assert has_unique_solution(puzzle)


def test_generated_puzzle_is_solvable_stepwise():
    generator = SudokuSolver(rng=random.Random(3))
    puzzle = generator.generate_puzzle("easy")
    solver = SudokuSolver(puzzle)
    assert solver.solve() is True


def test_same_seed_same_puzzle():
    first = SudokuSolver(rng=random.Random(99)).generate_puzzle("easy")
    second = SudokuSolver(rng=random.Random(99)).generate_puzzle("easy")
    assert first == second


def test_unknown_difficulty_is_rejected():
    with pytest.raises(ValueError):
        SudokuSolver().generate_puzzle("expert")


def test_generation_returns_a_copy():
    solver = SudokuSolver(rng=random.Random(5))
    puzzle = solver.generate_puzzle("easy")
    puzzle[0][0] = 0 if puzzle[0][0] else 1
    assert solver.get_grid() != puzzle

# tests/test_sudoku_solver.py
import pytest

from algorithms.step import NO_POSITION, STEP_TRY, STEP_PLACE, STEP_BACKTRACK
from algorithms.sudoku_solver import (
    SudokuSolver,
    CancelToken,
    most_constrained_cell,
    count_solutions,
    has_unique_solution,
)
from grid import InvalidGridError, SudokuBoard, is_solved, validate_grid, empty_grid


def test_duplicate_in_row_is_rejected_at_construction(puzzle):
    puzzle[0][2] = 5
    with pytest.raises(InvalidGridError) as info:
        SudokuSolver(puzzle)
    assert info.value.row == 0


@pytest.mark.parametrize("bad", [
    [[0] * 9] * 8,
    [[0] * 9] * 8 + [[0] * 8],
    [[10] + [0] * 8] + [[0] * 9] * 8,
    [["1"] + [0] * 8] + [[0] * 9] * 8,
])
def test_malformed_grids_are_rejected(bad):
    with pytest.raises(InvalidGridError):
        validate_grid(bad)


def test_solve_reaches_the_known_solution(puzzle, solution):
    solver = SudokuSolver(puzzle)
    assert solver.solve() is True
    assert solver.get_grid() == solution
    assert is_solved(solver.get_grid())

    final = solver.get_steps()[-1]
    assert final.position == NO_POSITION
    assert final.value == -1
    assert final.description == "Solution found!"
    assert final.is_final


def test_step_snapshots(puzzle):
    solver = SudokuSolver(puzzle)
    steps = []
    solver.solve(on_step=steps.append)

    tries = [s for s in steps if s.type == STEP_TRY]
    assert tries
    first = tries[0]
    r, c = first.position
    # try is recorded before the digit is written
    assert first.grid[r][c] == 0
    assert first.description == f"Trying {first.value} at position ({r + 1}, {c + 1})"

    place = steps[steps.index(first) + 1]
    assert place.type == STEP_PLACE
    assert place.grid[r][c] == first.value


def test_backtrack_step_clears_the_cell():
    # a hard puzzle whose first guesses must be undone
    rows = [
        "800000000",
        "003600000",
        "070090200",
        "050007000",
        "000045700",
        "000100030",
        "001000068",
        "008500010",
        "090000400",
    ]
    solver = SudokuSolver([[int(ch) for ch in row] for row in rows])
    backtracks = []

    def watch(step):
        if step.type == STEP_BACKTRACK and len(backtracks) < 5:
            backtracks.append(step)

    assert solver.solve(on_step=watch) is True
    assert backtracks
    for step in backtracks:
        r, c = step.position
        assert step.grid[r][c] == 0
        assert 1 <= step.value <= 9
        assert step.description.startswith("Backtracking: removing")


def test_unsolvable_grid_returns_false_without_final_step():
    grid = empty_grid()
    # (0, 8) has no legal digit: 1-8 in its row, 9 in its column
    grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
    grid[1][8] = 9
    solver = SudokuSolver(grid)

    assert solver.solve() is False
    assert not any(s.is_final for s in solver.get_steps())
    assert not solver.solving


def test_cancellation_stops_the_run_and_freezes_the_grid(puzzle):
    solver = SudokuSolver(puzzle)
    gen = solver.solve_steps()
    for _ in range(10):
        next(gen)
    assert solver.solving

    solver.stop()
    snapshot = solver.get_grid()
    with pytest.raises(StopIteration) as done:
        next(gen)
    assert done.value.value is False
    assert solver.get_grid() == snapshot
    assert not solver.solving


def test_closing_the_generator_releases_the_solver(puzzle):
    solver = SudokuSolver(puzzle)
    gen = solver.solve_steps()
    next(gen)
    gen.close()
    assert not solver.solving
    solver.set_grid(puzzle)


def test_set_grid_refused_while_solving(puzzle):
    solver = SudokuSolver(puzzle)
    gen = solver.solve_steps()
    next(gen)
    with pytest.raises(RuntimeError):
        solver.set_grid(puzzle)
    gen.close()


def test_candidates_and_validity(puzzle):
    solver = SudokuSolver(puzzle)
    assert solver.candidates(0, 2) == [1, 2, 4]
    assert solver.candidates(0, 0) == []
    assert solver.is_valid(0, 2, 4)
    assert not solver.is_valid(0, 2, 5)
    assert solver.is_valid(0, 0, 5)


def test_most_constrained_cell_prefers_fewest_candidates(puzzle):
    r, c, cands = most_constrained_cell(puzzle)
    assert len(cands) == min(
        len(SudokuBoard(puzzle).candidates(rr, cc))
        for rr in range(9) for cc in range(9) if puzzle[rr][cc] == 0
    )
    assert puzzle[r][c] == 0
    assert most_constrained_cell([[1] * 9] * 9) is None


def test_most_constrained_cell_fails_fast_on_dead_cell():
    grid = empty_grid()
    grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
    grid[1][8] = 9
    assert most_constrained_cell(grid) == (0, 8, [])


def test_count_solutions(puzzle):
    assert count_solutions(puzzle) == 1
    assert has_unique_solution(puzzle)
    assert count_solutions(empty_grid(), limit=2) == 2
    assert puzzle[0][2] == 0  # input untouched


def test_cancel_token_is_sticky():
    token = CancelToken()
    assert not token.cancelled
    token.cancel()
    token.cancel()
    assert token.cancelled


# ---------------------------------------------------------------------------
# SudokuBoard
# ---------------------------------------------------------------------------
def test_board_givens_are_immutable(puzzle):
    board = SudokuBoard.from_puzzle(puzzle)
    assert board.is_given(0, 0)
    assert board.enter(0, 0, 1) is False
    assert board.enter(0, 2, 4) is True
    assert board.enter(0, 2, 10) is False
    assert board.enter(9, 0, 1) is False
    assert board.given_count() == 30


def test_board_reports_player_conflicts(puzzle):
    board = SudokuBoard.from_puzzle(puzzle)
    board.enter(0, 2, 5)
    conflicts = board.conflicts()
    assert conflicts[0][2] is True
    assert conflicts[0][0] is False
    board.enter(0, 2, 0)
    assert not any(any(row) for row in board.conflicts())

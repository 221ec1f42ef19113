"""
sudoku_solver.py — Stepwise Backtracking Sudoku Solver
=======================================================
Yields a SudokuStep at every event of the search:
  1. try        →  a candidate is about to be placed (snapshot before placement)
  2. place      →  the candidate is written (snapshot after placement)
  3. backtrack  →  the candidate failed deeper down and is removed
  4. terminal   →  position (-1, -1), value -1, "Solution found!"

Cell selection is most-constrained-first: the empty cell with the fewest
legal digits, or immediately any empty cell with none (fail fast).
Candidates are tried in increasing order.

Cancellation is cooperative.  Each run gets a CancelToken that is passed
down every recursive call and checked on entry, before every emitted step
and after every recursive return.  stop() cancels the token; the grid is
left exactly as it was at that moment.

Puzzle generation (generate_puzzle) fills an empty grid with shuffled
candidate order, then visits the 81 cells in random order and clears a cell
only when the puzzle still has exactly one solution.
"""

import logging
import random
from typing import Callable, Generator, List, Optional, Sequence, Tuple

from grid import (
    InvalidGridError,
    validate_grid,
    is_valid_in,
    candidates_in,
    empty_grid,
    clone_grid,
)
from algorithms.step import (
    SudokuStep,
    NO_POSITION,
    STEP_TRY,
    STEP_PLACE,
    STEP_BACKTRACK,
    freeze_grid,
)

logger = logging.getLogger(__name__)

REMOVAL_TARGETS = {
    "easy":   40,
    "medium": 50,
    "hard":   60,
}

Cell = Tuple[int, int]


# ---------------------------------------------------------------------------
# Cancellation token
# ---------------------------------------------------------------------------
class CancelToken:
    """One per solve run.  Once cancelled it stays cancelled."""

    __slots__ = ("_cancelled",)

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


# ---------------------------------------------------------------------------
# Grid-level search helpers
# ---------------------------------------------------------------------------
def most_constrained_cell(grid: Sequence[Sequence[int]]) -> Optional[Tuple[int, int, List[int]]]:
    """
    (row, col, candidates) of the empty cell with the fewest candidates,
    first in row-major order on ties.  A cell with no candidate is returned
    as soon as it is seen.  None when the grid is full.
    """
    best = None
    for r in range(9):
        for c in range(9):
            if grid[r][c] != 0:
                continue
            cands = candidates_in(grid, r, c)
            if not cands:
                return r, c, cands
            if best is None or len(cands) < len(best[2]):
                best = (r, c, cands)
    return best


def count_solutions(grid: Sequence[Sequence[int]], limit: int = 2) -> int:
    """
    Count solutions of `grid` with an independent backtracking search,
    stopping as soon as `limit` solutions have been seen.  The input is
    not modified.
    """
    work = clone_grid(grid)
    count = 0

    def search() -> bool:
        nonlocal count
        cell = most_constrained_cell(work)
        if cell is None:
            count += 1
            return count >= limit
        row, col, cands = cell
        for value in cands:
            work[row][col] = value
            if search():
                return True
        work[row][col] = 0
        return False

    search()
    return count


def has_unique_solution(grid: Sequence[Sequence[int]]) -> bool:
    return count_solutions(grid, limit=2) == 1


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------
class SudokuSolver:
    """
    Attributes:
        grid  : The 9×9 working grid (owned).
        steps : Log of every step emitted by the current / last run.
        rng   : Random source for puzzle generation.
    """

    def __init__(self, initial_grid: Optional[Sequence[Sequence[int]]] = None, rng: Optional[random.Random] = None):
        # raises InvalidGridError before any solving state exists
        self.grid: List[List[int]] = validate_grid(initial_grid) if initial_grid is not None else empty_grid()
        self.steps: List[SudokuStep] = []
        self.rng = rng or random.Random()
        self._token: Optional[CancelToken] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def solving(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def stop(self) -> None:
        if self._token is not None:
            self._token.cancel()

    def get_grid(self) -> List[List[int]]:
        return clone_grid(self.grid)

    def set_grid(self, new_grid: Sequence[Sequence[int]]) -> None:
        if self.solving:
            raise RuntimeError("Cannot replace the grid while solving")
        self.grid  = validate_grid(new_grid)
        self.steps = []

    def get_steps(self) -> List[SudokuStep]:
        return list(self.steps)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_valid(self, row: int, col: int, value: int) -> bool:
        if self.grid[row][col] not in (0, value):
            return False
        return is_valid_in(self.grid, row, col, value)

    def candidates(self, row: int, col: int) -> List[int]:
        return candidates_in(self.grid, row, col)

    def find_empty_cell(self) -> Optional[Cell]:
        cell = most_constrained_cell(self.grid)
        return (cell[0], cell[1]) if cell else None

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def solve_steps(self) -> Generator[SudokuStep, None, bool]:
        """
        Lazy step sequence of one solve run.  The generator's return value
        is True when a solution was reached and the run was not cancelled.
        """
        if self.solving:
            return False
        token = CancelToken()
        self._token = token
        self.steps  = []
        logger.debug("sudoku solve started with %d empty cells", sum(r.count(0) for r in self.grid))

        try:
            success = yield from self._solve_cell(token)
            if success and not token.cancelled:
                final = SudokuStep(
                    position=NO_POSITION,
                    value=-1,
                    type=STEP_PLACE,
                    description="Solution found!",
                    grid=freeze_grid(self.grid),
                )
                self.steps.append(final)
                yield final
            return success and not token.cancelled
        finally:
            if self._token is token:
                self._token = None
            logger.debug("sudoku solve finished after %d steps", len(self.steps))

    def solve(self, on_step: Optional[Callable[[SudokuStep], None]] = None) -> bool:
        """Drain solve_steps() synchronously; on_step sees every step."""
        gen = self.solve_steps()
        while True:
            try:
                step = next(gen)
            except StopIteration as done:
                return bool(done.value)
            if on_step is not None:
                on_step(step)

    def _solve_cell(self, token: CancelToken) -> Generator[SudokuStep, None, bool]:
        if token.cancelled:
            return False

        cell = self.find_empty_cell()
        if cell is None:
            return True
        row, col = cell

        for num in self.candidates(row, col):
            if token.cancelled:
                return False
            yield self._record(row, col, num, STEP_TRY, f"Trying {num} at position ({row + 1}, {col + 1})")
            if token.cancelled:
                return False

            self.grid[row][col] = num
            yield self._record(row, col, num, STEP_PLACE, f"Placed {num} at position ({row + 1}, {col + 1})")

            solved = yield from self._solve_cell(token)
            if solved:
                return True
            if token.cancelled:
                return False

            self.grid[row][col] = 0
            yield self._record(
                row, col, num, STEP_BACKTRACK,
                f"Backtracking: removing {num} from position ({row + 1}, {col + 1})",
            )

        return False

    def _record(self, row: int, col: int, value: int, step_type: str, description: str) -> SudokuStep:
        step = SudokuStep(
            position=(row, col),
            value=value,
            type=step_type,
            description=description,
            grid=freeze_grid(self.grid),
        )
        self.steps.append(step)
        return step

    # ------------------------------------------------------------------
    # Puzzle generation
    # ------------------------------------------------------------------
    def generate_puzzle(self, difficulty: str = "medium") -> List[List[int]]:
        if difficulty not in REMOVAL_TARGETS:
            raise ValueError(f"Unknown difficulty: {difficulty}")
        if self.solving:
            raise RuntimeError("Cannot generate a puzzle while solving")

        self.grid  = empty_grid()
        self.steps = []
        self._fill_grid()

        target = REMOVAL_TARGETS[difficulty]
        positions = [(i // 9, i % 9) for i in range(81)]
        self.rng.shuffle(positions)

        removed = 0
        for row, col in positions:
            if removed >= target:
                break
            kept = self.grid[row][col]
            self.grid[row][col] = 0
            if has_unique_solution(self.grid):
                removed += 1
            else:
                self.grid[row][col] = kept

        logger.debug("generated %s puzzle with %d cells removed", difficulty, removed)
        return self.get_grid()

    def _fill_grid(self) -> bool:
        cell = self.find_empty_cell()
        if cell is None:
            return True
        row, col = cell
        digits = list(range(1, 10))
        self.rng.shuffle(digits)

        for num in digits:
            if is_valid_in(self.grid, row, col, num):
                self.grid[row][col] = num
                if self._fill_grid():
                    return True
                self.grid[row][col] = 0
        return False


__all__ = [
    "SudokuSolver",
    "CancelToken",
    "InvalidGridError",
    "REMOVAL_TARGETS",
    "count_solutions",
    "has_unique_solution",
    "most_constrained_cell",
]

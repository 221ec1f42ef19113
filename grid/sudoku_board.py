"""
sudoku_board.py — 9×9 Sudoku Board
===================================
Digits 0-9 (0 = empty) plus a same-shape "given" mask marking cells that
came from puzzle generation and are immutable for the player.

The module-level helpers work on plain list-of-lists grids so the solver,
the recognition service and the board share one set of legality rules.
"""

from typing import List, Optional, Sequence

from grid.errors import InvalidGridError

SIZE = 9
BOX = 3
DIGITS = range(1, SIZE + 1)

Rows = List[List[int]]


# ---------------------------------------------------------------------------
# Plain-grid helpers
# ---------------------------------------------------------------------------
def empty_grid() -> Rows:
    return [[0] * SIZE for _ in range(SIZE)]


def clone_grid(grid: Sequence[Sequence[int]]) -> Rows:
    return [list(row) for row in grid]


def is_valid_in(grid: Sequence[Sequence[int]], row: int, col: int, value: int) -> bool:
    """True if `value` appears nowhere else in the row, column or 3×3 box."""
    for x in range(SIZE):
        if x != col and grid[row][x] == value:
            return False
    for x in range(SIZE):
        if x != row and grid[x][col] == value:
            return False
    box_row = (row // BOX) * BOX
    box_col = (col // BOX) * BOX
    for r in range(box_row, box_row + BOX):
        for c in range(box_col, box_col + BOX):
            if (r != row or c != col) and grid[r][c] == value:
                return False
    return True


def candidates_in(grid: Sequence[Sequence[int]], row: int, col: int) -> List[int]:
    """Sorted legal digits for an empty cell; [] for a filled one."""
    if grid[row][col] != 0:
        return []
    return [v for v in DIGITS if is_valid_in(grid, row, col, v)]


def validate_grid(grid) -> Rows:
    """
    Check shape (9×9), range (0-9 integers) and uniqueness of every filled
    cell.  Returns a clean copy; raises InvalidGridError on the first violation.
    """
    if not isinstance(grid, (list, tuple)) or len(grid) != SIZE:
        raise InvalidGridError("Grid must have exactly 9 rows")
    rows: Rows = []
    for r, row in enumerate(grid):
        if not isinstance(row, (list, tuple)) or len(row) != SIZE:
            raise InvalidGridError(f"Row {r + 1} must have exactly 9 cells", row=r)
        clean = []
        for c, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= SIZE:
                raise InvalidGridError(
                    f"Cell ({r + 1}, {c + 1}) holds {value!r}; expected an integer 0-9",
                    row=r, col=c,
                )
            clean.append(value)
        rows.append(clean)

    for r in range(SIZE):
        for c in range(SIZE):
            v = rows[r][c]
            if v and not is_valid_in(rows, r, c, v):
                raise InvalidGridError(
                    f"Duplicate {v} at ({r + 1}, {c + 1}) in its row, column or box",
                    row=r, col=c,
                )
    return rows


def is_valid_grid(grid) -> bool:
    try:
        validate_grid(grid)
    except InvalidGridError:
        return False
    return True


def is_solved(grid: Sequence[Sequence[int]]) -> bool:
    """Every row, column and box is a permutation of 1-9."""
    full = set(DIGITS)
    for i in range(SIZE):
        if set(grid[i]) != full:
            return False
        if {grid[r][i] for r in range(SIZE)} != full:
            return False
    for br in range(0, SIZE, BOX):
        for bc in range(0, SIZE, BOX):
            box = {grid[r][c] for r in range(br, br + BOX) for c in range(bc, bc + BOX)}
            if box != full:
                return False
    return True


# ---------------------------------------------------------------------------
# SudokuBoard
# ---------------------------------------------------------------------------
class SudokuBoard:
    """
    Attributes:
        cells  : 9×9 digits, 0 = empty.
        givens : 9×9 bools, True for puzzle givens.
    """

    def __init__(self, cells: Optional[Sequence[Sequence[int]]] = None, givens=None):
        self.cells: Rows = validate_grid(cells) if cells is not None else empty_grid()
        if givens is None:
            self.givens: List[List[bool]] = [[False] * SIZE for _ in range(SIZE)]
        else:
            self.givens = [list(map(bool, row)) for row in givens]

    @classmethod
    def from_puzzle(cls, cells: Sequence[Sequence[int]]) -> "SudokuBoard":
        """Every filled cell of a fresh puzzle is a given."""
        board = cls(cells)
        board.mark_givens()
        return board

    # -- queries --
    def value(self, row: int, col: int) -> int:
        return self.cells[row][col]

    def is_given(self, row: int, col: int) -> bool:
        return self.givens[row][col]

    def is_valid(self, row: int, col: int, value: int) -> bool:
        return is_valid_in(self.cells, row, col, value)

    def candidates(self, row: int, col: int) -> List[int]:
        if self.givens[row][col]:
            return []
        return candidates_in(self.cells, row, col)

    def conflicts(self) -> List[List[bool]]:
        """Non-given filled cells whose digit clashes with its row, column or box."""
        mask = [[False] * SIZE for _ in range(SIZE)]
        for r in range(SIZE):
            for c in range(SIZE):
                v = self.cells[r][c]
                if v and not self.givens[r][c]:
                    mask[r][c] = not is_valid_in(self.cells, r, c, v)
        return mask

    def empty_count(self) -> int:
        return sum(1 for row in self.cells for v in row if v == 0)

    def given_count(self) -> int:
        return sum(1 for row in self.givens for g in row if g)

    # -- mutation --
    def enter(self, row: int, col: int, value: int) -> bool:
        """
        Player input.  Conflicting digits are accepted (and reported by
        conflicts()); givens and out-of-range values are refused.
        """
        if not (0 <= row < SIZE and 0 <= col < SIZE) or not 0 <= value <= SIZE:
            return False
        if self.givens[row][col]:
            return False
        self.cells[row][col] = value
        return True

    def load(self, cells: Sequence[Sequence[int]]) -> None:
        """Replace digits (e.g. from a solver snapshot), keep the givens mask."""
        self.cells = clone_grid(cells)

    def mark_givens(self) -> None:
        self.givens = [[v != 0 for v in row] for row in self.cells]

    def copy(self) -> "SudokuBoard":
        board = SudokuBoard.__new__(SudokuBoard)
        board.cells  = clone_grid(self.cells)
        board.givens = [list(row) for row in self.givens]
        return board

    def to_dict(self) -> dict:
        return {
            "cells":     clone_grid(self.cells),
            "givens":    [list(row) for row in self.givens],
            "conflicts": self.conflicts(),
        }

    def __repr__(self) -> str:
        return f"SudokuBoard(givens={self.given_count()}, empty={self.empty_count()})"

"""
step.py — Algorithm Step Snapshots
===================================
Every algorithm in the visualizer produces a lazy sequence of steps.
A step is a frozen-in-time picture of everything the UI needs to render
one frame and to append one line to a replay log.

    • SortStep    – full array + which indices are compared / written
    • PathStep    – one node visited / one path node drawn / done
    • SudokuStep  – one try / place / backtrack with a grid snapshot

Design decisions:
  - Steps are frozen dataclasses holding tuples, never the live model.
    The algorithm generator is the only writer; the playback driver and
    the renderer are pure readers.
  - Every family has an unambiguous terminal step so the driver can
    tell "done" apart from "more to come" without peeking ahead.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


Position = Tuple[int, int]

NO_POSITION: Position = (-1, -1)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SortStep:
    """
    Attributes:
        array             : Full sequence state at this instant.
        comparing_indices : Positions under comparison (0, 1, 2 or 3 entries).
        swapped_indices   : Positions just exchanged / written.
        description       : Human-readable label.

    Exactly one of the two index tuples is non-empty, except on the final
    step where both are empty.
    """

    array:             Tuple[float, ...]
    comparing_indices: Tuple[int, ...] = ()
    swapped_indices:   Tuple[int, ...] = ()
    description:       str             = ""

    @property
    def is_final(self) -> bool:
        return not self.comparing_indices and not self.swapped_indices

    @property
    def is_comparison(self) -> bool:
        return bool(self.comparing_indices)

    @property
    def is_swap(self) -> bool:
        return bool(self.swapped_indices)


def compare_step(arr, *indices: int, description: str) -> SortStep:
    return SortStep(array=tuple(arr), comparing_indices=tuple(indices), description=description)


def swap_step(arr, *indices: int, description: str) -> SortStep:
    return SortStep(array=tuple(arr), swapped_indices=tuple(indices), description=description)


def sorted_step(arr) -> SortStep:
    return SortStep(array=tuple(arr), description="Array is now sorted!")


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
PATH_VISIT = "visit"
PATH_CLEAR = "clear"
PATH_DRAW  = "path"
PATH_DONE  = "done"


@dataclass(frozen=True)
class PathStep:
    """
    Attributes:
        kind        : "visit" | "clear" | "path" | "done".
        position    : (row, col) of the node acted on, NO_POSITION otherwise.
        description : Human-readable label.
        found       : Only meaningful on the "done" step.
    """

    kind:        str
    position:    Position = NO_POSITION
    description: str      = ""
    found:       bool     = False

    @property
    def is_final(self) -> bool:
        return self.kind == PATH_DONE


# ---------------------------------------------------------------------------
# Sudoku
# ---------------------------------------------------------------------------
STEP_TRY       = "try"
STEP_PLACE     = "place"
STEP_BACKTRACK = "backtrack"


@dataclass(frozen=True)
class SudokuStep:
    """
    Attributes:
        position    : (row, col) acted on, or NO_POSITION for the terminal step.
        value       : Digit involved, or -1 on the terminal step.
        type        : "try" | "place" | "backtrack".
        description : Human-readable label (1-based coordinates).
        grid        : 9x9 snapshot as a tuple of row tuples.
    """

    position:    Position
    value:       int
    type:        str
    description: str
    grid:        Tuple[Tuple[int, ...], ...] = field(default_factory=tuple)

    @property
    def is_final(self) -> bool:
        return self.position == NO_POSITION

    def grid_rows(self) -> list:
        """Mutable copy of the snapshot."""
        return [list(r) for r in self.grid]


def freeze_grid(rows) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(r) for r in rows)


__all__ = [
    "Position",
    "NO_POSITION",
    "SortStep",
    "PathStep",
    "SudokuStep",
    "compare_step",
    "swap_step",
    "sorted_step",
    "freeze_grid",
    "PATH_VISIT",
    "PATH_CLEAR",
    "PATH_DRAW",
    "PATH_DONE",
    "STEP_TRY",
    "STEP_PLACE",
    "STEP_BACKTRACK",
]

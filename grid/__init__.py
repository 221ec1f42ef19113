"""
grid/
-----
Model layer.  Public API:

    from grid import Grid, GridNode, NodeType
    from grid import SudokuBoard, InvalidGridError
"""

from grid.node   import GridNode, NodeType, INF
from grid.grid   import Grid, DEFAULT_ROWS, DEFAULT_COLS, WALL_PROBABILITY
from grid.errors import InvalidGridError
from grid.sudoku_board import (
    SudokuBoard,
    validate_grid,
    is_valid_grid,
    is_valid_in,
    candidates_in,
    is_solved,
    empty_grid,
    clone_grid,
)

__all__ = [
    "GridNode",  "NodeType", "INF",
    "Grid",      "DEFAULT_ROWS", "DEFAULT_COLS", "WALL_PROBABILITY",
    "InvalidGridError",
    "SudokuBoard",
    "validate_grid",
    "is_valid_grid",
    "is_valid_in",
    "candidates_in",
    "is_solved",
    "empty_grid",
    "clone_grid",
]

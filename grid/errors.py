"""
Model configuration errors.
"""


class InvalidGridError(ValueError):
    """
    Raised when a Sudoku grid breaks the shape, range or uniqueness rules.
    Solvers refuse such grids at construction, before any step is emitted.
    """

    def __init__(self, message: str, *, row: int = -1, col: int = -1):
        super().__init__(message)
        self.row = row
        self.col = col

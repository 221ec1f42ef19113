"""
ui/
---
Presentation layer.

    from ui import render_bars, render_grid, render_sudoku
    from ui import playback_controls, metrics_panel, …
"""

from ui.canvas import render_bars, render_grid, render_sudoku, CanvasConfig

from ui.controls import (
    algorithm_selector,
    playback_controls,
    sorting_controls,
    grid_controls,
    sudoku_controls,
    status_line,
    metrics_panel,
    analysis_panel,
)

__all__ = [
    "render_bars",
    "render_grid",
    "render_sudoku",
    "CanvasConfig",
    "algorithm_selector",
    "playback_controls",
    "sorting_controls",
    "grid_controls",
    "sudoku_controls",
    "status_line",
    "metrics_panel",
    "analysis_panel",
]

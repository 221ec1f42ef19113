"""
canvas.py — SVG Renderers
==========================
Pure rendering functions: model (+ current step) → SVG string.

    render_bars(array, step)              sorting bars
    render_grid(grid)                     pathfinding grid
    render_sudoku(board, highlight, …)    9×9 board

Design decisions:
  - NO mutation.  Every function is stateless; the caller passes in
    everything it needs and gets back a string.
  - Coloring is a dict lookup: role / NodeType value / step type → hex.
  - Cells carry data-row / data-col so the page script can map clicks
    back to model coordinates without any geometry.
"""

from typing import Dict, Optional, Sequence, Tuple

from algorithms.step import SortStep
from grid import Grid, SudokuBoard


# ---------------------------------------------------------------------------
# Visual Config: color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    bg:     str = "#0d1117"

    # sorting
    bars_width:   int = 900
    bars_height:  int = 420
    bar_gap:      int = 2
    bar_colors: Dict[str, str] = {
        "default":   "#0ea5e9",   # cyan
        "comparing": "#facc15",   # yellow
        "swapped":   "#ef4444",   # red
        "sorted":    "#10b981",   # emerald
    }

    # pathfinding (NodeType value → fill)
    cell_size:    int = 18
    cell_stroke:  str = "#21262d"
    node_colors: Dict[str, str] = {
        "empty":   "#161b22",
        "wall":    "#6b7280",
        "source":  "#0ea5e9",
        "target":  "#ec4899",
        "visited": "#06b6d4",
        "path":    "#facc15",
    }

    # sudoku
    sudoku_cell:        int = 48
    sudoku_text:        str = "#e6edf3"
    sudoku_given_text:  str = "#7d8590"
    sudoku_conflict:    str = "#7f1d1d"
    sudoku_selected:    str = "#1e3a5f"
    sudoku_thin_line:   str = "#30363d"
    sudoku_thick_line:  str = "#e6edf3"
    sudoku_highlight: Dict[str, str] = {
        "try":       "#854d0e",   # amber
        "place":     "#065f46",   # green
        "backtrack": "#7f1d1d",   # red
    }


CONFIG = CanvasConfig()


def _svg_open(width: int, height: int, config: CanvasConfig, css_class: str) -> str:
    return (
        f'<svg class="{css_class}" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
    )


# ---------------------------------------------------------------------------
# Sorting bars
# ---------------------------------------------------------------------------
def render_bars(
    array: Sequence[float],
    step: Optional[SortStep] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    One bar per element, height proportional to value.  Bars under
    comparison or just written are colored from `step`; on the final
    step every bar is shown as sorted.
    """
    width, height = config.bars_width, config.bars_height
    parts = [_svg_open(width, height, config, "bars")]

    n = len(array)
    if n:
        peak = max(max(array), 1)
        bar_w = max(1.0, width / n - config.bar_gap)
        comparing = set(step.comparing_indices) if step else set()
        swapped   = set(step.swapped_indices) if step else set()
        done      = bool(step and step.is_final)

        for i, value in enumerate(array):
            if done:
                color = config.bar_colors["sorted"]
            elif i in swapped:
                color = config.bar_colors["swapped"]
            elif i in comparing:
                color = config.bar_colors["comparing"]
            else:
                color = config.bar_colors["default"]
            h = max(1.0, value / peak * (height - 10))
            x = i * (bar_w + config.bar_gap)
            parts.append(
                f'<rect class="bar" data-index="{i}" x="{x:.1f}" y="{height - h:.1f}" '
                f'width="{bar_w:.1f}" height="{h:.1f}" fill="{color}" rx="1"/>'
            )

    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Pathfinding grid
# ---------------------------------------------------------------------------
def render_grid(grid: Grid, config: CanvasConfig = CONFIG) -> str:
    size = config.cell_size
    width, height = grid.cols * size, grid.rows * size
    parts = [_svg_open(width, height, config, "grid")]

    for node in grid.all_nodes():
        fill = config.node_colors.get(node.type.value, config.node_colors["empty"])
        parts.append(
            f'<rect class="cell {node.type.value}" data-row="{node.row}" data-col="{node.col}" '
            f'x="{node.col * size}" y="{node.row * size}" width="{size}" height="{size}" '
            f'fill="{fill}" stroke="{config.cell_stroke}" stroke-width="1"/>'
        )

    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Sudoku board
# ---------------------------------------------------------------------------
def render_sudoku(
    board: SudokuBoard,
    highlight: Optional[Tuple[Tuple[int, int], str]] = None,
    selected: Optional[Tuple[int, int]] = None,
    show_conflicts: bool = False,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Args:
        board          : Board to draw.
        highlight      : ((row, col), step type) of the solver's current cell.
        selected       : Player's selected cell.
        show_conflicts : Play mode: tint player digits that break a rule.
    """
    cell = config.sudoku_cell
    side = cell * 9
    parts = [_svg_open(side, side, config, "sudoku")]
    conflicts = board.conflicts() if show_conflicts else None

    for r in range(9):
        for c in range(9):
            fill = config.bg
            if conflicts and conflicts[r][c]:
                fill = config.sudoku_conflict
            if selected == (r, c):
                fill = config.sudoku_selected
            if highlight and highlight[0] == (r, c):
                fill = config.sudoku_highlight.get(highlight[1], fill)

            x, y = c * cell, r * cell
            parts.append(
                f'<rect class="cell" data-row="{r}" data-col="{c}" x="{x}" y="{y}" '
                f'width="{cell}" height="{cell}" fill="{fill}" '
                f'stroke="{config.sudoku_thin_line}" stroke-width="1"/>'
            )
            value = board.value(r, c)
            if value:
                color  = config.sudoku_given_text if board.is_given(r, c) else config.sudoku_text
                weight = "700" if board.is_given(r, c) else "500"
                parts.append(
                    f'<text x="{x + cell / 2}" y="{y + cell / 2 + 7}" text-anchor="middle" '
                    f'font-size="22" font-family="\'DM Sans\', sans-serif" font-weight="{weight}" '
                    f'fill="{color}" pointer-events="none">{value}</text>'
                )

    # 3×3 box borders
    for k in range(0, 10, 3):
        pos = k * cell
        parts.append(f'<line x1="{pos}" y1="0" x2="{pos}" y2="{side}" stroke="{config.sudoku_thick_line}" stroke-width="3"/>')
        parts.append(f'<line x1="0" y1="{pos}" x2="{side}" y2="{pos}" stroke="{config.sudoku_thick_line}" stroke-width="3"/>')

    parts.append("</svg>")
    return "\n".join(parts)

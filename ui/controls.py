"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • algorithm_selector   – dropdown over one kind of registered algorithm
  • playback_controls    – start / stop / reset + speed slider
  • sorting_controls     – array size + new array
  • grid_controls        – maze / clear path / reset grid
  • sudoku_controls      – difficulty, generate, play mode, hint, image upload
  • metrics_panel        – metrics card of the last completed run
  • analysis_panel       – AI narration (or its degraded placeholder)
  • status_line          – status + step description

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from html import escape
from typing import Any, Dict, List, Optional

from algorithms import AlgoInfo


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(kind: str, algorithms: List[AlgoInfo], selected_key: str) -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="{kind}-algo" data-kind="{kind}">
        {''.join(options)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    kind: str,
    running: bool = False,
    speed: float = 50,
    speed_min: float = 0,
    speed_max: float = 200,
    speed_unit: str = "%",
) -> str:
    disabled = 'disabled' if running else ''
    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="{kind}-start" class="btn-primary" {disabled}>▶ Start</button>
        <button id="{kind}-stop" {'' if running else 'disabled'}>■ Stop</button>
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <input type="range" id="{kind}-speed" min="{speed_min}" max="{speed_max}" value="{speed:g}">
        <span id="{kind}-speed-val">{speed:g}{speed_unit}</span>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Per-visualizer controls
# ---------------------------------------------------------------------------
def sorting_controls(size: int, running: bool = False, min_size: int = 5, max_size: int = 100) -> str:
    disabled = 'disabled' if running else ''
    return f"""
    <div class="panel sorting-controls">
      <h3>📶 Array</h3>
      <label>Size: <input type="range" id="sorting-size" min="{min_size}" max="{max_size}" value="{size}">
             <span id="sorting-size-val">{size}</span></label>
      <button id="sorting-new" class="btn-secondary" {disabled}>New Array</button>
    </div>
    """


def grid_controls(running: bool = False) -> str:
    disabled = 'disabled' if running else ''
    return f"""
    <div class="panel grid-controls">
      <h3>🧱 Grid</h3>
      <p class="hint">Click to place the source, then the target, then walls.
         Click an endpoint to remove it.</p>
      <button id="path-maze" class="btn-secondary" {disabled}>Generate Maze</button>
      <button id="path-clear" class="btn-secondary" {disabled}>Clear Path</button>
      <button id="path-reset" class="btn-secondary">Reset Grid</button>
    </div>
    """


def sudoku_controls(
    difficulties: List[str],
    difficulty: str = "medium",
    play_mode: bool = False,
    running: bool = False,
    ai_enabled: bool = False,
) -> str:
    disabled = 'disabled' if running else ''
    options = "".join(
        f'<option value="{d}" {"selected" if d == difficulty else ""}>{d.capitalize()}</option>'
        for d in difficulties
    )
    ai_disabled = '' if ai_enabled and not running else 'disabled'
    digits = "".join(f'<button class="digit" data-value="{d}" {disabled}>{d or "⌫"}</button>' for d in range(10))
    return f"""
    <div class="panel sudoku-controls">
      <h3>🔢 Puzzle</h3>
      <label>Difficulty:
        <select id="sudoku-difficulty">{options}</select>
      </label>
      <button id="sudoku-generate" class="btn-secondary" {disabled}>Generate Puzzle</button>
      <button id="sudoku-clear" class="btn-secondary">Clear</button>
      <label><input type="checkbox" id="sudoku-play" {'checked' if play_mode else ''}> Play Mode</label>
      <div class="digit-row">{digits}</div>
      <button id="sudoku-hint" class="btn-secondary" {ai_disabled}>💡 Hint</button>
      <label class="upload">📷 Load from image
        <input type="file" id="sudoku-image" accept="image/*" {ai_disabled}>
      </label>
    </div>
    """


# ---------------------------------------------------------------------------
# Status / metrics / analysis
# ---------------------------------------------------------------------------
def status_line(status: str, message: str = "") -> str:
    return f"""<div class="status-line status-{status}"><strong>{escape(status)}</strong> {escape(message)}</div>"""


METRIC_LABELS: Dict[str, str] = {
    "algorithm":         "Algorithm",
    "array_size":        "Array Size",
    "comparisons":       "Comparisons",
    "swaps":             "Swaps",
    "total_steps":       "Total Steps",
    "total_nodes":       "Total Nodes",
    "wall_nodes":        "Walls",
    "visited_nodes":     "Nodes Visited",
    "path_length":       "Path Length",
    "path_found":        "Path",
    "search_time_ms":    "Search Time",
    "difficulty":        "Puzzle",
    "empty_cells":       "Empty Cells",
    "tries":             "Tries",
    "placements":        "Placements",
    "backtracks":        "Backtracks",
    "solved":            "Solved",
    "execution_time_ms": "Time",
}


def _format_metric(key: str, value: Any) -> str:
    if key == "path_found":
        return "✅ Found" if value else "❌ Not Found"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if key.endswith("_ms"):
        return f"{value:.2f} ms"
    return escape(str(value))


def metrics_panel(metrics: Optional[Dict[str, Any]] = None) -> str:
    if not metrics:
        return """
        <div class="panel metrics-panel">
          <h3>📊 Metrics</h3>
          <p class="placeholder">Run an algorithm to see metrics.</p>
        </div>
        """

    rows = [
        f"<tr><td>{METRIC_LABELS.get(k, k)}:</td><td><strong>{_format_metric(k, v)}</strong></td></tr>"
        for k, v in metrics.items()
    ]
    return f"""
    <div class="panel metrics-panel">
      <h3>📊 Metrics</h3>
      <table>
        {''.join(rows)}
      </table>
    </div>
    """


def analysis_panel(analysis: Optional[Dict[str, Any]] = None, ai_enabled: bool = True, kind: str = "") -> str:
    button = f'<button id="{kind}-analyze" class="btn-secondary" {"" if ai_enabled else "disabled"}>🤖 AI Analysis</button>'
    if not analysis:
        note = "Complete a run, then ask for an AI analysis." if ai_enabled else "AI features are disabled."
        return f"""
        <div class="panel analysis-panel">
          <h3>🤖 Analysis</h3>
          <p class="placeholder">{note}</p>
          {button}
        </div>
        """

    css = "degraded" if analysis.get("degraded") else ""
    sections = "".join(
        f"<h4>{escape(s['heading'])}</h4><p>{escape(s['body'])}</p>"
        for s in analysis.get("detail_sections", [])
    )
    return f"""
    <div class="panel analysis-panel {css}">
      <h3>🤖 Analysis</h3>
      <p class="summary">{escape(analysis.get('summary_text', ''))}</p>
      {sections}
      {button}
    </div>
    """

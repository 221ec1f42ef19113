"""
main.py — Algorithm Visualizer Flask App
==========================================
The web server that powers the three visualizers.

Routes:
  GET  /                              – main UI (three tabs)
  GET  /api/algorithms                – registry cards
  GET  /api/<kind>/state              – fire due playback ticks, return state
  POST /api/<kind>/start              – start a run
  POST /api/<kind>/stop               – stop the active run
  POST /api/<kind>/speed              – change playback speed
  POST /api/<kind>/analyze            – AI narration of the last completed run
  POST /api/<kind>/algorithm          – select algorithm (sorting, pathfinding)
  POST /api/sorting/new_array         – fresh random array
  POST /api/sorting/size              – resize (and regenerate) the array
  POST /api/pathfinding/click         – source / target / wall editing
  POST /api/pathfinding/wall          – drag-toggle a wall
  POST /api/pathfinding/maze          – random maze
  POST /api/pathfinding/clear         – clear the explored nodes and path
  POST /api/pathfinding/reset         – empty grid
  POST /api/sudoku/generate           – new puzzle of a difficulty
  POST /api/sudoku/clear              – empty board
  POST /api/sudoku/load               – custom puzzle from a 9×9 JSON grid
  POST /api/sudoku/select             – select a cell
  POST /api/sudoku/enter              – player digit (0 clears)
  POST /api/sudoku/play               – toggle play mode
  GET  /api/sudoku/candidates         – legal digits of a cell
  POST /api/sudoku/hint               – AI hint for the selected cell
  POST /api/sudoku/recognize          – load a puzzle from an uploaded image

State management:
  Each browser gets a random id in the Flask session cookie.  The id
  keys an in-memory Workspace holding one TickScheduler and the three
  visualizer sessions.  Playback advances when the browser polls
  /api/<kind>/state: the poll runs every callback that fell due.
  Requests hold the workspace lock, except while waiting on the AI
  service: hint, analysis and recognition release it for that call.
"""

from collections import OrderedDict
from contextlib import contextmanager
from functools import wraps
import logging
import math
import secrets
import sys
import os
import threading
import time
from typing import Callable, Optional

from flask import Flask, render_template_string, request, jsonify, session, g

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import AppConfig, load_config
from algorithms import list_algorithms, SORTING, PATHFINDING
from algorithms.sudoku_solver import REMOVAL_TARGETS
from engine import TickScheduler, SortingSession, PathfindingSession, SudokuSession
from engine.playback import SORT_SPEED_MIN, SORT_SPEED_MAX
from engine.sessions import MIN_ARRAY_SIZE, MAX_ARRAY_SIZE
from services import GeminiClient, Narrator, GridRecognizer
from ui import (
    render_bars,
    render_grid,
    render_sudoku,
    algorithm_selector,
    playback_controls,
    sorting_controls,
    grid_controls,
    sudoku_controls,
    status_line,
    metrics_panel,
    analysis_panel,
)

logger = logging.getLogger(__name__)

KINDS = ("sorting", "pathfinding", "sudoku")
MAX_WORKSPACES = 256


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Per-browser workspace
# ---------------------------------------------------------------------------
class Workspace:
    """One scheduler + the three visualizer sessions of one browser."""

    def __init__(self, config: AppConfig, narrator: Optional[Narrator], recognizer: Optional[GridRecognizer],
                 clock: Callable[[], float] = time.monotonic):
        self.lock        = threading.Lock()
        self.scheduler   = TickScheduler(clock)
        self.sorting     = SortingSession(config, self.scheduler, narrator)
        self.pathfinding = PathfindingSession(config, self.scheduler, narrator)
        self.sudoku      = SudokuSession(config, self.scheduler, narrator, recognizer=recognizer)

    def get(self, kind: str):
        return getattr(self, kind)

    def close(self) -> None:
        for kind in KINDS:
            self.get(kind).close()
        self.scheduler.cancel_all()


class WorkspaceStore:
    """Bounded LRU of workspaces; the evicted one is closed."""

    def __init__(self, factory: Callable[[], Workspace], capacity: int = MAX_WORKSPACES):
        self._factory  = factory
        self._capacity = capacity
        self._items: "OrderedDict[str, Workspace]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, sid: str) -> Workspace:
        with self._lock:
            ws = self._items.get(sid)
            if ws is None:
                ws = self._factory()
                self._items[sid] = ws
                logger.debug("workspace created (%d live)", len(self._items))
                while len(self._items) > self._capacity:
                    _, old = self._items.popitem(last=False)
                    old.close()
            else:
                self._items.move_to_end(sid)
            return ws

    def __len__(self) -> int:
        return len(self._items)


@contextmanager
def unlocked(lock):
    """Release a held workspace lock around a slow collaborator call."""
    lock.release()
    try:
        yield
    finally:
        lock.acquire()


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------
def render_view(kind: str, sess) -> str:
    if kind == "sorting":
        return render_bars(sess.array, sess.current_step)
    if kind == "pathfinding":
        return render_grid(sess.grid)
    return render_sudoku(sess.board, sess.highlight, sess.selected, show_conflicts=sess.play_mode)


def payload(kind: str, sess, ai_enabled: bool) -> dict:
    state = sess.to_dict()
    return {
        "state":    state,
        "running":  sess.running,
        "svg":      render_view(kind, sess),
        "status":   status_line(state["status"], state["message"]),
        "metrics":  metrics_panel(state["metrics"]),
        "analysis": analysis_panel(state["analysis"], ai_enabled=ai_enabled, kind=kind),
    }


def _int_arg(data: dict, name: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"'{name}' is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be an integer") from None


def _num_arg(data: dict, name: str) -> float:
    value = data.get(name)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"'{name}' is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be a number") from None
    if not math.isfinite(number):
        raise ValueError(f"'{name}' must be finite")
    return number


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(
    config: Optional[AppConfig] = None,
    gemini: Optional[GeminiClient] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Flask:
    config = config or load_config()
    gemini = gemini or GeminiClient(config)
    narrator   = Narrator(gemini, timeout=config.narration_timeout)
    recognizer = GridRecognizer(gemini, timeout=config.recognition_timeout)
    ai_enabled = gemini.available

    app = Flask(__name__)
    app.secret_key = config.secret_key or secrets.token_hex(32)
    app.config["MAX_CONTENT_LENGTH"] = 8 * 1024 * 1024

    store = WorkspaceStore(lambda: Workspace(config, narrator, recognizer, clock))
    app.extensions["workspaces"] = store

    def current_workspace() -> Workspace:
        sid = session.get("sid")
        if not sid:
            sid = secrets.token_hex(16)
            session["sid"] = sid
        return store.get(sid)

    def with_session(view):
        """Resolve the <kind> session, hold its workspace lock, map bad input to 400."""
        @wraps(view)
        def wrapper(kind: str, **kwargs):
            if kind not in KINDS:
                return jsonify({"error": f"Unknown visualizer: {kind}"}), 404
            ws = current_workspace()
            g.workspace = ws
            with ws.lock:
                sess = ws.get(kind)
                try:
                    result = view(kind, sess, request.get_json(silent=True) or {}, **kwargs)
                except (ValueError, IndexError) as e:
                    logger.info("rejected %s request: %s", request.path, e)
                    return jsonify({"error": str(e)}), 400
                if result is None:
                    return jsonify(payload(kind, sess, ai_enabled))
                return result
        return wrapper

    def only(*kinds):
        def check(view):
            @wraps(view)
            def wrapper(kind, sess, data, **kwargs):
                if kind not in kinds:
                    return jsonify({"error": f"Not supported for {kind}"}), 400
                return view(kind, sess, data, **kwargs)
            return wrapper
        return check

    # -----------------------------------------------------------------------
    # Main UI Route
    # -----------------------------------------------------------------------
    @app.route("/")
    def index():
        ws = current_workspace()
        with ws.lock:
            sorting, pathfinding, sudoku = ws.sorting, ws.pathfinding, ws.sudoku
            html = render_template_string(
                INDEX_TEMPLATE,
                ai_enabled=ai_enabled,
                sorting_view=render_view("sorting", sorting),
                sorting_algo=algorithm_selector("sorting", list_algorithms(SORTING), sorting.algorithm),
                sorting_playback=playback_controls("sorting", sorting.running, sorting.speed,
                                                   SORT_SPEED_MIN, SORT_SPEED_MAX, "%"),
                sorting_controls=sorting_controls(sorting.size, sorting.running, MIN_ARRAY_SIZE, MAX_ARRAY_SIZE),
                pathfinding_view=render_view("pathfinding", pathfinding),
                pathfinding_algo=algorithm_selector("pathfinding", list_algorithms(PATHFINDING),
                                                    pathfinding.algorithm),
                pathfinding_playback=playback_controls("pathfinding", pathfinding.running,
                                                       pathfinding.driver.delay_ms, 0, 100, " ms"),
                pathfinding_controls=grid_controls(pathfinding.running),
                sudoku_view=render_view("sudoku", sudoku),
                sudoku_playback=playback_controls("sudoku", sudoku.running, sudoku.driver.delay_ms, 0, 500, " ms"),
                sudoku_controls=sudoku_controls(list(REMOVAL_TARGETS), sudoku.difficulty, sudoku.play_mode,
                                                sudoku.running, ai_enabled),
                metrics=metrics_panel(),
                analysis={k: analysis_panel(None, ai_enabled=ai_enabled, kind=k) for k in KINDS},
            )
        return html

    @app.route("/api/algorithms")
    def api_algorithms():
        return jsonify([a.to_dict() for a in list_algorithms()])

    # -----------------------------------------------------------------------
    # API: shared playback routes
    # -----------------------------------------------------------------------
    @app.route("/api/<kind>/state")
    @with_session
    def api_state(kind, sess, data):
        sess.tick()

    @app.route("/api/<kind>/start", methods=["POST"])
    @with_session
    def api_start(kind, sess, data):
        if not sess.start() and not sess.running:
            return jsonify({"error": sess.message or "Cannot start", **payload(kind, sess, ai_enabled)}), 400

    @app.route("/api/<kind>/stop", methods=["POST"])
    @with_session
    def api_stop(kind, sess, data):
        sess.stop()

    @app.route("/api/<kind>/speed", methods=["POST"])
    @with_session
    def api_speed(kind, sess, data):
        sess.set_speed(_num_arg(data, "speed"))

    @app.route("/api/<kind>/analyze", methods=["POST"])
    @with_session
    def api_analyze(kind, sess, data):
        pending = sess.begin_analysis()
        with unlocked(g.workspace.lock):
            narration = pending.run()
        sess.finish_analysis(pending, narration)

    @app.route("/api/<kind>/algorithm", methods=["POST"])
    @with_session
    @only("sorting", "pathfinding")
    def api_algorithm(kind, sess, data):
        sess.set_algorithm(str(data.get("key", "")))

    # -----------------------------------------------------------------------
    # API: sorting
    # -----------------------------------------------------------------------
    @app.route("/api/<kind>/new_array", methods=["POST"])
    @with_session
    @only("sorting")
    def api_new_array(kind, sess, data):
        sess.new_array()

    @app.route("/api/<kind>/size", methods=["POST"])
    @with_session
    @only("sorting")
    def api_size(kind, sess, data):
        sess.set_size(_int_arg(data, "size"))

    # -----------------------------------------------------------------------
    # API: pathfinding
    # -----------------------------------------------------------------------
    @app.route("/api/<kind>/click", methods=["POST"])
    @with_session
    @only("pathfinding")
    def api_click(kind, sess, data):
        sess.click(_int_arg(data, "row"), _int_arg(data, "col"))

    @app.route("/api/<kind>/wall", methods=["POST"])
    @with_session
    @only("pathfinding")
    def api_wall(kind, sess, data):
        sess.toggle_wall(_int_arg(data, "row"), _int_arg(data, "col"))

    @app.route("/api/<kind>/maze", methods=["POST"])
    @with_session
    @only("pathfinding")
    def api_maze(kind, sess, data):
        sess.generate_maze()

    @app.route("/api/<kind>/clear", methods=["POST"])
    @with_session
    @only("pathfinding", "sudoku")
    def api_clear(kind, sess, data):
        if kind == "pathfinding":
            sess.clear_path()
        else:
            sess.clear()

    @app.route("/api/<kind>/reset", methods=["POST"])
    @with_session
    @only("pathfinding")
    def api_reset(kind, sess, data):
        sess.reset_grid()

    # -----------------------------------------------------------------------
    # API: sudoku
    # -----------------------------------------------------------------------
    @app.route("/api/<kind>/generate", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_generate(kind, sess, data):
        if "difficulty" in data:
            sess.set_difficulty(str(data["difficulty"]))
        sess.generate()

    @app.route("/api/<kind>/load", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_load(kind, sess, data):
        grid = data.get("grid")
        if grid is None:
            raise ValueError("'grid' is required")
        sess.load_puzzle(grid)

    @app.route("/api/<kind>/select", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_select(kind, sess, data):
        sess.select(_int_arg(data, "row"), _int_arg(data, "col"))

    @app.route("/api/<kind>/enter", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_enter(kind, sess, data):
        row = _int_arg(data, "row") if "row" in data else None
        col = _int_arg(data, "col") if "col" in data else None
        sess.enter(_int_arg(data, "value"), row, col)

    @app.route("/api/<kind>/play", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_play(kind, sess, data):
        sess.toggle_play_mode()

    @app.route("/api/<kind>/candidates")
    @with_session
    @only("sudoku")
    def api_candidates(kind, sess, data):
        row = _int_arg(request.args, "row")
        col = _int_arg(request.args, "col")
        if not (0 <= row < 9 and 0 <= col < 9):
            raise IndexError("Cell is outside the board")
        return jsonify({"row": row, "col": col, "candidates": sess.candidates(row, col)})

    @app.route("/api/<kind>/hint", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_hint(kind, sess, data):
        hint = None
        pending = sess.begin_hint()
        if pending is not None:
            with unlocked(g.workspace.lock):
                narration = pending.run()
            hint = sess.finish_hint(pending, narration)
        body = payload(kind, sess, ai_enabled)
        body["hint"] = hint.to_dict() if hint else None
        return jsonify(body)

    @app.route("/api/<kind>/recognize", methods=["POST"])
    @with_session
    @only("sudoku")
    def api_recognize(kind, sess, data):
        upload = request.files.get("image")
        if upload is None:
            return jsonify({"error": "No image uploaded"}), 400
        loaded = False
        pending = sess.begin_recognize(upload.read(), upload.mimetype or "image/jpeg")
        if pending is not None:
            with unlocked(g.workspace.lock):
                outcome = pending.run()
            loaded = sess.finish_recognize(pending, outcome)
        if not loaded:
            return jsonify({"error": sess.message, **payload(kind, sess, ai_enabled)}), 400

    return app


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Algorithm Visualizer</title>
  <link href="https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;700&family=DM+Sans:wght@400;500;700&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-rose: #f43f5e;
    }
    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
    }
    nav { display: flex; gap: 8px; padding: 16px 24px; border-bottom: 1px solid var(--border); }
    nav button { background: none; color: var(--text-secondary); border: 1px solid var(--border);
                 padding: 8px 16px; border-radius: 6px; cursor: pointer; }
    nav button.active { color: var(--text-primary); border-color: var(--accent-cyan); }
    .tab { display: none; padding: 24px; gap: 24px; }
    .tab.active { display: flex; }
    .sidebar { width: 320px; display: flex; flex-direction: column; gap: 16px; }
    .stage { flex: 1; display: flex; flex-direction: column; gap: 16px; overflow: auto; }
    .panel { background: var(--bg-panel); border: 1px solid var(--border); border-radius: 8px; padding: 16px; }
    .panel h3 { font-size: 13px; text-transform: uppercase; letter-spacing: 0.5px;
                color: var(--accent-cyan); margin-bottom: 12px; }
    .panel h4 { margin: 10px 0 4px; font-size: 13px; }
    .panel p { color: var(--text-secondary); font-size: 13px; line-height: 1.5; }
    .panel.degraded { border-color: var(--accent-rose); }
    button { font-family: inherit; }
    .btn-primary, .btn-secondary, .button-row button, .digit {
      background: var(--bg-dark); color: var(--text-primary); border: 1px solid var(--border);
      padding: 6px 12px; border-radius: 6px; cursor: pointer; margin: 4px 4px 0 0;
    }
    .btn-primary { border-color: var(--accent-cyan); }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    select, input[type=range] { width: 100%; margin-top: 6px; }
    table { width: 100%; font-size: 13px; }
    td:last-child { text-align: right; }
    .status-line { font-family: 'JetBrains Mono', monospace; font-size: 13px; color: var(--text-secondary); }
    .grid rect.cell, .sudoku rect.cell { cursor: pointer; }
  </style>
</head>
<body>
  <nav>
    <button class="tab-btn active" data-tab="sorting">Sorting</button>
    <button class="tab-btn" data-tab="pathfinding">Pathfinding</button>
    <button class="tab-btn" data-tab="sudoku">Sudoku</button>
  </nav>

  <section class="tab active" id="tab-sorting" data-kind="sorting">
    <div class="sidebar">
      {{ sorting_algo|safe }}
      {{ sorting_playback|safe }}
      {{ sorting_controls|safe }}
      <div class="metrics">{{ metrics|safe }}</div>
    </div>
    <div class="stage">
      <div class="status"></div>
      <div class="view">{{ sorting_view|safe }}</div>
      <div class="analysis">{{ analysis['sorting']|safe }}</div>
    </div>
  </section>

  <section class="tab" id="tab-pathfinding" data-kind="pathfinding">
    <div class="sidebar">
      {{ pathfinding_algo|safe }}
      {{ pathfinding_playback|safe }}
      {{ pathfinding_controls|safe }}
      <div class="metrics">{{ metrics|safe }}</div>
    </div>
    <div class="stage">
      <div class="status"></div>
      <div class="view">{{ pathfinding_view|safe }}</div>
      <div class="analysis">{{ analysis['pathfinding']|safe }}</div>
    </div>
  </section>

  <section class="tab" id="tab-sudoku" data-kind="sudoku">
    <div class="sidebar">
      {{ sudoku_playback|safe }}
      {{ sudoku_controls|safe }}
      <div class="metrics">{{ metrics|safe }}</div>
    </div>
    <div class="stage">
      <div class="status"></div>
      <div class="view">{{ sudoku_view|safe }}</div>
      <div class="analysis">{{ analysis['sudoku']|safe }}</div>
    </div>
  </section>

  <script>
    const POLL_MS = 50;
    const polling = {};

    function tabOf(kind) { return document.getElementById('tab-' + kind); }

    function render(kind, data) {
      if (!data || !data.state) return;
      const tab = tabOf(kind);
      tab.querySelector('.view').innerHTML = data.svg;
      tab.querySelector('.status').innerHTML = data.status;
      tab.querySelector('.metrics').innerHTML = data.metrics;
      tab.querySelector('.analysis').innerHTML = data.analysis;
      const start = document.getElementById(kind + '-start');
      const stop = document.getElementById(kind + '-stop');
      if (start) start.disabled = data.running;
      if (stop) stop.disabled = !data.running;
      if (data.running) poll(kind);
    }

    async function post(kind, action, body) {
      const res = await fetch('/api/' + kind + '/' + action, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(body || {}),
      });
      const data = await res.json();
      render(kind, data);
      return data;
    }

    function poll(kind) {
      if (polling[kind]) return;
      polling[kind] = true;
      const loop = async () => {
        const res = await fetch('/api/' + kind + '/state');
        const data = await res.json();
        render(kind, data);
        if (data.running) { setTimeout(loop, POLL_MS); } else { polling[kind] = false; }
      };
      setTimeout(loop, POLL_MS);
    }

    // tabs
    document.querySelectorAll('.tab-btn').forEach(btn => {
      btn.addEventListener('click', () => {
        document.querySelectorAll('.tab-btn').forEach(b => b.classList.remove('active'));
        document.querySelectorAll('.tab').forEach(t => t.classList.remove('active'));
        btn.classList.add('active');
        tabOf(btn.dataset.tab).classList.add('active');
      });
    });

    // shared playback + analysis
    ['sorting', 'pathfinding', 'sudoku'].forEach(kind => {
      const tab = tabOf(kind);
      document.getElementById(kind + '-start').addEventListener('click', () => post(kind, 'start'));
      document.getElementById(kind + '-stop').addEventListener('click', () => post(kind, 'stop'));
      document.getElementById(kind + '-speed').addEventListener('change', (e) => {
        document.getElementById(kind + '-speed-val').textContent = e.target.value;
        post(kind, 'speed', {speed: +e.target.value});
      });
      tab.addEventListener('click', (e) => {
        if (e.target.id === kind + '-analyze') post(kind, 'analyze');
      });
      fetch('/api/' + kind + '/state').then(r => r.json()).then(d => render(kind, d));
    });

    // sorting
    document.getElementById('sorting-algo').addEventListener('change', (e) => post('sorting', 'algorithm', {key: e.target.value}));
    document.getElementById('sorting-new').addEventListener('click', () => post('sorting', 'new_array'));
    document.getElementById('sorting-size').addEventListener('change', (e) => {
      document.getElementById('sorting-size-val').textContent = e.target.value;
      post('sorting', 'size', {size: +e.target.value});
    });

    // pathfinding
    document.getElementById('pathfinding-algo').addEventListener('change', (e) => post('pathfinding', 'algorithm', {key: e.target.value}));
    document.getElementById('path-maze').addEventListener('click', () => post('pathfinding', 'maze'));
    document.getElementById('path-clear').addEventListener('click', () => post('pathfinding', 'clear'));
    document.getElementById('path-reset').addEventListener('click', () => post('pathfinding', 'reset'));
    tabOf('pathfinding').querySelector('.view').addEventListener('click', (e) => {
      const cell = e.target.closest('rect.cell');
      if (cell) post('pathfinding', 'click', {row: +cell.dataset.row, col: +cell.dataset.col});
    });

    // sudoku
    document.getElementById('sudoku-generate').addEventListener('click', () =>
      post('sudoku', 'generate', {difficulty: document.getElementById('sudoku-difficulty').value}));
    document.getElementById('sudoku-clear').addEventListener('click', () => post('sudoku', 'clear'));
    document.getElementById('sudoku-play').addEventListener('change', () => post('sudoku', 'play'));
    document.getElementById('sudoku-hint').addEventListener('click', () => post('sudoku', 'hint'));
    document.querySelectorAll('.digit').forEach(btn => {
      btn.addEventListener('click', () => post('sudoku', 'enter', {value: +btn.dataset.value}));
    });
    tabOf('sudoku').querySelector('.view').addEventListener('click', (e) => {
      const cell = e.target.closest('rect.cell');
      if (cell) post('sudoku', 'select', {row: +cell.dataset.row, col: +cell.dataset.col});
    });
    document.getElementById('sudoku-image').addEventListener('change', async (e) => {
      if (!e.target.files.length) return;
      const form = new FormData();
      form.append('image', e.target.files[0]);
      const res = await fetch('/api/sudoku/recognize', {method: 'POST', body: form});
      render('sudoku', await res.json());
      e.target.value = '';
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
CONFIG = load_config()
configure_logging(CONFIG)
app = create_app(CONFIG)


if __name__ == "__main__":
    logger.info("Algorithm Visualizer listening on http://localhost:5000 (AI %s)",
                "enabled" if CONFIG.ai_enabled else "disabled")
    app.run(debug=os.getenv("FLASK_DEBUG") == "1", port=5000)

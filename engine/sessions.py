"""
sessions.py — Per-Visualizer Sessions
======================================
A session owns one model (array / Grid / SudokuBoard), one PlaybackDriver
that is the model's only writer while a run is active, and one Recorder.

    SortingSession      bars + algorithm + speed slider
    PathfindingSession  grid editing, maze, Dijkstra / A* / BFS replay
    SudokuSession       puzzle generation, play mode, solve replay,
                        hints and image recognition

Rules shared by all three:
  - At most one run per session.  start() while running returns False.
  - Edits while running are refused (return False), never queued.
  - Changing algorithm / size / grid while running is an implicit stop
    followed by a full reset.
  - Narration is only requested after a run reached a terminal state.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import AppConfig
from algorithms import get_algorithm, SORTING, PATHFINDING
from algorithms.arrays import generate_random_array
from algorithms.path import SearchResult, run_search, path_steps, apply_path_step
from algorithms.step import SortStep, SudokuStep
from algorithms.sudoku_solver import SudokuSolver, REMOVAL_TARGETS
from grid import Grid, SudokuBoard, InvalidGridError, clone_grid
from engine.playback import (
    PlaybackDriver,
    PlaybackEvent,
    EVENT_COMPLETED,
    EVENT_STOPPED,
    sorting_delay_ms,
    SORT_SPEED_MIN,
    SORT_SPEED_MAX,
)
from engine.recorder import Recorder
from services.errors import RecognitionError
from services.narration import Narrator, Narration

logger = logging.getLogger(__name__)

STATUS_IDLE        = "idle"
STATUS_RUNNING     = "running"
STATUS_COMPLETED   = "completed"
STATUS_STOPPED     = "stopped"
STATUS_NO_PATH     = "no_path"
STATUS_NO_SOLUTION = "no_solution"
STATUS_INVALID     = "invalid"

MIN_ARRAY_SIZE = 5
MAX_ARRAY_SIZE = 100


# ---------------------------------------------------------------------------
# Shared plumbing
# ---------------------------------------------------------------------------
@dataclass
class Pending:
    """
    A collaborator call prepared under the workspace lock and run outside
    it, so a slow AI reply never holds up playback polls.

    Attributes:
        call  : Zero-arg callable doing the slow work, or None.
        token : Session state the result belongs to; None means "do not store".
        value : Result to hand back when there is nothing to call.
    """

    call:  Optional[Callable[[], Any]] = None
    token: Any = None
    value: Any = None

    @classmethod
    def ready(cls, value: Any) -> "Pending":
        return cls(value=value)

    def run(self) -> Any:
        return self.call() if self.call is not None else self.value


class _Session:
    kind = ""

    def __init__(self, config: AppConfig, scheduler, narrator: Optional[Narrator], delay_ms: float):
        self.config    = config
        self.scheduler = scheduler
        self.narrator  = narrator
        self.status:   str = STATUS_IDLE
        self.message:  str = ""
        self.metrics:  Any = None
        self.analysis: Optional[Narration] = None

        self.driver   = PlaybackDriver(scheduler, self._apply_step, delay_ms=delay_ms, name=self.kind,
                                       snapshot=self._model_snapshot)
        self.recorder = Recorder()
        self.recorder.attach(self.driver)
        self.driver.subscribe(self._on_event)

    @property
    def running(self) -> bool:
        return self.driver.is_running

    def tick(self) -> int:
        """Let every due playback callback fire."""
        return self.scheduler.run_due()

    def stop(self) -> bool:
        return self.driver.stop()

    def close(self) -> None:
        self.driver.close()

    def analyze(self) -> Narration:
        pending = self.begin_analysis()
        return self.finish_analysis(pending, pending.run())

    def begin_analysis(self) -> Pending:
        """Capture what the narrator needs.  Call with the workspace lock held."""
        if self.running or self.metrics is None:
            return Pending.ready(Narration.placeholder("Run the visualization first before getting AI analysis."))
        if self.narrator is None:
            return Pending.ready(Narration.placeholder("AI features are disabled."))
        narrator, kind, metrics = self.narrator, self.kind, self.metrics
        return Pending(lambda: narrator.analyze_run(kind, metrics), token=metrics)

    def finish_analysis(self, pending: Pending, narration: Narration) -> Narration:
        """Store `narration` unless another run replaced those metrics meanwhile."""
        if pending.token is not None and pending.token is self.metrics:
            self.analysis = narration
        return narration

    # -- internal --
    def _restart_model(self) -> None:
        """Implicit stop + full reset used by configuration changes."""
        if self.running:
            logger.info("%s: configuration changed mid-run, stopping", self.kind)
            self.driver.stop()
        self.driver.reset()
        self.status   = STATUS_IDLE
        self.metrics  = None
        self.analysis = None

    def _begin(self, steps) -> bool:
        self.metrics  = None
        self.analysis = None
        if not self.driver.start(steps):
            return False
        self.status = STATUS_RUNNING
        logger.info("%s: run started", self.kind)
        return True

    def _on_event(self, event: PlaybackEvent) -> None:
        if event.kind == EVENT_COMPLETED:
            self._completed(event.result)
            logger.info("%s: run completed (%s)", self.kind, self.status)
        elif event.kind == EVENT_STOPPED:
            self.status = STATUS_STOPPED
            self._stopped()
            logger.info("%s: run stopped", self.kind)

    def _apply_step(self, step: Any) -> None:
        raise NotImplementedError

    def _model_snapshot(self) -> Any:
        raise NotImplementedError

    def _completed(self, result: Any) -> None:
        raise NotImplementedError

    def _stopped(self) -> None:
        pass

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "status":   self.status,
            "message":  self.message,
            "playback": self.driver.snapshot(),
            "metrics":  self.metrics.to_dict() if self.metrics else None,
            "analysis": self.analysis.to_dict() if self.analysis else None,
        }


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
class SortingSession(_Session):
    kind = "sorting"

    def __init__(self, config: AppConfig, scheduler, narrator: Optional[Narrator] = None,
                 rng: Optional[random.Random] = None):
        self.speed = config.sort_speed
        super().__init__(config, scheduler, narrator, sorting_delay_ms(self.speed))
        self.rng        = rng or random.Random()
        self.algorithm  = "bubble"
        self.size       = config.array_size
        self.array: List[float] = generate_random_array(self.size, rng=self.rng)
        self.current_step: Optional[SortStep] = None

    def new_array(self) -> bool:
        if self.running:
            return False
        self._restart_model()
        self.array = generate_random_array(self.size, rng=self.rng)
        self.current_step = None
        self.message = ""
        return True

    def set_array(self, values: List[float]) -> bool:
        if self.running:
            return False
        self._restart_model()
        self.array = list(values)
        self.size  = len(self.array)
        self.current_step = None
        return True

    def set_algorithm(self, key: str) -> None:
        info = get_algorithm(key)
        if info is None or info.kind != SORTING:
            raise ValueError(f"Unknown sorting algorithm: {key}")
        if self.running:
            self._restart_model()
            self.array = generate_random_array(self.size, rng=self.rng)
            self.current_step = None
        self.algorithm = key

    def set_size(self, size: int) -> None:
        self.size = min(max(int(size), MIN_ARRAY_SIZE), MAX_ARRAY_SIZE)
        self._restart_model()
        self.array = generate_random_array(self.size, rng=self.rng)
        self.current_step = None

    def set_speed(self, speed: float) -> None:
        self.speed = min(max(speed, SORT_SPEED_MIN), SORT_SPEED_MAX)
        self.driver.set_speed(sorting_delay_ms(self.speed))

    def start(self) -> bool:
        if self.running:
            return False
        info = get_algorithm(self.algorithm)
        self.current_step = None
        self.message = ""
        return self._begin(info.fn(self.array))

    def _model_snapshot(self) -> List[float]:
        return list(self.array)

    def _apply_step(self, step: SortStep) -> None:
        self.array        = list(step.array)
        self.current_step = step
        self.message      = step.description

    def _completed(self, result: Any) -> None:
        self.status  = STATUS_COMPLETED
        self.metrics = self.recorder.sorting_metrics(self.algorithm, len(self.array))

    def _stopped(self) -> None:
        self.message = "Sorting stopped"

    def to_dict(self) -> Dict[str, Any]:
        step = self.current_step
        data = self._base_dict()
        data.update({
            "algorithm": self.algorithm,
            "size":      self.size,
            "speed":     self.speed,
            "array":     list(self.array),
            "comparing": list(step.comparing_indices) if step else [],
            "swapped":   list(step.swapped_indices) if step else [],
        })
        return data


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
class PathfindingSession(_Session):
    kind = "pathfinding"

    def __init__(self, config: AppConfig, scheduler, narrator: Optional[Narrator] = None,
                 rng: Optional[random.Random] = None):
        super().__init__(config, scheduler, narrator, config.path_delay_ms)
        self.rng       = rng or random.Random()
        self.algorithm = "astar"
        self.grid      = Grid(config.grid_rows, config.grid_cols)
        self.result: Optional[SearchResult] = None
        self.search_time_ms = 0.0

    # -- editing (refused while running) --
    def click(self, row: int, col: int) -> bool:
        if self.running:
            return False
        self.grid.click(row, col)
        return True

    def toggle_wall(self, row: int, col: int) -> bool:
        if self.running:
            return False
        if self.grid.node(row, col).position in (self.grid.source, self.grid.target):
            return False
        return self.grid.toggle_wall(row, col)

    def clear_path(self) -> bool:
        if self.running:
            return False
        self.grid.reset_search_state()
        self.driver.reset()
        self.result  = None
        self.status  = STATUS_IDLE
        self.metrics = None
        self.message = ""
        return True

    def generate_maze(self) -> bool:
        if self.running:
            return False
        self.clear_path()
        self.grid.generate_maze(rng=self.rng)
        return True

    # -- configuration (implicit stop) --
    def reset_grid(self) -> None:
        self._restart_model()
        self.grid    = Grid(self.config.grid_rows, self.config.grid_cols)
        self.result  = None
        self.message = ""

    def set_algorithm(self, key: str) -> None:
        info = get_algorithm(key)
        if info is None or info.kind != PATHFINDING:
            raise ValueError(f"Unknown pathfinding algorithm: {key}")
        self._restart_model()
        self.grid.reset_search_state()
        self.result    = None
        self.algorithm = key

    def set_speed(self, delay_ms: float) -> None:
        self.driver.set_speed(delay_ms)

    # -- run --
    def start(self) -> bool:
        if self.running:
            return False
        if self.grid.source is None or self.grid.target is None:
            self.message = "Please set both source and target nodes first."
            return False

        began = time.perf_counter()
        self.result = run_search(self.grid, self.algorithm)
        self.search_time_ms = (time.perf_counter() - began) * 1000
        self.message = ""
        return self._begin(path_steps(self.result))

    def _model_snapshot(self) -> Dict[str, Any]:
        return self.grid.to_dict()

    def _apply_step(self, step) -> None:
        apply_path_step(self.grid, step)
        self.message = step.description

    def _completed(self, found: Any) -> None:
        result = self.result or SearchResult()
        self.status  = STATUS_COMPLETED if found else STATUS_NO_PATH
        self.metrics = self.recorder.pathfinding_metrics(
            algorithm=self.algorithm,
            total_nodes=self.grid.node_count(),
            wall_nodes=self.grid.wall_count(),
            visited_nodes=len(result.visited),
            path_length=len(result.path),
            search_time_ms=self.search_time_ms,
        )

    def _stopped(self) -> None:
        self.message = "Visualization stopped"

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "algorithm": self.algorithm,
            "grid":      self.grid.to_dict(),
        })
        return data


# ---------------------------------------------------------------------------
# Sudoku
# ---------------------------------------------------------------------------
Highlight = Tuple[Tuple[int, int], str]


class SudokuSession(_Session):
    kind = "sudoku"

    def __init__(self, config: AppConfig, scheduler, narrator: Optional[Narrator] = None,
                 recognizer=None, rng: Optional[random.Random] = None):
        super().__init__(config, scheduler, narrator, config.sudoku_delay_ms)
        self.recognizer  = recognizer
        self.board       = SudokuBoard()
        self.difficulty  = "medium"
        self.puzzle_kind = "custom"
        self.play_mode   = False
        self.selected:   Optional[Tuple[int, int]] = None
        self.highlight:  Optional[Highlight]       = None
        self.solver:     Optional[SudokuSolver]    = None
        self.empty_at_start = 0
        self._generator = SudokuSolver(rng=rng)

    # -- configuration --
    def set_difficulty(self, difficulty: str) -> None:
        if difficulty not in REMOVAL_TARGETS:
            raise ValueError(f"Unknown difficulty: {difficulty}")
        self.difficulty = difficulty

    def set_speed(self, delay_ms: float) -> None:
        self.driver.set_speed(delay_ms)

    def toggle_play_mode(self) -> bool:
        self.play_mode = not self.play_mode
        return self.play_mode

    def generate(self) -> bool:
        if self.running:
            return False
        self._restart_model()
        try:
            cells = self._generator.generate_puzzle(self.difficulty)
        except (ValueError, RuntimeError) as exc:
            logger.error("puzzle generation failed: %s", exc)
            self.message = "Error generating puzzle. Please try again."
            return False
        self._load_puzzle(cells, self.difficulty)
        self.message = ""
        return True

    def load_puzzle(self, cells, kind: str = "custom") -> bool:
        """Every filled cell becomes a given.  Raises InvalidGridError on an illegal grid."""
        if self.running:
            return False
        board = SudokuBoard.from_puzzle(cells)
        self._restart_model()
        self._load_puzzle(board.cells, kind)
        self.message = ""
        return True

    def clear(self) -> None:
        self._restart_model()
        self.board       = SudokuBoard()
        self.puzzle_kind = "custom"
        self.selected    = None
        self.highlight   = None
        self.message     = ""

    def recognize(self, image: bytes, mime_type: str = "image/jpeg") -> bool:
        """Load a puzzle from a photo.  On failure the board is untouched."""
        pending = self.begin_recognize(image, mime_type)
        if pending is None:
            return False
        return self.finish_recognize(pending, pending.run())

    def begin_recognize(self, image: bytes, mime_type: str = "image/jpeg") -> Optional[Pending]:
        if self.running:
            return None
        if self.recognizer is None:
            self.message = "Image recognition is not available."
            return None
        recognizer = self.recognizer

        def call():
            try:
                return recognizer.recognize(image, mime_type)
            except RecognitionError as exc:
                return exc

        return Pending(call, token=self.board)

    def finish_recognize(self, pending: Pending, outcome: Any) -> bool:
        """`outcome` is the recognized grid or the RecognitionError it raised."""
        if isinstance(outcome, RecognitionError):
            self.message = str(outcome)
            return False
        if self.running or pending.token is not self.board:
            self.message = "The board changed while the image was being read."
            return False
        self._restart_model()
        self._load_puzzle(outcome, "custom")
        self.message = "Puzzle loaded from image."
        return True

    # -- player input --
    def select(self, row: int, col: int) -> bool:
        if self.running or not (0 <= row < 9 and 0 <= col < 9):
            return False
        self.selected = (row, col)
        return True

    def enter(self, value: int, row: Optional[int] = None, col: Optional[int] = None) -> bool:
        if self.running:
            return False
        if row is None or col is None:
            if self.selected is None:
                self.message = "Please select a cell first."
                return False
            row, col = self.selected
        if not self.board.enter(row, col, value):
            return False
        self.message = ""
        return True

    def candidates(self, row: int, col: int) -> List[int]:
        return self.board.candidates(row, col)

    def hint(self) -> Optional[Narration]:
        pending = self.begin_hint()
        if pending is None:
            return None
        return self.finish_hint(pending, pending.run())

    def begin_hint(self) -> Optional[Pending]:
        if self.running:
            return None
        if self.selected is None:
            self.message = "Please select a cell first to get a hint."
            return None
        row, col = self.selected
        if self.board.is_given(row, col):
            self.message = "This is an original number - no hint needed!"
            return None
        if self.narrator is None:
            self.message = "AI service is not available. Please try again later."
            return None
        narrator   = self.narrator
        cells      = clone_grid(self.board.cells)
        candidates = self.board.candidates(row, col)
        return Pending(lambda: narrator.sudoku_hint(cells, row, col, candidates), token=(row, col))

    def finish_hint(self, pending: Pending, narration: Narration) -> Narration:
        if not self.running and self.selected == pending.token:
            self.message = narration.summary_text
        return narration

    # -- run --
    def start(self) -> bool:
        if self.running:
            return False
        try:
            self.solver = SudokuSolver(self.board.cells)
        except InvalidGridError as exc:
            self.status  = STATUS_INVALID
            self.message = f"Invalid puzzle: {exc}"
            return False
        self.empty_at_start = self.board.empty_count()
        self.highlight = None
        self.message   = "Starting visualization..."
        return self._begin(self.solver.solve_steps())

    def stop(self) -> bool:
        if self.solver is not None:
            self.solver.stop()
        return super().stop()

    def _model_snapshot(self) -> Dict[str, Any]:
        return self.board.to_dict()

    def _apply_step(self, step: SudokuStep) -> None:
        self.board.load(step.grid)
        self.message   = step.description
        self.highlight = None if step.is_final else (step.position, step.type)

    def _completed(self, solved: Any) -> None:
        self.status  = STATUS_COMPLETED if solved else STATUS_NO_SOLUTION
        self.message = "Puzzle solved successfully!" if solved else "No solution exists for this puzzle"
        self.highlight = None
        self.metrics = self.recorder.sudoku_metrics(self.puzzle_kind, self.empty_at_start, bool(solved))

    def _stopped(self) -> None:
        self.highlight = None
        self.message   = "Visualization stopped"

    def _load_puzzle(self, cells, kind: str) -> None:
        self.board       = SudokuBoard.from_puzzle(cells)
        self.puzzle_kind = kind
        self.selected    = None
        self.highlight   = None

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "difficulty": self.difficulty,
            "play_mode":  self.play_mode,
            "selected":   list(self.selected) if self.selected else None,
            "highlight":  {"position": list(self.highlight[0]), "type": self.highlight[1]} if self.highlight else None,
            "board":      self.board.to_dict(),
        })
        return data

"""
recorder.py — Run Recorder & Metrics
=====================================
Observes a PlaybackDriver and counts what each run did, then produces
the metrics card the UI shows and the narrator explains.

Usage:
    rec = Recorder()
    rec.attach(driver)                           # subscribe to events
    …run plays…
    metrics = rec.sorting_metrics("bubble", 50)  # once COMPLETED

Counting rules:
  • sorting     comparisons = steps with comparing indices,
                swaps       = steps with swapped indices
  • pathfinding visited / path counts come from the SearchResult, not the
                replay, so a stopped replay still reports the full search
  • sudoku      one counter per step type
"""

import time
from collections import Counter
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional

from algorithms.step import SortStep, SudokuStep, PathStep
from engine.playback import (
    PlaybackDriver,
    PlaybackEvent,
    EVENT_STARTED,
    EVENT_STEP,
    EVENT_COMPLETED,
    EVENT_STOPPED,
)


# ---------------------------------------------------------------------------
# Metrics dataclasses: what the metrics panel renders
# ---------------------------------------------------------------------------
@dataclass
class SortingMetrics:
    algorithm:         str   = ""
    array_size:        int   = 0
    comparisons:       int   = 0
    swaps:             int   = 0
    total_steps:       int   = 0
    execution_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PathfindingMetrics:
    algorithm:         str   = ""
    total_nodes:       int   = 0
    wall_nodes:        int   = 0
    visited_nodes:     int   = 0
    path_length:       int   = 0          # nodes on the path, endpoints included
    path_found:        bool  = False
    search_time_ms:    float = 0.0        # the search itself
    execution_time_ms: float = 0.0        # the whole replay

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SudokuMetrics:
    difficulty:        str   = ""
    empty_cells:       int   = 0          # before solving
    tries:             int   = 0
    placements:        int   = 0
    backtracks:        int   = 0
    solved:            bool  = False
    total_steps:       int   = 0
    execution_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        counts     : Counter of step categories seen in the current run.
        finished   : True once the run completed (not merely stopped).
        elapsed_ms : Wall time from "started" to "completed"/"stopped".
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock      = clock
        self.counts:    Counter = Counter()
        self.finished:  bool    = False
        self.elapsed_ms: float  = 0.0
        self._started:  Optional[float] = None

    def attach(self, driver: PlaybackDriver) -> Callable[[], None]:
        return driver.subscribe(self.on_event)

    def reset(self) -> None:
        self.counts     = Counter()
        self.finished   = False
        self.elapsed_ms = 0.0
        self._started   = None

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------
    def on_event(self, event: PlaybackEvent) -> None:
        if event.kind == EVENT_STARTED:
            self.reset()
            self._started = self.clock()
        elif event.kind == EVENT_STEP:
            self.record_step(event.step)
        elif event.kind in (EVENT_COMPLETED, EVENT_STOPPED):
            self.finished = event.kind == EVENT_COMPLETED
            if self._started is not None:
                self.elapsed_ms = round((self.clock() - self._started) * 1000, 2)

    def record_step(self, step: Any) -> None:
        self.counts["steps"] += 1
        if isinstance(step, SortStep):
            if step.is_comparison:
                self.counts["comparisons"] += 1
            elif step.is_swap:
                self.counts["swaps"] += 1
        elif isinstance(step, SudokuStep):
            if not step.is_final:
                self.counts[step.type] += 1
        elif isinstance(step, PathStep):
            self.counts[step.kind] += 1

    # ------------------------------------------------------------------
    # Metrics builders
    # ------------------------------------------------------------------
    def sorting_metrics(self, algorithm: str, array_size: int) -> SortingMetrics:
        return SortingMetrics(
            algorithm=algorithm,
            array_size=array_size,
            comparisons=self.counts["comparisons"],
            swaps=self.counts["swaps"],
            total_steps=self.counts["steps"],
            execution_time_ms=self.elapsed_ms,
        )

    def pathfinding_metrics(
        self,
        algorithm: str,
        total_nodes: int,
        wall_nodes: int,
        visited_nodes: int,
        path_length: int,
        search_time_ms: float = 0.0,
    ) -> PathfindingMetrics:
        return PathfindingMetrics(
            algorithm=algorithm,
            total_nodes=total_nodes,
            wall_nodes=wall_nodes,
            visited_nodes=visited_nodes,
            path_length=path_length,
            path_found=path_length > 0,
            search_time_ms=round(search_time_ms, 2),
            execution_time_ms=self.elapsed_ms,
        )

    def sudoku_metrics(self, difficulty: str, empty_cells: int, solved: bool) -> SudokuMetrics:
        return SudokuMetrics(
            difficulty=difficulty,
            empty_cells=empty_cells,
            tries=self.counts["try"],
            placements=self.counts["place"],
            backtracks=self.counts["backtrack"],
            solved=solved,
            total_steps=self.counts["steps"],
            execution_time_ms=self.elapsed_ms,
        )

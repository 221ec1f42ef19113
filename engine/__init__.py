"""
engine/
-------
Scheduling, playback, recording and the per-visualizer sessions.

    from engine import TickScheduler, PlaybackDriver, Recorder
    from engine import SortingSession, PathfindingSession, SudokuSession
"""

from engine.scheduler import TickScheduler, AsyncioScheduler
from engine.playback  import (
    PlaybackDriver,
    PlaybackState,
    PlaybackEvent,
    sorting_delay_ms,
    linear_delay_ms,
)
from engine.recorder  import Recorder, SortingMetrics, PathfindingMetrics, SudokuMetrics
from engine.sessions  import SortingSession, PathfindingSession, SudokuSession

__all__ = [
    "TickScheduler",
    "AsyncioScheduler",
    "PlaybackDriver",
    "PlaybackState",
    "PlaybackEvent",
    "sorting_delay_ms",
    "linear_delay_ms",
    "Recorder",
    "SortingMetrics",
    "PathfindingMetrics",
    "SudokuMetrics",
    "SortingSession",
    "PathfindingSession",
    "SudokuSession",
]

"""
playback.py — Step Playback Driver
===================================
The PlaybackDriver is the ONLY thing that advances a run.  It owns the
lazy step sequence, pulls one step per scheduled tick, hands it to the
model's `apply` callable and tells its subscribers.

State machine:
    IDLE     →  start()       →  RUNNING
    RUNNING  →  (exhausted)   →  COMPLETED
    RUNNING  →  stop()        →  STOPPED
    any      →  reset()       →  IDLE

Cancellation:
  Every start() opens a new *run generation*.  The scheduled callback
  carries the generation it was scheduled for and does nothing when it
  no longer matches, so a stop() that races an already-dequeued tick can
  never let one more step through.  stop() additionally cancels the
  single outstanding handle and closes the step generator.

Thread safety:
  Not thread-safe.  Everything runs on whichever thread drives the
  scheduler (the request thread for TickScheduler, the loop thread for
  AsyncioScheduler).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    COMPLETED = "completed"
    STOPPED   = "stopped"


# ---------------------------------------------------------------------------
# Speed mappings (milliseconds per step)
# ---------------------------------------------------------------------------
SORT_SPEED_MIN     = 0
SORT_SPEED_MAX     = 200
SORT_SPEED_DEFAULT = 50
SORT_BASE_DELAY_MS = 100


def sorting_delay_ms(speed: float) -> float:
    """Slider 0‥200 → 200 ms ‥ 1 ms.  100 is the base delay."""
    speed = min(max(speed, SORT_SPEED_MIN), SORT_SPEED_MAX)
    return max(1.0, SORT_BASE_DELAY_MS * (2 - speed / 100))


LINEAR_DELAY_MAX_MS = 10_000.0


def linear_delay_ms(delay: float) -> float:
    """Clamp to 0 ‥ LINEAR_DELAY_MAX_MS; NaN maps to 0."""
    return min(max(0.0, float(delay)), LINEAR_DELAY_MAX_MS)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
EVENT_STARTED   = "started"
EVENT_STEP      = "step"
EVENT_COMPLETED = "completed"
EVENT_STOPPED   = "stopped"


@dataclass(frozen=True)
class PlaybackEvent:
    """
    Attributes:
        kind     : "started" | "step" | "completed" | "stopped".
        step     : The step just applied ("step" events only).
        index    : 0-based index of that step within the run.
        snapshot : Model state right after the step was applied ("step" only).
        result   : Return value of the step generator ("completed" only).
    """

    kind:     str
    step:     Any = None
    index:    int = -1
    snapshot: Any = None
    result:   Any = None


Subscriber = Callable[[PlaybackEvent], None]


# ---------------------------------------------------------------------------
# PlaybackDriver
# ---------------------------------------------------------------------------
class PlaybackDriver:
    """
    Attributes:
        state         : Current PlaybackState.
        delay_ms      : Milliseconds between consecutive steps.
        current_step  : Last step applied, or None.
        steps_applied : Number of steps applied in the current / last run.
        result        : Generator return value once COMPLETED.
    """

    def __init__(self, scheduler, apply: Callable[[Any], None], delay_ms: float = 50.0, name: str = "playback",
                 snapshot: Optional[Callable[[], Any]] = None):
        self.name          = name
        self.state:        PlaybackState = PlaybackState.IDLE
        self.delay_ms:     float         = linear_delay_ms(delay_ms)
        self.current_step: Any           = None
        self.steps_applied: int          = 0
        self.result:       Any           = None

        self._scheduler = scheduler
        self._apply     = apply
        self._snapshot  = snapshot
        self._steps:       Optional[Iterator[Any]] = None
        self._handle       = None
        self._generation   = 0
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; the returned callable unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, steps: Iterable[Any]) -> bool:
        """Begin replaying `steps`.  Returns False if a run is already active."""
        if self.state is PlaybackState.RUNNING:
            return False

        self._generation   += 1
        self._steps         = iter(steps)
        self.state          = PlaybackState.RUNNING
        self.current_step   = None
        self.steps_applied  = 0
        self.result         = None

        logger.debug("%s: run %d started", self.name, self._generation)
        self._emit(PlaybackEvent(EVENT_STARTED))
        if self.state is PlaybackState.RUNNING:
            self._schedule(0)
        return True

    def stop(self) -> bool:
        """Cancel the active run.  Idempotent: only the first call emits."""
        if self.state is not PlaybackState.RUNNING:
            return False
        self._cancel()
        self.state = PlaybackState.STOPPED
        logger.debug("%s: run %d stopped after %d steps", self.name, self._generation, self.steps_applied)
        self._emit(PlaybackEvent(EVENT_STOPPED))
        return True

    def reset(self) -> None:
        """Silently cancel anything in flight and return to IDLE."""
        self._cancel()
        self.state         = PlaybackState.IDLE
        self.current_step  = None
        self.steps_applied = 0
        self.result        = None

    def close(self) -> None:
        """Teardown: reset and drop every subscriber."""
        self.reset()
        self._subscribers.clear()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, delay_ms: float) -> None:
        """New delay applies from the next scheduled tick on."""
        self.delay_ms = linear_delay_ms(delay_ms)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self.state is PlaybackState.RUNNING

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> dict:
        return {
            "state":         self.state.value,
            "steps_applied": self.steps_applied,
            "delay_ms":      self.delay_ms,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _schedule(self, delay_ms: float) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(delay_ms, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        if generation != self._generation or self.state is not PlaybackState.RUNNING:
            return
        self._handle = None

        try:
            step = next(self._steps)
        except StopIteration as done:
            self._finish(done.value)
            return
        except Exception:
            logger.exception("%s: step sequence failed after %d steps", self.name, self.steps_applied)
            self.stop()
            raise

        try:
            self._apply(step)
        except Exception:
            logger.exception("%s: applying step %d failed", self.name, self.steps_applied)
            self.stop()
            raise

        self.current_step   = step
        self.steps_applied += 1
        snapshot = self._snapshot() if self._snapshot is not None else None
        self._emit(PlaybackEvent(EVENT_STEP, step=step, index=self.steps_applied - 1, snapshot=snapshot))

        # a subscriber may have stopped or restarted us
        if generation != self._generation or self.state is not PlaybackState.RUNNING:
            return
        self._schedule(0 if getattr(step, "is_final", False) else self.delay_ms)

    def _finish(self, value: Any) -> None:
        self._steps = None
        self.state  = PlaybackState.COMPLETED
        self.result = value
        logger.debug("%s: run %d completed after %d steps", self.name, self._generation, self.steps_applied)
        self._emit(PlaybackEvent(EVENT_COMPLETED, result=value))

    def _cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._steps is not None:
            close = getattr(self._steps, "close", None)
            if close is not None:
                close()
            self._steps = None

    def _emit(self, event: PlaybackEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("%s: subscriber failed on %s event", self.name, event.kind)

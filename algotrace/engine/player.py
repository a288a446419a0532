"""
player.py — Step-by-Step Playback Engine
=========================================
The Player is the ONLY object a front-end drives during a run.
It owns one finished trace, a cursor into it and at most one pending
playback tick.  Nothing is ever re-computed: every control call just
moves the cursor.

State machine:
    IDLE     →  load()           →  PAUSED   (cursor 0)
    PAUSED   →  start()/resume() →  PLAYING
    PLAYING  →  pause()          →  PAUSED
    PLAYING  →  (last index)     →  FINISHED
    FINISHED →  start()          →  PLAYING  (rewound to 0)
    any      →  reset()          →  PAUSED   (cursor 0; IDLE if no trace)

Timing:
    The player never sleeps.  Each scheduled tick advances the cursor by
    one and, unless the trace is exhausted, schedules the next tick
    `speed_ms` later.  Every path that schedules a tick cancels the
    previous handle first, so there is never more than one pending tick.

    A tick that was already firing when it got cancelled (threaded
    scheduler) is recognised by its generation number and dropped.

Thread safety:
    All public methods and ticks run under one re-entrant lock, so the
    `on_step` callback may call back into the player.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from algotrace.algorithms.step import Step, Trace
from algotrace.config import DefaultConfig, SPEED_PRESETS
from algotrace.engine.scheduler import ThreadingScheduler


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlayerState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------
class Player:
    """
    Attributes:
        state     : Current PlayerState.
        trace     : The loaded trace (empty tuple when idle).
        cursor    : Index into `trace` that is currently displayed.
        speed_ms  : Milliseconds between auto-advance ticks.
        on_step   : Optional callback(Step) fired every time the cursor moves.
    """

    def __init__(
        self,
        scheduler=None,
        on_step: Optional[Callable[[Step], None]] = None,
        speed_ms: int = DefaultConfig.DEFAULT_SPEED_MS,
        min_speed_ms: int = DefaultConfig.MIN_SPEED_MS,
        max_speed_ms: int = DefaultConfig.MAX_SPEED_MS,
    ):
        self.scheduler              = scheduler or ThreadingScheduler()
        self.on_step                = on_step
        self.min_speed_ms:  int     = min_speed_ms
        self.max_speed_ms:  int     = max_speed_ms

        self._trace:       Trace       = ()
        self._cursor:      int         = 0
        self._state:       PlayerState = PlayerState.IDLE
        self._speed_ms:    int         = self._clamp_speed(speed_ms)
        self._handle                   = None
        self._generation:  int         = 0
        self._lock                     = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, trace: Sequence[Step]) -> None:
        """Take ownership of a new trace and show its first step."""
        with self._lock:
            self._cancel()
            self._trace = tuple(trace)
            self._cursor = 0
            if self._trace:
                self._set_state(PlayerState.PAUSED)
                self._notify()
            else:
                self._set_state(PlayerState.IDLE)
            logger.debug("Loaded trace with %d step(s)", len(self._trace))

    def unload(self) -> None:
        with self._lock:
            self._cancel()
            self._trace = ()
            self._cursor = 0
            self._set_state(PlayerState.IDLE)

    def reset(self) -> None:
        """Back to step 0, paused, with no pending tick."""
        with self._lock:
            self._cancel()
            self._cursor = 0
            self._set_state(PlayerState.PAUSED if self._trace else PlayerState.IDLE)
            self._notify()

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Begin auto-play; a finished trace is replayed from the start."""
        with self._lock:
            if not self._trace or self._state is PlayerState.PLAYING:
                return
            if self._state is PlayerState.FINISHED or self._at_end():
                self._cursor = 0
                self._notify()
            self._play()

    def resume(self) -> None:
        """Continue auto-play from the current cursor."""
        with self._lock:
            if self._state is not PlayerState.PAUSED or self._at_end():
                return
            self._play()

    def pause(self) -> None:
        with self._lock:
            if self._state is not PlayerState.PLAYING:
                return
            self._cancel()
            self._set_state(PlayerState.PAUSED)

    def toggle_play(self) -> None:
        with self._lock:
            if self._state is PlayerState.PLAYING:
                self.pause()
            elif self._state is PlayerState.PAUSED:
                self.resume()
            else:
                self.start()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step and stop playback.  False if already at the end."""
        with self._lock:
            self._cancel()
            if not self._trace or self._at_end():
                return False
            self._cursor += 1
            self._set_state(PlayerState.FINISHED if self._at_end() else PlayerState.PAUSED)
            self._notify()
            return True

    def step_backward(self) -> bool:
        """Rewind one step and stop playback.  False if already at the start."""
        with self._lock:
            self._cancel()
            if not self._trace or self._cursor == 0:
                if self._state is PlayerState.PLAYING:
                    self._set_state(PlayerState.PAUSED)
                return False
            self._cursor -= 1
            self._set_state(PlayerState.PAUSED)
            self._notify()
            return True

    def seek(self, index: int) -> None:
        """
        Jump to `index`, clamped to the trace.  Playback keeps going from
        the new position if it was running.
        """
        with self._lock:
            if not self._trace:
                return
            target = max(0, min(int(index), len(self._trace) - 1))
            playing = self._state is PlayerState.PLAYING
            self._cancel()
            moved = target != self._cursor
            self._cursor = target
            if self._at_end():
                self._set_state(PlayerState.FINISHED)
            elif playing:
                self._schedule()
            else:
                self._set_state(PlayerState.PAUSED)
            if moved:
                self._notify()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, ms: float) -> int:
        """Set the tick delay; takes effect from the next scheduled tick."""
        with self._lock:
            self._speed_ms = self._clamp_speed(ms)
            return self._speed_ms

    def set_speed_preset(self, preset: str) -> int:
        return self.set_speed(SPEED_PRESETS.get(preset, DefaultConfig.DEFAULT_SPEED_MS))

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def speed_ms(self) -> int:
        return self._speed_ms

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self._cursor < len(self._trace):
            return self._trace[self._cursor]
        return None

    @property
    def total_steps(self) -> int:
        return len(self._trace)

    @property
    def has_pending_tick(self) -> bool:
        return self._handle is not None

    @property
    def is_playing(self) -> bool:
        return self._state is PlayerState.PLAYING

    @property
    def is_finished(self) -> bool:
        return self._state is PlayerState.FINISHED

    def status(self) -> Dict[str, Any]:
        """Playback summary for a front-end (no step payload)."""
        with self._lock:
            return {
                "state":       self._state.value,
                "cursor":      self._cursor,
                "total_steps": len(self._trace),
                "speed_ms":    self._speed_ms,
            }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _play(self) -> None:
        if self._at_end():
            self._set_state(PlayerState.FINISHED)
            return
        self._set_state(PlayerState.PLAYING)
        self._schedule()

    def _schedule(self) -> None:
        self._cancel()
        generation = self._generation
        self._handle = self.scheduler.call_later(
            self._speed_ms / 1000.0, lambda: self._tick(generation)
        )

    def _cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
            if self._state is not PlayerState.PLAYING or self._at_end():
                return
            self._cursor += 1
            if self._at_end():
                self._set_state(PlayerState.FINISHED)
            else:
                self._schedule()
            self._notify()

    def _at_end(self) -> bool:
        return self._cursor >= len(self._trace) - 1

    def _clamp_speed(self, ms: float) -> int:
        return int(max(self.min_speed_ms, min(self.max_speed_ms, ms)))

    def _set_state(self, state: PlayerState) -> None:
        if state is not self._state:
            logger.debug("Player %s -> %s at step %d", self._state.value, state.value, self._cursor)
            self._state = state

    def _notify(self) -> None:
        step = self.current_step
        if self.on_step and step is not None:
            self.on_step(step)

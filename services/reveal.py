# services/reveal.py
"""
Reveal animation driver.

The winner is already known when a reveal starts; the controller only decides
what the audience sees on the way there. The step count and the hovered
indices are random, the last shown index is always the winner.

Timing per hover step ``k`` of ``n``: ``BASE_DELAY + (k/n)**2 * DELAY_SPAN``
seconds, fast at first and slowing down towards the end. After the forced
winner step the controller waits SETTLE_DELAY and reports completion.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import random
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Optional

from errors import DrawInProgress, InvalidRoster

logger = logging.getLogger(__name__)

MIN_STEPS = 30
MAX_STEPS = 50               # exclusive
BASE_DELAY = 0.05            # seconds
DELAY_SPAN = 0.45
SETTLE_DELAY = 1.2


class RevealState(str, Enum):
    IDLE = "idle"
    REVEALING = "revealing"
    SETTLED = "settled"


# ---------- schedulers ----------

class LoopScheduler:
    """Timed callbacks on the running asyncio loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, fn: Callable[[], None]):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, fn)


class _ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Virtual clock; callbacks run only when the clock is advanced."""

    def __init__(self):
        self.now = 0.0
        self.delays: List[float] = []
        self._queue: list = []
        self._seq = itertools.count()

    def call_later(self, delay: float, fn: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        self.delays.append(delay)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), fn, handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for *_, h in self._queue if not h.cancelled)

    def run_next(self) -> bool:
        while self._queue:
            due, _, fn, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, due)
            fn()
            return True
        return False

    def run_all(self, limit: int = 10000) -> int:
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran

    def advance(self, seconds: float) -> int:
        """Run everything due within the next `seconds`."""
        until = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= until:
            if self.run_next():
                ran += 1
        self.now = until
        return ran


# ---------- controller ----------

def step_delay(step: int, total: int) -> float:
    t = step / total
    return BASE_DELAY + t * t * DELAY_SPAN


class RevealController:

    def __init__(self, scheduler=None, rng: Optional[random.Random] = None,
                 min_steps: int = MIN_STEPS, max_steps: int = MAX_STEPS,
                 settle_delay: float = SETTLE_DELAY):
        if not 0 < min_steps < max_steps:
            raise ValueError("need 0 < min_steps < max_steps")
        self.scheduler = scheduler or LoopScheduler()
        self._rng = rng or random.SystemRandom()
        self.min_steps = min_steps
        self.max_steps = max_steps
        self.settle_delay = settle_delay

        self.state = RevealState.IDLE
        self.winner_index: Optional[int] = None
        self.roster_size = 0
        self.highlighted: Optional[int] = None
        self.hover_steps = 0
        self.steps: List[int] = []

        self._generation = 0
        self._handle = None
        self._listeners: List[Any] = []

    def add_listener(self, listener: Any) -> None:
        self._listeners.append(listener)

    def _notify(self, hook: str, *args) -> None:
        for l in self._listeners:
            fn = getattr(l, hook, None)
            if fn is None:
                continue
            try:
                fn(*args)
            except Exception:
                # a broken observer must not stop the animation
                logger.exception("reveal listener %r failed in %s", l, hook)

    def start(self, winner_index: int, roster_size: int) -> None:
        if self.state is RevealState.REVEALING:
            raise DrawInProgress("A reveal is already running")
        if roster_size <= 0 or not 0 <= winner_index < roster_size:
            raise InvalidRoster(f"winner index {winner_index} outside roster of {roster_size}")

        self._cancel_pending()
        self._generation += 1
        self.state = RevealState.REVEALING
        self.winner_index = winner_index
        self.roster_size = roster_size
        self.highlighted = None
        self.steps = []
        self.hover_steps = self._rng.randrange(self.min_steps, self.max_steps)

        logger.debug("reveal gen=%d: %d hover steps towards %d",
                     self._generation, self.hover_steps, winner_index)
        self._notify("on_reveal_started", winner_index)
        self._step(self._generation, 0)

    def reset(self) -> None:
        """Back to IDLE. Pending steps of the abandoned reveal never fire."""
        self._generation += 1
        self._cancel_pending()
        self.state = RevealState.IDLE
        self.winner_index = None
        self.roster_size = 0
        self.highlighted = None

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _live(self, gen: int) -> bool:
        return gen == self._generation and self.state is RevealState.REVEALING

    def _pick(self) -> int:
        if self.roster_size == 1:
            return 0
        while True:
            nxt = self._rng.randrange(self.roster_size)
            if nxt != self.highlighted:
                return nxt

    def _show(self, index: int) -> None:
        self.highlighted = index
        self.steps.append(index)
        self._notify("on_reveal_step", index)

    def _step(self, gen: int, done: int) -> None:
        if not self._live(gen):
            return
        self._handle = None

        if done >= self.hover_steps:
            self._show(self.winner_index)
            self._handle = self.scheduler.call_later(self.settle_delay, partial(self._settle, gen))
            return

        self._show(self._pick())
        done += 1
        self._handle = self.scheduler.call_later(
            step_delay(done, self.hover_steps), partial(self._step, gen, done))

    def _settle(self, gen: int) -> None:
        if not self._live(gen):
            return
        self._handle = None
        self.state = RevealState.SETTLED
        self._notify("on_reveal_complete", self.winner_index)

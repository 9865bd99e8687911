"""
One draw session: the roster being edited, the orchestrator, the reveal and
the winner history.

Observers register with :meth:`DrawSession.add_listener` and implement any of

* ``on_draw_result(result)``: a draw was computed, the reveal is starting;
* ``on_reveal_started(winner_index)``;
* ``on_reveal_step(index)``: the index highlighted right now;
* ``on_draw_complete(result)``: the reveal settled and history was appended.
"""
import logging
from time import time
from typing import Any, List, Optional

from errors import RosterLocked
from models import DrawRequest, DrawResult, HistoryRecord
from services.draw import DrawOrchestrator, new_client_seed
from services.reveal import RevealController, RevealState
from services.roster import Roster, RosterBuilder
from services.store import HistoryStore, MemoryHistoryStore
from sources.hive import EntropyResolver

logger = logging.getLogger(__name__)


class DrawSession:

    def __init__(self, resolver, builder: Optional[RosterBuilder] = None,
                 history: Optional[HistoryStore] = None,
                 reveal: Optional[RevealController] = None):
        self.builder = builder or RosterBuilder()
        self.history = history if history is not None else MemoryHistoryStore()
        self.reveal = reveal or RevealController()
        self.orchestrator = DrawOrchestrator(resolver, self.reveal)
        self.roster = Roster()
        self.result: Optional[DrawResult] = None
        self._listeners: List[Any] = []
        self.reveal.add_listener(self)

    # ---------- state ----------

    @property
    def state(self) -> str:
        if self.orchestrator.busy and self.reveal.state is not RevealState.REVEALING:
            return "drawing"
        return self.reveal.state.value

    @property
    def locked(self) -> bool:
        return self.orchestrator.busy

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
                logger.exception("session listener %r failed in %s", l, hook)

    # ---------- roster ----------

    def _ensure_unlocked(self) -> None:
        if self.locked:
            raise RosterLocked("The roster cannot change while a draw is running")

    def _replace(self, roster: Roster) -> None:
        self._ensure_unlocked()
        if self.reveal.state is RevealState.SETTLED:
            self.reveal.reset()
        self.roster = roster
        self.result = None
        logger.info("roster replaced: %d entrants from %s", len(roster), roster.source)

    def load_text(self, text: str) -> Roster:
        self._ensure_unlocked()
        self._replace(self.builder.from_text(text))
        return self.roster

    async def load_post(self, url: str, exclude_automated: bool = True) -> Roster:
        self._ensure_unlocked()
        roster = await self.builder.from_post(url, exclude_automated)
        # a draw may have started while the replies were loading
        self._replace(roster)
        return self.roster

    def remove(self, identity: str) -> bool:
        if self.state != RevealState.IDLE.value:
            raise RosterLocked("Entrants can only be removed while idle")
        return self.roster.remove(identity)

    # ---------- draw ----------

    async def draw(self, client_seed: Optional[str] = None) -> DrawResult:
        request = DrawRequest(client_seed=client_seed or new_client_seed(),
                              entrants=self.roster.snapshot())
        result = await self.orchestrator.draw(request)
        self.result = result
        self._notify("on_draw_result", result)
        self.reveal.start(result.winner_index, result.roster_size)
        return result

    def reset(self) -> None:
        self.reveal.reset()

    # ---------- reveal hooks ----------

    def on_reveal_started(self, winner_index: int) -> None:
        self._notify("on_reveal_started", winner_index)

    def on_reveal_step(self, index: int) -> None:
        self._notify("on_reveal_step", index)

    def on_reveal_complete(self, winner_index: int) -> None:
        result = self.result
        if result is None:
            return
        now = int(time() * 1000)
        self.history.append(HistoryRecord(
            id=str(now),
            winner_name=result.winner.display_name,
            winner_avatar=result.winner.avatar,
            block_id=result.block.id,
            timestamp=now,
        ))
        self._notify("on_draw_complete", result)


class HubListener:
    """Forwards session events to a StreamHub channel for SSE clients."""

    def __init__(self, hub, channel: str = "draws"):
        self.hub = hub
        self.channel = channel

    def on_draw_result(self, result: DrawResult) -> None:
        self.hub.publish(self.channel, {
            "type": "draw.result",
            **result.model_dump(),
            "explorerUrl": EntropyResolver.explorer_url(result.block),
        })

    def on_reveal_started(self, winner_index: int) -> None:
        self.hub.publish(self.channel, {"type": "reveal.started"})

    def on_reveal_step(self, index: int) -> None:
        self.hub.publish(self.channel, {"type": "reveal.step", "index": index})

    def on_draw_complete(self, result: DrawResult) -> None:
        self.hub.publish(self.channel, {
            "type": "reveal.completed",
            "winnerIndex": result.winner_index,
            "winner": result.winner.display_name,
            "blockId": result.block.id,
        })

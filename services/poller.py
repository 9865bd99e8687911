# services/poller.py
import asyncio, logging
from typing import Optional
from models import BlockReference

logger = logging.getLogger(__name__)

class BlockPoller:
    """
    Keeps the most recently observed head block for display.
    Runs on its own task; it never takes part in a draw.
    """

    def __init__(self, resolver, interval: float = 4.0):
        self.resolver = resolver
        self.interval = interval
        self.latest: Optional[BlockReference] = None
        self._task: Optional[asyncio.Task] = None

    async def poll_once(self) -> Optional[BlockReference]:
        try:
            block = await self.resolver.resolve()
            # local fallback ids are not chain blocks, keep the last real one
            if block.verifiable:
                self.latest = block
        except Exception as e:
            # display only; the next tick tries again
            logger.debug("block poll failed: %s", e)
        return self.latest

    async def _loop(self):
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

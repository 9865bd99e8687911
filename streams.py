import asyncio, json
from typing import AsyncGenerator, Dict, List

HEARTBEAT_S = 2

def sse(event: dict) -> str:
    return f"data: {json.dumps(event)}\n\n"


class _Subscriber:
    __slots__ = ("queue", "heartbeat")

    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()
        self.heartbeat = asyncio.create_task(self._beat())

    async def _beat(self):
        # an idle SSE connection gets buffered by proxies without periodic chunks
        loop = asyncio.get_running_loop()
        try:
            while True:
                await asyncio.sleep(HEARTBEAT_S)
                self.queue.put_nowait({"type": "ping", "t": loop.time()})
        except asyncio.CancelledError:
            pass


class StreamHub:
    """Per-channel fan-out of draw events to SSE clients."""

    def __init__(self):
        self._subs: Dict[str, List[_Subscriber]] = {}

    async def subscribe(self, channel: str) -> AsyncGenerator[str, None]:
        sub = _Subscriber()
        self._subs.setdefault(channel, []).append(sub)
        try:
            yield sse({"type": "connected", "channel": channel})
            while True:
                yield sse(await sub.queue.get())
        finally:
            sub.heartbeat.cancel()
            subs = self._subs.get(channel, [])
            if sub in subs:
                subs.remove(sub)

    def subscribers(self, channel: str) -> int:
        return len(self._subs.get(channel, []))

    def publish(self, channel: str, event: dict) -> None:
        """Non-blocking, so plain callbacks (reveal steps) can call it."""
        for sub in self._subs.get(channel, []):
            sub.queue.put_nowait(event)

hub = StreamHub()

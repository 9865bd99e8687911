# services/draw.py
import logging
import secrets
import string
from time import time
from typing import Optional

from errors import DrawInProgress, EmptyRoster
from models import DrawRequest, DrawResult
from rng.commit import roster_root
from rng.fair import SLICE_CHARS, combine, roll_from_digest, select_index
from services.reveal import RevealController, RevealState

logger = logging.getLogger(__name__)

SEED_ALPHABET = string.digits + string.ascii_uppercase
SEED_LEN = 8

def new_client_seed() -> str:
    return "".join(secrets.choice(SEED_ALPHABET) for _ in range(SEED_LEN))


class DrawOrchestrator:
    """resolve entropy -> combine with the client seed -> select -> DrawResult"""

    def __init__(self, resolver, reveal: Optional[RevealController] = None):
        self.resolver = resolver
        self.reveal = reveal
        self._fetching = False

    @property
    def busy(self) -> bool:
        if self._fetching:
            return True
        return self.reveal is not None and self.reveal.state is RevealState.REVEALING

    async def draw(self, request: DrawRequest) -> DrawResult:
        if self.busy:
            raise DrawInProgress("Wait for the current draw to finish")
        # no entropy is spent on a roster that cannot be drawn
        if not request.entrants:
            raise EmptyRoster("Add participants before drawing.")

        self._fetching = True
        try:
            block = await self.resolver.resolve()
        finally:
            self._fetching = False

        size = len(request.entrants)
        digest = combine(request.client_seed, block.id)
        index = select_index(digest, size)
        result = DrawResult(
            block=block,
            client_seed=request.client_seed,
            digest=digest,
            hex_slice=digest[:SLICE_CHARS],
            roll=roll_from_digest(digest),
            winner_index=index,
            winner=request.entrants[index],
            roster_size=size,
            roster_root=roster_root(e.identity for e in request.entrants),
            created_at=int(time() * 1000),
        )
        logger.info("draw: block %s (height %d, verifiable=%s) -> #%d %s of %d",
                    block.id, block.height, block.verifiable, index,
                    result.winner.display_name, size)
        return result

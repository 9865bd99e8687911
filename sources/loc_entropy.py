import os
from models import BlockReference

FALLBACK_BYTES = 20          # same width as a Hive block id (40 hex chars)
FALLBACK_HEIGHT = 999999     # sentinel: no chain height behind this id

def local_block() -> BlockReference:
    """
    OS RNG bytes shaped like a block id. Nobody outside this process can
    check it, so it is marked verifiable=False.
    """
    return BlockReference(
        id=os.urandom(FALLBACK_BYTES).hex(),
        height=FALLBACK_HEIGHT,
        verifiable=False,
        provider=None,
    )

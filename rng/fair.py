"""
Verifiable draw primitives.

Anyone can recompute a draw with any SHA-256 implementation:

    digest = sha256(utf8(client_seed + "-" + block_id)).hex()
    value  = int(digest[:8], 16)
    roll   = value / 0xFFFFFFFF
    index  = min(floor(roll * roster_size), roster_size - 1)

HASH_NAME and DELIMITER must never change, past draws would stop verifying.
"""
import hashlib
import math
import re
from errors import InvalidRoster
from models import Verification

HASH_NAME = "sha256"
DELIMITER = "-"
SLICE_CHARS = 8              # 32 bits
MAX_U32 = 0xFFFFFFFF
_HEX_SLICE = re.compile(r"[0-9a-fA-F]{8}")

def combine(client_seed: str, block_id: str) -> str:
    data = f"{client_seed}{DELIMITER}{block_id}".encode("utf-8")
    return hashlib.new(HASH_NAME, data).hexdigest()

def roll_from_digest(digest: str) -> float:
    """First 32 bits of the digest as a fraction in [0, 1]."""
    head = digest[:SLICE_CHARS]
    if len(head) < SLICE_CHARS:
        raise InvalidRoster(f"digest too short: {digest!r}")
    # int(x, 16) alone accepts "0x12345" or " 1_2_3"
    if not _HEX_SLICE.fullmatch(head):
        raise InvalidRoster(f"digest is not hex: {digest!r}")
    return int(head, 16) / MAX_U32

def select_index(digest: str, roster_size: int) -> int:
    """
    Winner index in [0, roster_size).

    Every entrant holds one slot; Entrant.weight is where a ticket table
    would plug in, the index would then point into the expanded tickets.
    """
    if roster_size <= 0:
        raise InvalidRoster(f"roster size must be positive, got {roster_size}")
    index = math.floor(roll_from_digest(digest) * roster_size)
    # roll == 1.0 lands exactly on roster_size
    return min(index, roster_size - 1)

def verify(client_seed: str, block_id: str, roster_size: int) -> Verification:
    digest = combine(client_seed, block_id)
    return Verification(
        input=f"{client_seed}{DELIMITER}{block_id}",
        digest=digest,
        hex_slice=digest[:SLICE_CHARS],
        value=int(digest[:SLICE_CHARS], 16),
        roll=roll_from_digest(digest),
        index=select_index(digest, roster_size),
    )

from typing import Iterable
from blake3 import blake3

ROSTER_TAG = b"HF|roster|"

def roster_root(identities: Iterable[str]) -> str:
    """
    BLAKE3 commitment to the ordered roster snapshot.
    Length-prefixed so ["ab", "c"] and ["a", "bc"] differ.
    """
    h = blake3(ROSTER_TAG)
    for ident in identities:
        raw = ident.encode("utf-8")
        h.update(len(raw).to_bytes(4, "big"))
        h.update(raw)
    return h.hexdigest()

# services/denylist.py
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

# Known automated Hive/Steem accounts that reply to posts
KNOWN_BOTS = [
    "sbi5",
    "sbi6",
    "tinowhale",
    "steemitboard",
    "steem-plus",
    "steem-ua",
    "steemium",
    "threespeak",
    "tipu",
    "tts",
    "botcoin",
    "upvoteturtle",
    "steem-bounty",
    "beerlover",
    "hivebuzz",
    "dein-problem",
    "holybread",
    "germanbot",
    "pizzaboy77",
    "voinvote2",
    "voinvote3",
    "pizzabot",
    "ecency",
]

class Denylist:
    """Exact, case-sensitive set of account names excluded from remote rosters."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        self._set = set()
        for n in (KNOWN_BOTS if names is None else names):
            self.add(n)

    def add(self, name: str) -> bool:
        if not name or name in self._set:
            return False
        self._set.add(name)
        self._names.append(name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._set

    def __len__(self) -> int:
        return len(self._names)

    def names(self) -> List[str]:
        return list(self._names)

    def load(self, path: str) -> int:
        """Add names from a text file, one per line; '#' starts a comment."""
        added = 0
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                name = line.split("#", 1)[0].strip()
                if name and self.add(name):
                    added += 1
        logger.info("loaded %d denylisted accounts from %s", added, path)
        return added

def default_denylist(extra_file: Optional[str] = None) -> Denylist:
    dl = Denylist()
    if extra_file:
        dl.load(extra_file)
    return dl

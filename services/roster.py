"""
Roster building.

Two sources feed a roster:

* free text, one name per line. Every non-blank line is an entrant, repeats
  included; a repeated name gets a numbered identity (``alice#2``) so that
  identities stay unique while the displayed names do not change;
* the replies to a Hive post. Reply authors are deduplicated in first-seen
  order and known bots can be dropped.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from errors import EmptyRoster, InvalidSource, NoEligibleParticipants
from models import Entrant
from services.denylist import Denylist
from sources.hive import get_content_replies

logger = logging.getLogger(__name__)

POST_PATTERN = re.compile(r"@([\w.-]+)/([\w-]+)")
TEXT_AVATAR = "https://api.dicebear.com/7.x/avataaars/svg?seed={}"
HIVE_AVATAR = "https://images.hive.blog/u/{}/avatar"


def _int32(x: int) -> int:
    return ((x + 0x80000000) & 0xFFFFFFFF) - 0x80000000

def color_from_name(name: str) -> str:
    """'#RRGGBB' from a 31x string hash over UTF-16 code units (JS int32 wrapping)."""
    raw = name.encode("utf-16-le")
    h = 0
    for i in range(0, len(raw), 2):
        unit = int.from_bytes(raw[i:i + 2], "little")
        h = unit + _int32(_int32(h) << 5) - h
    return "#{:06X}".format(_int32(h) & 0x00FFFFFF)

def parse_post_url(url: str) -> Tuple[str, str]:
    """
    (author, permlink) from any URL containing ``@author/permlink``, e.g.
    https://hive.blog/@author/permlink or https://peakd.com/hive-1/@author/permlink
    """
    m = POST_PATTERN.search(url or "")
    if not m:
        raise InvalidSource(f"Invalid Hive URL: {url!r}")
    return m.group(1), m.group(2)


class Roster:
    """Ordered entrants with unique identities. Index order is draw order."""

    def __init__(self, entrants: Iterable[Entrant] = (), source: str = "empty"):
        self._entrants: List[Entrant] = []
        self.source = source
        seen = set()
        for e in entrants:
            if e.identity in seen:
                raise ValueError(f"duplicate identity in roster: {e.identity}")
            seen.add(e.identity)
            self._entrants.append(e)

    def __len__(self) -> int:
        return len(self._entrants)

    def __iter__(self):
        return iter(self._entrants)

    def __getitem__(self, i: int) -> Entrant:
        return self._entrants[i]

    @property
    def entrants(self) -> List[Entrant]:
        return list(self._entrants)

    def identities(self) -> List[str]:
        return [e.identity for e in self._entrants]

    def snapshot(self) -> Tuple[Entrant, ...]:
        return tuple(self._entrants)

    def remove(self, identity: str) -> bool:
        for i, e in enumerate(self._entrants):
            if e.identity == identity:
                del self._entrants[i]
                return True
        return False


class RosterBuilder:

    def __init__(self, denylist: Optional[Denylist] = None,
                 replies_url: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.denylist = denylist if denylist is not None else Denylist()
        self.replies_url = replies_url
        self.transport = transport

    def from_text(self, text: str) -> Roster:
        names = [line.strip() for line in (text or "").splitlines()]
        names = [n for n in names if n]
        if not names:
            raise EmptyRoster("Enter at least one name.")

        counts: dict[str, int] = {}
        taken = set()
        entrants = []
        for name in names:
            n = counts.get(name, 0) + 1
            identity = name if n == 1 else f"{name}#{n}"
            while identity in taken:
                n += 1
                identity = f"{name}#{n}"
            counts[name] = n
            taken.add(identity)
            entrants.append(Entrant(
                identity=identity,
                display_name=name,
                avatar=TEXT_AVATAR.format(quote(name, safe="")),
                color=color_from_name(name),
            ))
        return Roster(entrants, source="text")

    def build(self, authors: Iterable[str], exclude_automated: bool = True) -> Roster:
        """Deduplicate by identity (first seen wins) and optionally drop denylisted bots."""
        seen = set()
        entrants = []
        total = 0
        for name in authors:
            total += 1
            if name in seen:
                continue
            if exclude_automated and name in self.denylist:
                continue
            seen.add(name)
            entrants.append(Entrant(
                identity=name,
                display_name=name,
                avatar=HIVE_AVATAR.format(name),
                color=color_from_name(name),
            ))

        if total == 0:
            raise EmptyRoster("The post has no replies.")
        if not entrants:
            raise NoEligibleParticipants("No eligible participants found.")
        return Roster(entrants, source="hive")

    async def from_post(self, url: str, exclude_automated: bool = True) -> Roster:
        author, permlink = parse_post_url(url)
        authors = await get_content_replies(author, permlink, url=self.replies_url,
                                            transport=self.transport)
        roster = self.build(authors, exclude_automated)
        logger.info("loaded %d entrants from @%s/%s (%d replies)",
                    len(roster), author, permlink, len(authors))
        return roster

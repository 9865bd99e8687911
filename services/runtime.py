# Process-wide instances used by the API routers
import os
from settings import settings
from streams import hub
from sources.hive import EntropyResolver
from services.denylist import default_denylist
from services.poller import BlockPoller
from services.roster import RosterBuilder
from services.session import DrawSession, HubListener
from services.store import JsonHistoryStore

HISTORY_FILE = os.path.join(settings.STORE_DIR, "history.json")

# raises ConfigurationError at import when no provider and no fallback are configured
resolver = EntropyResolver()
denylist = default_denylist(settings.BOTS_FILE)

session = DrawSession(
    resolver,
    builder=RosterBuilder(denylist),
    history=JsonHistoryStore(HISTORY_FILE, limit=settings.HISTORY_LIMIT),
)
session.add_listener(HubListener(hub, channel="draws"))

poller = BlockPoller(resolver, interval=settings.POLL_INTERVAL)

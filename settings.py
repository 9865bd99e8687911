from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Hive API nodes, tried in this order for the head block
    HIVE_NODES: List[str] = [
        "https://api.hive.blog",
        "https://api.deathwing.me",
        "https://anyx.io",
        "https://api.openhive.network",
    ]
    # node used for fetching post replies (roster source)
    HIVE_API_URL: str = "https://api.hive.blog"

    PROVIDER_TIMEOUT: float = 5.0         # seconds per RPC call
    FALLBACK_ENABLED: bool = True         # local randomness when every node fails

    POLL_INTERVAL: float = 4.0            # latest-block polling for display
    HISTORY_LIMIT: int = 10
    STORE_DIR: str = "./storage"
    BOTS_FILE: Optional[str] = None       # extra denylisted accounts, one per line

    LOG_LEVEL: str = "INFO"

settings = Settings()

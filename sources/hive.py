# sources/hive.py
import logging
import httpx
from typing import Any, List, Optional, Sequence
from settings import settings
from models import BlockReference
from errors import ConfigurationError, SourceUnavailable
from sources.loc_entropy import local_block

logger = logging.getLogger(__name__)

HIVE_BLOCK_URL = "https://hiveblocks.com/b/{}"

async def _rpc(url: str, method: str, params: list[Any], timeout: float,
               transport: Optional[httpx.AsyncBaseTransport] = None):
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as cli:
        r = await cli.post(url, json={
            "jsonrpc": "2.0", "id": 1, "method": method, "params": params
        })
        r.raise_for_status()
        j = r.json()
        if not isinstance(j, dict):
            raise ValueError(f"unexpected JSON-RPC payload from {url}")
        if "error" in j:
            raise RuntimeError(str(j["error"]))
        if "result" not in j:
            raise ValueError(f"no result in response from {url}")
        return j["result"]

async def get_head_block(node: str, timeout: float,
                         transport: Optional[httpx.AsyncBaseTransport] = None) -> BlockReference:
    res = await _rpc(node, "condenser_api.get_dynamic_global_properties", [], timeout, transport)
    block_id = res.get("head_block_id") if isinstance(res, dict) else None
    height = res.get("head_block_number") if isinstance(res, dict) else None
    if not isinstance(block_id, str) or not block_id:
        raise ValueError(f"{node}: head_block_id missing")
    if isinstance(height, bool) or not isinstance(height, int):
        raise ValueError(f"{node}: head_block_number missing")
    return BlockReference(id=block_id, height=height, verifiable=True, provider=node)

async def get_content_replies(author: str, permlink: str,
                              url: Optional[str] = None,
                              timeout: Optional[float] = None,
                              transport: Optional[httpx.AsyncBaseTransport] = None) -> List[str]:
    """Authors of the direct replies to a post, in the order the node returns them."""
    url = url or settings.HIVE_API_URL
    try:
        res = await _rpc(url, "condenser_api.get_content_replies", [author, permlink],
                         timeout or settings.PROVIDER_TIMEOUT, transport)
    except (httpx.HTTPError, ValueError, RuntimeError) as e:
        logger.warning("replies fetch for @%s/%s failed: %s", author, permlink, e)
        raise SourceUnavailable(f"Failed to fetch replies from Hive: {e}") from e

    if not isinstance(res, list):
        raise SourceUnavailable("Hive returned an unexpected replies payload")
    authors = []
    for reply in res:
        name = reply.get("author") if isinstance(reply, dict) else None
        if not isinstance(name, str) or not name:
            raise SourceUnavailable("Hive reply without an author")
        authors.append(name)
    return authors


def _check_node(node: str) -> None:
    try:
        url = httpx.URL(node)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Malformed Hive node URL {node!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Hive node must be an absolute http(s) URL, got {node!r}")


class EntropyResolver:
    """
    Head block of the first Hive node that answers, tried strictly in order.
    A failing node is skipped; when all fail the local fallback is used.
    """

    def __init__(self, nodes: Optional[Sequence[str]] = None,
                 fallback: Optional[bool] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.nodes = list(settings.HIVE_NODES if nodes is None else nodes)
        self.fallback = settings.FALLBACK_ENABLED if fallback is None else fallback
        self.timeout = timeout or settings.PROVIDER_TIMEOUT
        self.transport = transport
        if not self.nodes and not self.fallback:
            raise ConfigurationError("No entropy providers configured and local fallback disabled")
        for node in self.nodes:
            _check_node(node)

    async def resolve(self) -> BlockReference:
        for node in self.nodes:
            try:
                return await get_head_block(node, self.timeout, self.transport)
            except (httpx.HTTPError, httpx.InvalidURL, ValueError, RuntimeError) as e:
                logger.warning("node %s failed, trying next: %s", node, e)

        if not self.fallback:
            raise SourceUnavailable("All Hive nodes are unreachable")
        logger.warning("All Hive nodes unreachable, falling back to local entropy")
        return local_block()

    @staticmethod
    def explorer_url(block: BlockReference) -> Optional[str]:
        return HIVE_BLOCK_URL.format(block.height) if block.verifiable else None

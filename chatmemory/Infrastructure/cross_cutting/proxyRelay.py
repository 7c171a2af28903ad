import logging
from typing import Dict, Optional, Tuple
import httpx
from chatmemory.config import Settings, settings
from chatmemory.Domain import IProxyRelay
from chatmemory.Infrastructure.data.weaviate.context.weaviateContext import WeaviateContext

logger = logging.getLogger(__name__)

# Hop-by-hop or re-encoded by httpx, never relayed as-is
DROPPED_RESPONSE_HEADERS = {"transfer-encoding", "content-encoding", "content-length"}
DROPPED_REQUEST_HEADERS = {"host", "content-length"}


class ProxyRelay(IProxyRelay):
    """Pass-through relay to the agent and Weaviate hosts"""

    TARGETS = ("agent", "weaviate")

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or settings
        self.transport = transport

    def upstream_for(self, target: str) -> Tuple[str, Dict[str, str]]:
        if target == "agent":
            headers = {}
            if self.config.AGENT_DANK_API_KEY:
                headers["X-API-Key"] = self.config.AGENT_DANK_API_KEY
            return self.config.AGENT_HOST.rstrip("/"), headers
        if target == "weaviate":
            connection = WeaviateContext.build_connection(self.config)
            return connection.base_url, dict(connection.headers)
        raise ValueError(f"Unknown proxy target: {target}")

    async def forward(
        self,
        target: str,
        method: str,
        path: str,
        query: str,
        headers: Dict[str, str],
        body: Optional[bytes]
    ) -> Tuple[int, Dict[str, str], bytes]:
        base_url, injected = self.upstream_for(target)
        url = f"{base_url}/{path.lstrip('/')}"
        if query:
            url = f"{url}?{query}"

        out_headers = {
            key: value for key, value in headers.items()
            if key.lower() not in DROPPED_REQUEST_HEADERS
        }
        out_headers.update(injected)
        content = None if method.upper() in ("GET", "HEAD") else body

        logger.info(f"[{target}] {method} {url}")

        kwargs = {"timeout": self.config.AGENT_TIMEOUT_SECONDS}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        async with httpx.AsyncClient(**kwargs) as client:
            upstream = await client.request(method, url, headers=out_headers, content=content or None)

        relay_headers = {
            key: value for key, value in upstream.headers.items()
            if key.lower() not in DROPPED_RESPONSE_HEADERS
        }
        return upstream.status_code, relay_headers, upstream.content

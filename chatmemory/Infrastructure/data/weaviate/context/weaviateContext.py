"""
Connection settings for the Weaviate message store.

The connection (scheme, host, gRPC endpoint and auth headers) is resolved
once from the settings object when the context is built and kept as a value,
so every log line can report the host the client actually talks to.
"""
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlsplit

import weaviate
from weaviate import WeaviateAsyncClient
from pydantic import BaseModel, Field

from chatmemory.config import Settings, settings


class WeaviateConnection(BaseModel):
    scheme: str
    host: str
    grpc_host: str = ""
    grpc_port: int = 50051
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    @property
    def secure(self) -> bool:
        return self.scheme == "https"

    @property
    def hostname(self) -> str:
        return urlsplit(self.base_url).hostname or self.host

    @property
    def port(self) -> int:
        return urlsplit(self.base_url).port or (443 if self.secure else 80)


def parse_host(raw: str, fallback_scheme: str) -> Tuple[str, str]:
    """
    Splits a host setting into (scheme, host).

    Args:
        raw: 'https://weaviate.example.com', 'localhost:8080', ...
        fallback_scheme: scheme used when raw carries none

    Returns:
        Tuple (scheme, host); raw is kept as host when it cannot be parsed
    """
    value = raw if raw.startswith("http") else f"{fallback_scheme}://{raw}"
    parts = urlsplit(value)
    if not parts.netloc:
        return fallback_scheme, raw
    return parts.scheme, parts.netloc


ClientFactory = Callable[[WeaviateConnection], WeaviateAsyncClient]


class WeaviateContext:
    """Builds async Weaviate clients bound to the configured host"""

    def __init__(
        self,
        config: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None
    ):
        self.config = config or settings
        self.client_factory = client_factory
        self.connection = self.build_connection(self.config)

    @staticmethod
    def build_connection(config: Settings) -> WeaviateConnection:
        headers: Dict[str, str] = {}

        if config.is_local:
            scheme, host = parse_host(config.WEAVIATE_LOCAL_HOST, "http")
        else:
            scheme, host = parse_host(config.WEAVIATE_HOST, "https")
            if config.WEAVIATE_DANK_API_KEY:
                headers["X-API-Key"] = config.WEAVIATE_DANK_API_KEY
            if config.WEAVIATE_DANK_PROJECT_ID:
                headers["X-Project-ID"] = config.WEAVIATE_DANK_PROJECT_ID

        return WeaviateConnection(
            scheme=scheme,
            host=host,
            grpc_host=config.WEAVIATE_GRPC_HOST,
            grpc_port=config.WEAVIATE_GRPC_PORT,
            headers=headers
        )

    def client(self) -> WeaviateAsyncClient:
        '''Returns an unconnected client; use it as an async context manager'''
        if self.client_factory is not None:
            return self.client_factory(self.connection)

        connection = self.connection
        return weaviate.use_async_with_custom(
            http_host=connection.hostname,
            http_port=connection.port,
            http_secure=connection.secure,
            grpc_host=connection.grpc_host or connection.hostname,
            grpc_port=connection.grpc_port,
            grpc_secure=connection.secure,
            headers=connection.headers,
            skip_init_checks=self.config.WEAVIATE_SKIP_INIT_CHECKS
        )

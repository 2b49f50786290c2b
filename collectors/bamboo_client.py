"""Client for the Bamboo REST API (agents, build queue, server info)."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

import httpx

from .base import Agent, QueueSnapshot, ServerInfo
from .errors import ConfigurationError, DecodeError, TransportError, UpstreamStatusError

AGENTS_ENDPOINT = "/rest/api/latest/agent"
QUEUE_ENDPOINT = "/rest/api/latest/queue"
INFO_ENDPOINT = "/rest/api/latest/info"

SUPPORTED_SCHEMES = ("http", "https")
DEFAULT_TIMEOUT = 3.0


def _typed(obj: dict, key: str, kind: type, default: Any, endpoint: str) -> Any:
    """Read obj[key], treating absent/null as default and rejecting wrong types."""
    value = obj.get(key)
    if value is None:
        return default
    # bool is an int subclass; a JSON true is not a valid id or size.
    if kind is int and isinstance(value, bool):
        raise DecodeError(endpoint, f"field {key!r} must be an integer, got {value!r}")
    if not isinstance(value, kind):
        raise DecodeError(
            endpoint, f"field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


class BambooClient:
    def __init__(
        self,
        uri: str,
        user: str,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        parsed = urlparse(uri or "")
        if parsed.scheme not in SUPPORTED_SCHEMES:
            raise ConfigurationError(f"schema not supported: {uri!r} (use http or https)")
        if not parsed.netloc:
            raise ConfigurationError(f"bamboo uri has no host: {uri!r}")
        self.uri = uri.rstrip("/")
        self.auth = httpx.BasicAuth(user, password)
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, endpoint: str) -> bytes:
        """GET one endpoint and return the raw body. Raises ScrapeError subclasses."""
        url = f"{self.uri}{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                auth=self.auth,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.get(
                    url,
                    params={"os_authType": "basic"},
                    headers={"Accept": "application/json"},
                )
        except httpx.RequestError as e:
            raise TransportError(endpoint, e) from e

        if resp.status_code != 200:
            raise UpstreamStatusError(endpoint, resp.status_code)
        return resp.content

    async def _fetch_json(self, endpoint: str) -> Any:
        body = await self.fetch(endpoint)
        try:
            return json.loads(body)
        except (ValueError, RecursionError) as e:
            raise DecodeError(endpoint, str(e)) from e

    async def get_agents(self) -> list[Agent]:
        data = await self._fetch_json(AGENTS_ENDPOINT)
        if not isinstance(data, list):
            raise DecodeError(AGENTS_ENDPOINT, f"expected a JSON array, got {type(data).__name__}")

        agents: list[Agent] = []
        for item in data:
            if not isinstance(item, dict):
                raise DecodeError(AGENTS_ENDPOINT, f"expected agent object, got {type(item).__name__}")
            agents.append(
                Agent(
                    id=_typed(item, "id", int, 0, AGENTS_ENDPOINT),
                    host_name=_typed(item, "name", str, "", AGENTS_ENDPOINT),
                    remote_type=_typed(item, "type", str, "", AGENTS_ENDPOINT),
                    active=_typed(item, "active", bool, False, AGENTS_ENDPOINT),
                    enabled=_typed(item, "enabled", bool, False, AGENTS_ENDPOINT),
                    busy=_typed(item, "busy", bool, False, AGENTS_ENDPOINT),
                )
            )
        return agents

    async def get_queue(self) -> QueueSnapshot:
        data = await self._fetch_json(QUEUE_ENDPOINT)
        if not isinstance(data, dict):
            raise DecodeError(QUEUE_ENDPOINT, f"expected a JSON object, got {type(data).__name__}")
        queued = data.get("queuedBuilds")
        if not isinstance(queued, dict):
            raise DecodeError(QUEUE_ENDPOINT, "missing queuedBuilds object")
        if "size" not in queued or queued["size"] is None:
            raise DecodeError(QUEUE_ENDPOINT, "missing queuedBuilds.size")
        size = _typed(queued, "size", int, 0, QUEUE_ENDPOINT)
        if size < 0:
            raise DecodeError(QUEUE_ENDPOINT, f"negative queuedBuilds.size: {size}")
        return QueueSnapshot(size=size)

    async def get_server_info(self) -> ServerInfo:
        data = await self._fetch_json(INFO_ENDPOINT)
        if not isinstance(data, dict):
            raise DecodeError(INFO_ENDPOINT, f"expected a JSON object, got {type(data).__name__}")
        return ServerInfo(
            build_number=_typed(data, "buildNumber", str, "", INFO_ENDPOINT),
            state=_typed(data, "state", str, "", INFO_ENDPOINT),
            version=_typed(data, "version", str, "", INFO_ENDPOINT),
        )

"""
Shared pytest fixtures: an in-memory Bamboo server behind httpx.MockTransport.
"""

from __future__ import annotations

import json

import httpx
import pytest

from collectors import BambooClient, BambooCollector
from collectors.bamboo_client import AGENTS_ENDPOINT, INFO_ENDPOINT, QUEUE_ENDPOINT

BASE_URI = "http://bamboo.test"

AGENTS = [
    {"id": 1, "name": "A", "type": "remote", "active": True, "enabled": True, "busy": True},
    {"id": 2, "name": "B", "type": "local", "active": False, "enabled": True, "busy": False},
]
QUEUE = {"queuedBuilds": {"size": 2, "start-index": 0, "max-result": 2}}
INFO = {"buildNumber": "90215", "state": "Running", "version": "9.2.1"}


class FakeBamboo:
    """Answers the three Bamboo endpoints; tests override single responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        # endpoint -> (status, body) or an httpx exception type to raise
        self.responses: dict[str, object] = {
            AGENTS_ENDPOINT: (200, json.dumps(AGENTS).encode()),
            QUEUE_ENDPOINT: (200, json.dumps(QUEUE).encode()),
            INFO_ENDPOINT: (200, json.dumps(INFO).encode()),
        }

    def reply(self, endpoint: str, status: int = 200, body=None, raw: bytes | None = None) -> None:
        content = raw if raw is not None else json.dumps(body).encode()
        self.responses[endpoint] = (status, content)

    def fail(self, endpoint: str, exc_type: type[httpx.RequestError] = httpx.ConnectError) -> None:
        self.responses[endpoint] = exc_type

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        for endpoint, response in self.responses.items():
            if path.endswith(endpoint):
                if isinstance(response, type):
                    raise response("upstream unreachable", request=request)
                status, content = response
                return httpx.Response(status, content=content)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def bamboo() -> FakeBamboo:
    return FakeBamboo()


@pytest.fixture
def client(bamboo: FakeBamboo) -> BambooClient:
    return BambooClient(BASE_URI, "admin", "s3cret", transport=bamboo.transport)


@pytest.fixture
def collector(client: BambooClient) -> BambooCollector:
    return BambooCollector(client)

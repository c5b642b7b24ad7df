import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from harvest_mcp.client import HarvestClient
from harvest_mcp.config import Config
from harvest_mcp.tools import build_registry

BASE_PATH = "/v2"


class FakeHarvest:
    """In-memory stand-in for the Harvest API, served through httpx.MockTransport.

    Unrouted requests answer 200 with ``{"id": 1}``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], httpx.Response] = {}

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        if text is not None:
            response = httpx.Response(status_code, text=text, headers=headers)
        elif json_body is not None:
            response = httpx.Response(status_code, json=json_body, headers=headers)
        else:
            response = httpx.Response(status_code, headers=headers)
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(BASE_PATH):]
        response = self.routes.get((request.method, path))
        if response is None:
            return httpx.Response(200, json={"id": 1})
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_path(self) -> str:
        return self.last.url.path[len(BASE_PATH):]

    @property
    def last_params(self) -> Dict[str, str]:
        return dict(self.last.url.params)

    @property
    def last_json(self) -> Any:
        if not self.last.content:
            return None
        return json.loads(self.last.content)


def payload(result) -> Any:
    """Decode the JSON text of a successful tool result."""
    assert not result.isError, result.content[0].text
    return json.loads(result.content[0].text)


def error_text(result) -> str:
    assert result.isError
    return result.content[0].text


@pytest.fixture
def config():
    return Config(access_token="test-token", account_id="12345")


@pytest.fixture
def harvest():
    return FakeHarvest()


@pytest.fixture
def client(config, harvest):
    return HarvestClient(config, transport=httpx.MockTransport(harvest.handler))


@pytest.fixture
def registry(client):
    return build_registry(client)

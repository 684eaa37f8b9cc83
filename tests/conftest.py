"""
Shared test configuration and fixtures for Skylink tests.

Provides mocked aiohttp sessions whose get/head calls are routed by URL, so tests can
describe the network as a table of URL -> response (or exception) and then assert on the
calls that were made.
"""

import json
from typing import Any, Dict, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientConnectionError, ClientResponse, ClientSession

Route = Union[ClientResponse, BaseException]


def create_mock_response(
    status: int = 200,
    json_body: Any = None,
    text_body: Optional[str] = None,
    json_error: Optional[BaseException] = None,
) -> ClientResponse:
    """Create a mock aiohttp ClientResponse."""
    mock_response = AsyncMock(spec=ClientResponse)
    mock_response.status = status

    if json_error is not None:
        mock_response.json.side_effect = json_error
    else:
        mock_response.json.return_value = json_body

    if text_body is None and json_body is not None:
        text_body = json.dumps(json_body)
    mock_response.text.return_value = text_body if text_body is not None else ""
    return mock_response


def create_context(response: ClientResponse) -> MagicMock:
    """Wrap a response in an async context manager, like session.get(...) returns."""
    context = MagicMock()
    context.__aenter__.return_value = response
    context.__aexit__.return_value = False
    return context


class RoutedSession:
    """
    A mocked ClientSession answering get/head calls from per-method route tables.

    Unrouted URLs fail with ClientConnectionError, the way an unreachable host would.
    """

    def __init__(self) -> None:
        self.get_routes: Dict[str, Route] = {}
        self.head_routes: Dict[str, Route] = {}
        self.session = AsyncMock(spec=ClientSession)
        self.session.get.side_effect = lambda url, **kwargs: self._dispatch(
            self.get_routes, url
        )
        self.session.head.side_effect = lambda url, **kwargs: self._dispatch(
            self.head_routes, url
        )

    @staticmethod
    def _dispatch(routes: Dict[str, Route], url: str) -> MagicMock:
        route = routes.get(url)
        if route is None:
            raise ClientConnectionError(f"no route to {url}")
        if isinstance(route, BaseException):
            raise route
        return create_context(route)

    def get_urls(self) -> list:
        return [c.args[0] for c in self.session.get.call_args_list]

    def head_urls(self) -> list:
        return [c.args[0] for c in self.session.head.call_args_list]


def dns_url(handle: str) -> str:
    return f"https://cloudflare-dns.com/dns-query?name=_atproto.{handle}&type=TXT"


def dns_answer(handle: str, did: str) -> Dict[str, Any]:
    return {
        "Status": 0,
        "Answer": [
            {
                "name": f"_atproto.{handle}",
                "type": 16,
                "TTL": 300,
                "data": f'"did={did}"',
            }
        ],
    }


def did_document(did: str, pds: str) -> Dict[str, Any]:
    return {
        "@context": ["https://www.w3.org/ns/did/v1"],
        "id": did,
        "alsoKnownAs": ["at://alice.example"],
        "service": [
            {
                "id": "#atproto_pds",
                "type": "AtprotoPersonalDataServer",
                "serviceEndpoint": pds,
            }
        ],
    }


@pytest.fixture
def routed() -> RoutedSession:
    """Provide a RoutedSession with empty route tables."""
    return RoutedSession()

"""Pytest configuration and fixtures for Kiwi MCP tests."""

import json
from unittest.mock import MagicMock, patch

import pytest

from mcp_server_kiwi.config import KiwiSettings


class MockResponse:
    """Stand-in for an aiohttp ClientResponse."""
    def __init__(self, status=200, body=b""):
        self.status = status
        self.body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class MockSession:
    """Stand-in for an aiohttp ClientSession that records each GET."""
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, headers=None):
        self.requests.append({"url": url, "params": params, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


def make_flight(index=0, price=100.0, stops=0, **overrides):
    """Build one Tequila /v2/search itinerary object."""
    route = [
        {
            "cityFrom": "London",
            "cityTo": "Prague",
            "flyFrom": "LHR",
            "flyTo": "PRG",
            "airline": "BA",
        }
    ]
    if stops:
        route = [
            {
                "cityFrom": "London" if leg == 0 else f"Hub {leg}",
                "cityTo": "Prague" if leg == stops else f"Hub {leg + 1}",
                "flyFrom": "LHR" if leg == 0 else f"H{leg}X",
                "flyTo": "PRG" if leg == stops else f"H{leg + 1}X",
                "airline": "LH",
            }
            for leg in range(stops + 1)
        ]

    flight = {
        "id": f"flight-{index}",
        "price": price,
        "cityFrom": "London",
        "cityTo": "Prague",
        "flyFrom": "LHR",
        "flyTo": "PRG",
        "local_departure": "2025-03-01T06:05:00.000Z",
        "local_arrival": "2025-03-01T09:00:00.000Z",
        "duration": {"departure": 6300, "return": 0, "total": 6300},
        "airlines": ["BA"],
        "route": route,
        "bags_price": {"1": 30.5},
        "deep_link": f"https://www.kiwi.com/deep?flight={index}",
    }
    flight.update(overrides)
    return flight


@pytest.fixture
def settings():
    """Settings pointing at the real Tequila host with a fake key."""
    return KiwiSettings(api_key="test-kiwi-key-123", timeout=5.0)


@pytest.fixture
def search_arguments():
    """Minimal valid plan_trip arguments."""
    return {
        "fly_from": "LHR",
        "fly_to": "PRG",
        "date_from": "01/03/2025",
        "date_to": "05/03/2025",
    }


@pytest.fixture
def flights_payload():
    """Tequila response with eight itineraries in price order."""
    return {
        "currency": "EUR",
        "data": [make_flight(index=i, price=100.0 + 10 * i) for i in range(8)],
    }


@pytest.fixture
def mock_tequila():
    """Patch aiohttp.ClientSession as seen by the Kiwi client.

    Call the fixture value with a status and a JSON payload (or a raw str/bytes body,
    or an exception to raise from session.get). Returns the session factory
    mock and the session, which records every request.
    """
    patchers = []

    def install(status=200, payload=None, body=None, error=None):
        if body is None:
            body = json.dumps(payload if payload is not None else {"data": []})
        session = MockSession(MockResponse(status=status, body=body), error=error)
        factory = MagicMock(return_value=session)
        patcher = patch("mcp_server_kiwi.kiwi_client.aiohttp.ClientSession", factory)
        patcher.start()
        patchers.append(patcher)
        return factory, session

    yield install

    for patcher in patchers:
        patcher.stop()

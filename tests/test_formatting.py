"""Tests for text rendering of search results."""

import pytest

from conftest import make_flight
from mcp_server_kiwi.formatting import (
    NO_RESULTS_MESSAGE,
    describe_stops,
    format_datetime,
    format_duration,
    format_itinerary,
    format_search_result,
)
from mcp_server_kiwi.models import Itinerary, SearchResult


class TestFormatDatetime:

    @pytest.mark.parametrize("value,expected", [
        ("2025-03-01T06:05:00.000Z", "01 Mar 2025, 06:05"),
        ("2025-03-01T06:05:00Z", "01 Mar 2025, 06:05"),
        ("2025-12-24T23:40:00+01:00", "24 Dec 2025, 23:40"),
    ])
    def test_iso_timestamps(self, value, expected):
        assert format_datetime(value) == expected

    def test_unparseable_passthrough(self):
        assert format_datetime("next tuesday") == "next tuesday"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        assert format_datetime(value) == "Unknown"


def test_format_duration():
    assert format_duration(6300) == "1h 45m"
    assert format_duration(7200) == "2h"
    assert format_duration(2700) == "45m"
    assert format_duration(0) == "0m"


def test_describe_stops():
    assert describe_stops(0) == "Direct flight"
    assert describe_stops(1) == "1 stopover"
    assert describe_stops(3) == "3 stopovers"


class TestFormatItinerary:

    def test_direct_flight_block(self):
        block = format_itinerary(1, Itinerary.from_api(make_flight(index=7, price=89.5)), "EUR")

        assert block.startswith("Flight 1: London (LHR) → Prague (PRG)\n")
        assert "Price: 89.50 EUR" in block
        assert "Departure: 01 Mar 2025, 06:05" in block
        assert "Arrival: 01 Mar 2025, 09:00" in block
        assert "Duration: 1h 45m" in block
        assert "Airline(s): BA" in block
        assert "Stops: Direct flight" in block
        assert "First checked bag: 30.50 EUR" in block
        assert "Booking link: https://www.kiwi.com/deep?flight=7" in block
        assert "Route details" not in block

    def test_route_details_for_stopovers(self):
        block = format_itinerary(2, Itinerary.from_api(make_flight(stops=1)), "EUR")

        assert "Stops: 1 stopover" in block
        assert "Route details:" in block
        assert "  Leg 1: London (LHR) → Hub 1 (H1X) [LH]" in block
        assert "  Leg 2: Hub 1 (H1X) → Prague (PRG) [LH]" in block

    def test_missing_optional_details(self):
        flight = make_flight()
        del flight["bags_price"]
        del flight["deep_link"]

        block = format_itinerary(1, Itinerary.from_api(flight), "USD")

        assert "Baggage information not available" in block
        assert "Booking link: Booking link not available" in block


class TestFormatSearchResult:

    def test_empty_result(self):
        result = SearchResult(itineraries=[], currency="EUR", total_found=0)

        assert format_search_result(result) == NO_RESULTS_MESSAGE

    def test_entries_in_provider_order(self, flights_payload):
        result = SearchResult.from_api(flights_payload, currency="EUR", limit=5)

        text = format_search_result(result)

        assert text.startswith("Showing 5 of 8 flights matching your criteria:")
        assert text.count("Booking link:") == 5
        assert text.count("\n---\n") == 4
        positions = [text.index(f"Flight {n}:") for n in range(1, 6)]
        assert positions == sorted(positions)
        assert "Flight 6:" not in text
        assert text.index("flight=0") < text.index("flight=4")

"""Plain-text rendering of flight search results for the assistant."""

import datetime
from typing import List, Optional

from .models import Itinerary, SearchResult

NO_RESULTS_MESSAGE = "No flights found matching your criteria."
DATETIME_FORMAT = "%d %b %Y, %H:%M"
SEPARATOR = "\n---\n\n"


def format_datetime(value: Optional[str]) -> str:
    """Convert an ISO-8601 timestamp to a readable local time.

    Args:
        value: Timestamp such as "2025-03-01T06:05:00.000Z"

    Returns:
        Formatted string (e.g., "01 Mar 2025, 06:05"), the input unchanged if
        it cannot be parsed, or "Unknown" if it is empty
    """
    if not value:
        return "Unknown"
    # fromisoformat() rejects a trailing "Z" before Python 3.11
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.datetime.fromisoformat(normalized)
    except ValueError:
        return value
    return parsed.strftime(DATETIME_FORMAT)


def format_duration(seconds: int) -> str:
    """Convert a duration in seconds to human-readable format (e.g., "2h 30m")."""
    minutes = seconds // 60
    hours = minutes // 60
    mins = minutes % 60
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}m"
    elif hours > 0:
        return f"{hours}h"
    else:
        return f"{mins}m"


def describe_stops(stops: int) -> str:
    if stops == 0:
        return "Direct flight"
    if stops == 1:
        return "1 stopover"
    return f"{stops} stopovers"


def format_itinerary(index: int, itinerary: Itinerary, currency: str) -> str:
    """Render one itinerary as a fixed-format text block."""
    lines: List[str] = [
        f"Flight {index}: {itinerary.city_from} ({itinerary.fly_from}) → "
        f"{itinerary.city_to} ({itinerary.fly_to})",
        f"Price: {itinerary.price:.2f} {currency}",
        f"Departure: {format_datetime(itinerary.local_departure)}",
        f"Arrival: {format_datetime(itinerary.local_arrival)}",
        f"Duration: {format_duration(itinerary.duration_seconds)}",
        f"Airline(s): {', '.join(itinerary.airlines) or 'Unknown'}",
        f"Stops: {describe_stops(itinerary.stops)}",
    ]

    if itinerary.first_bag_price is not None:
        lines.append(f"First checked bag: {itinerary.first_bag_price:.2f} {currency}")
    else:
        lines.append("Baggage information not available")

    lines.append(f"Booking link: {itinerary.deep_link or 'Booking link not available'}")

    if itinerary.stops > 0:
        lines.append("Route details:")
        for leg_number, leg in enumerate(itinerary.route, 1):
            lines.append(
                f"  Leg {leg_number}: {leg.city_from} ({leg.fly_from}) → "
                f"{leg.city_to} ({leg.fly_to}) [{leg.airline}]"
            )

    return "\n".join(lines) + "\n"


def format_search_result(result: SearchResult) -> str:
    """Render a whole search result, or NO_RESULTS_MESSAGE if it is empty."""
    if not result.itineraries:
        return NO_RESULTS_MESSAGE

    header = (
        f"Showing {len(result)} of {result.total_found} flights "
        f"matching your criteria:\n\n"
    )
    blocks = [
        format_itinerary(index, itinerary, result.currency)
        for index, itinerary in enumerate(result.itineraries, 1)
    ]
    return header + SEPARATOR.join(blocks)

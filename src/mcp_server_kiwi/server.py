#!/usr/bin/env python
"""
Kiwi Flights MCP Server

Exposes the Kiwi.com Tequila flight search API as a single MCP tool,
plan_trip. Each call validates its parameters, sends one search request to
Tequila and returns a plain-text summary of the cheapest (or otherwise
sorted) itineraries with booking links.
"""

import logging
import sys
from typing import Any, Dict, Mapping, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .config import KiwiSettings, load_settings
from .errors import ConfigurationError, KiwiError
from .formatting import format_search_result
from .kiwi_client import KiwiClient
from .models import SearchRequest

SERVER_NAME = "kiwi-flights"

logger = logging.getLogger(__name__)


# --- Helper functions ---

def log_info(tool_name: str, message: str):
    """Structured info logging for MCP tools."""
    print(f"[Kiwi:{tool_name}] {message}", file=sys.stderr)


def log_error(tool_name: str, error_type: str, message: str):
    """Structured error logging for MCP tools."""
    print(f"[Kiwi:{tool_name}] ERROR ({error_type}): {message}", file=sys.stderr)


async def plan_trip(arguments: Optional[Mapping[str, Any]], settings: KiwiSettings) -> str:
    """
    Run one flight search: validate, query Tequila, render.

    Args:
        arguments: Raw tool-call arguments
        settings: Process configuration holding the API key

    Returns:
        Plain-text summary of up to `limit` itineraries

    Raises:
        InvalidRequest: Missing or invalid parameters (raised before any network call)
        UpstreamError: Tequila returned an error status or was unreachable
        MalformedResponse: Tequila's response could not be parsed
    """
    logger.debug("Executing plan_trip")
    request = SearchRequest.from_arguments(arguments)
    client = KiwiClient(settings)
    result = await client.search(request)
    return format_search_result(result)


def create_server(settings: KiwiSettings) -> FastMCP:
    """Build the MCP server with the plan_trip tool bound to `settings`."""
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool(name="plan_trip")
    async def plan_trip_tool(
        fly_from: str,
        fly_to: str,
        date_from: str,
        date_to: str,
        return_from: Optional[str] = None,
        return_to: Optional[str] = None,
        adults: int = 1,
        children: int = 0,
        infants: int = 0,
        selected_cabins: str = "M",
        curr: str = "EUR",
        max_stopovers: int = 2,
        sort: str = "price",
        limit: int = 5,
    ) -> str:
        """
        Search for flights between destinations with flexible date options.

        Args:
            fly_from: IATA code of departure location (e.g., "LHR", "NYC", "UK")
            fly_to: IATA code of arrival location
            date_from: Earliest departure date in format dd/mm/yyyy
            date_to: Latest departure date in format dd/mm/yyyy
            return_from: Earliest return date in format dd/mm/yyyy (for round trips)
            return_to: Latest return date in format dd/mm/yyyy (for round trips)
            adults: Number of adult passengers, default 1
            children: Number of child passengers, default 0
            infants: Number of infant passengers, default 0
            selected_cabins: Cabin class - M (economy), W (economy premium), C (business), F (first class)
            curr: Currency for prices (e.g., EUR, USD, GBP), default EUR
            max_stopovers: Maximum number of stopovers, default 2
            sort: Sort results by price, duration, date or quality, default price
            limit: Maximum number of results to return, default 5

        Returns:
            Price, departure/arrival times and booking link for each flight found
        """
        arguments: Dict[str, Any] = {
            "fly_from": fly_from,
            "fly_to": fly_to,
            "date_from": date_from,
            "date_to": date_to,
            "return_from": return_from,
            "return_to": return_to,
            "adults": adults,
            "children": children,
            "infants": infants,
            "selected_cabins": selected_cabins,
            "curr": curr,
            "max_stopovers": max_stopovers,
            "sort": sort,
            "limit": limit,
        }
        log_info("PlanTrip", f"Searching {fly_from} -> {fly_to}, {date_from} to {date_to}")
        try:
            return await plan_trip(arguments, settings)
        except KiwiError as e:
            log_error("PlanTrip", type(e).__name__, str(e))
            raise ToolError(str(e)) from e

    return mcp


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """Main entry point for the Kiwi MCP server."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print("\n" + "="*70, file=sys.stderr)
        print("KIWI MCP SERVER - CONFIGURATION REQUIRED", file=sys.stderr)
        print("="*70, file=sys.stderr)
        print(f"\n{e}", file=sys.stderr)
        print("\nPlease set the following environment variables:", file=sys.stderr)
        print("  - KIWI_API_KEY: Your Kiwi.com Tequila API key", file=sys.stderr)
        print("\nOptional:", file=sys.stderr)
        print("  - KIWI_API_URL: API base URL (default https://api.tequila.kiwi.com)", file=sys.stderr)
        print("  - KIWI_TIMEOUT: Request timeout in seconds (default 30)", file=sys.stderr)
        print("  - LOG_LEVEL: Logging level (default INFO)", file=sys.stderr)
        print("="*70 + "\n", file=sys.stderr)
        sys.exit(1)

    # stdout is reserved for the MCP protocol
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    print("\n" + "="*70, file=sys.stderr)
    print("KIWI MCP SERVER STARTING", file=sys.stderr)
    print("="*70, file=sys.stderr)
    print(f"Base URL: {settings.base_url}", file=sys.stderr)
    print(f"Timeout: {settings.timeout}s", file=sys.stderr)
    print(f"API key: {settings.masked_key}", file=sys.stderr)
    print("="*70 + "\n", file=sys.stderr)

    mcp = create_server(settings)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""Exceptions raised by the Kiwi flight search tool."""

from typing import Optional


class KiwiError(Exception):
    """Base class for errors reported back to the calling assistant."""


class ConfigurationError(KiwiError):
    """Process configuration is missing or invalid."""


class InvalidRequest(KiwiError):
    """A tool call is missing a required parameter or has a bad value."""


class UpstreamError(KiwiError):
    """The Tequila API returned a non-success status or could not be reached."""

    def __init__(self, status: Optional[int], detail: str):
        self.status = status
        self.detail = detail
        if status is None:
            message = f"Network error: {detail}"
        else:
            message = f"API request failed ({status}): {detail}"
        super().__init__(message)


class MalformedResponse(KiwiError):
    """The Tequila API response could not be parsed."""

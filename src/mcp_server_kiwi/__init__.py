"""Kiwi.com flight search MCP server."""

from . import server


def main():
    """Main entry point for the package."""
    server.main()


__all__ = ['main', 'server']

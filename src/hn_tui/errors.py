from __future__ import annotations


class HackerNewsError(Exception):
    """Base class for errors raised by hn_tui."""


class NetworkError(HackerNewsError):
    """A request to the Hacker News API failed (transport, timeout, bad payload)."""


class NotFound(HackerNewsError):
    """An item does not exist, or was deleted or flagged dead."""

    def __init__(self, item_id: object):
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id


class OpenUrlError(HackerNewsError):
    """The system browser could not be launched."""


class TerminalError(HackerNewsError):
    """The terminal UI could not be started or failed while running."""

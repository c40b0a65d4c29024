from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .config import ITEM_WEB_URL
from .errors import NotFound

HN_DOMAIN = "news.ycombinator.com"


# --- Data models ---
class Category(Enum):
    """The fixed Hacker News story listings, in cycling order."""

    TOP = ("topstories", "Top")
    NEW = ("newstories", "New")
    BEST = ("beststories", "Best")
    SHOW = ("showstories", "Show")
    ASK = ("askstories", "Ask")
    JOBS = ("jobstories", "Jobs")

    def __init__(self, endpoint: str, label: str):
        self.endpoint = endpoint
        self.label = label

    def next(self) -> Category:
        members = list(Category)
        return members[(members.index(self) + 1) % len(members)]


@dataclass(frozen=True)
class Story:
    id: int
    title: str
    url: Optional[str] = None
    score: int = 0
    by: str = ""
    time: int = 0
    descendants: int = 0
    kind: str = "story"
    text: Optional[str] = None

    @classmethod
    def from_item(cls, item: Optional[Dict[str, Any]]) -> Story:
        """Build a story from an API item payload.

        The API answers ``null`` for unknown ids and keeps deleted or dead
        items around as stubs; all of those raise NotFound.
        """
        if not item:
            raise NotFound(None)
        item_id = item.get("id")
        if item.get("deleted") or item.get("dead") or item_id is None:
            raise NotFound(item_id)
        return cls(
            id=int(item_id),
            title=item.get("title") or "",
            url=item.get("url") or None,
            score=item.get("score") or 0,
            by=item.get("by") or "",
            time=item.get("time") or 0,
            descendants=item.get("descendants") or 0,
            kind=item.get("type") or "story",
            text=item.get("text") or None,
        )

    @property
    def domain(self) -> str:
        if not self.url:
            return HN_DOMAIN
        host = urlparse(self.url).netloc
        if host.startswith("www."):
            host = host[4:]
        return host or HN_DOMAIN

    @property
    def discussion_url(self) -> str:
        return ITEM_WEB_URL.format(id=self.id)

    @property
    def plain_text(self) -> str:
        """Self-post body with its HTML markup removed."""
        if not self.text:
            return ""
        return BeautifulSoup(self.text, "lxml").get_text("\n").strip()

    def time_ago(self, now: Optional[float] = None) -> str:
        now = time.time() if now is None else now
        seconds = max(0, int(now - self.time))
        if seconds < 60:
            return f"{seconds}s ago"
        if seconds < 3600:
            return f"{seconds // 60}m ago"
        if seconds < 86400:
            return f"{seconds // 3600}h ago"
        return f"{seconds // 86400}d ago"

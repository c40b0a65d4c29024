from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    API_BASE_URL,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
    RETRY_BACKOFF,
    RETRY_STATUSES,
    RETRY_TOTAL,
)
from .datamodels import Category, Story
from .errors import NetworkError, NotFound

logger = logging.getLogger("hn")


class HackerNewsClient:
    """Client for the two Firebase endpoints the app needs.

    ``requests.Session`` is shared between the scheduler's worker threads;
    its connection pool is sized to match.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        pool_size: int = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = self._create_session(pool_size)

    def _create_session(self, pool_size: int) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        retries = Retry(
            total=RETRY_TOTAL,
            backoff_factor=RETRY_BACKOFF,
            status_forcelist=list(RETRY_STATUSES),
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(
            max_retries=retries, pool_connections=pool_size, pool_maxsize=pool_size
        )
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def _get_json(self, url: str) -> Any:
        try:
            logger.debug("Fetching %s", url)
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.debug("Fetch failed for %s: %s", url, e)
            raise NetworkError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            logger.debug("Invalid JSON from %s: %s", url, e)
            raise NetworkError(f"Invalid response from {url}") from e

    def list_ids(self, category: Category) -> List[int]:
        """Return the ordered story ids of a listing."""
        data = self._get_json(f"{self.base_url}/{category.endpoint}.json")
        if not isinstance(data, list):
            raise NetworkError(f"Unexpected payload for {category.label} stories")
        logger.debug("%s listing has %d ids", category.label, len(data))
        return [int(i) for i in data]

    def get_story(self, item_id: int) -> Story:
        """Fetch one item; raises NotFound for missing, deleted or dead items."""
        data: Optional[dict] = self._get_json(f"{self.base_url}/item/{item_id}.json")
        if data is None:
            raise NotFound(item_id)
        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected payload for item {item_id}")
        return Story.from_item({"id": item_id, **data})

    def close(self) -> None:
        self.session.close()

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
API_BASE_URL = "https://hacker-news.firebaseio.com/v0"
ITEM_WEB_URL = "https://news.ycombinator.com/item?id={id}"
HTTP_TIMEOUT = 10
RETRY_TOTAL = 3
RETRY_BACKOFF = 0.3
RETRY_STATUSES = (429, 500, 502, 503, 504)

# Stories fetched per page, and the cap on concurrent item requests per page.
PAGE_SIZE = 30
MAX_IN_FLIGHT = 10
# Rows moved by PageUp/PageDown.
SCROLL_PAGE = 10
DEFAULT_VIEWPORT = 20

DEFAULT_THEME = "dracula"

CONFIG_PATH = os.path.expanduser("~/.config/hn/config.json")

REQUEST_HEADERS = {
    "User-Agent": "hn-tui/0.1 (+https://news.ycombinator.com/)",
    "Accept": "application/json",
}

# --- Logging ---
logger = logging.getLogger("hn")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/hn_debug_{ts}_{pid}.log"

    # The terminal belongs to the UI, so debug output goes to a file.
    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(threadName)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the optional configuration file. Missing or unreadable files yield {}."""
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        logger.debug("No config file at %s, using defaults.", path)
        return {}
    try:
        with open(path, "r") as f:
            config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.warning("Ignoring config at %s: expected a JSON object", path)
        return {}
    logger.info("Loaded config from %s", path)
    return config


def get_int(config: Dict[str, Any], key: str, default: int, minimum: int = 1) -> int:
    """Read a positive integer setting, falling back to the default when invalid."""
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Invalid value for %r: %r, using %d", key, value, default)
        return default
    if value < minimum:
        logger.warning("Value for %r below %d: %r, using %d", key, minimum, value, default)
        return default
    return int(value)

from __future__ import annotations

import logging
import webbrowser

from .errors import OpenUrlError

logger = logging.getLogger("hn")


def open_url(url: str) -> None:
    """Open ``url`` in the default browser; raises OpenUrlError on failure."""
    logger.info("Opening %s", url)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise OpenUrlError(f"Could not open {url}: {e}") from e
    if not opened:
        raise OpenUrlError(f"No browser available to open {url}")

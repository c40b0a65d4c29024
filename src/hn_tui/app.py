from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from textual.app import App, ComposeResult
from textual.widgets import Footer
from textual.worker import Worker, WorkerState

from . import keymap
from .api import HackerNewsClient
from .browser import open_url
from .config import (
    API_BASE_URL,
    DEFAULT_THEME,
    HTTP_TIMEOUT,
    MAX_IN_FLIGHT,
    PAGE_SIZE,
    get_int,
)
from .events import Event, Exit, FetchEvent, FetchPage, Intent, OpenUrl, Resized
from .messages import StateEvent
from .scheduler import FetchScheduler
from .state import AppState, Transition, apply, start
from .widgets import DetailsPanel, ErrorBanner, HeaderBar, StatusBar, StoryList

logger = logging.getLogger("hn")


class HackerNewsApp(App):
    """Owns the AppState and is the only code that replaces it.

    Key presses and fetch results both arrive as StateEvent messages, posted
    by bindings and by the scheduler's threads, and are handled on Textual's
    message loop one at a time. Each event is applied, the resulting intents
    are started, and every widget is redrawn from the new state.
    """

    TITLE = "Hacker News"
    CSS_PATH = Path(__file__).parent / "app.tcss"
    BINDINGS = keymap.BINDINGS

    def __init__(
        self,
        client: Optional[HackerNewsClient] = None,
        config: Optional[dict[str, Any]] = None,
        theme: Optional[str] = None,
        browser: Callable[[str], None] = open_url,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.config = config or {}
        self.page_size = get_int(self.config, "page_size", PAGE_SIZE)
        max_in_flight = get_int(self.config, "max_in_flight", MAX_IN_FLIGHT)
        self.client = client or HackerNewsClient(
            base_url=self.config.get("api_base", API_BASE_URL),
            timeout=get_int(self.config, "timeout", HTTP_TIMEOUT),
            pool_size=max_in_flight,
        )
        self.scheduler = FetchScheduler(self.client, self.page_size, max_in_flight)
        self.open_browser = browser
        self._theme_name = theme or DEFAULT_THEME
        self.app_state = AppState(page_size=self.page_size)

    def compose(self) -> ComposeResult:
        yield HeaderBar(id="header")
        yield ErrorBanner(id="error-banner")
        yield StoryList(id="stories")
        yield DetailsPanel(id="details")
        yield StatusBar(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.theme = self._theme_name
        self._commit(start(self.page_size, self.app_state.viewport), force_draw=True)

    # --- Events in ---
    def action_dispatch(self, action: str) -> None:
        event = keymap.event_for_action(action)
        if event is None:
            logger.warning("No event bound to action %r", action)
            return
        self.post_message(StateEvent(event))

    def resized(self, rows: int) -> None:
        if rows > 0:
            self.post_message(StateEvent(Resized(rows)))

    def on_state_event(self, message: StateEvent) -> None:
        self.apply_event(message.event)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        worker = event.worker
        if worker.group == "browser" and event.state is WorkerState.ERROR:
            logger.error("Browser worker failed: %s", worker.error)
            self.notify(str(worker.error), title="Open", severity="error")

    def on_unmount(self) -> None:
        # In-flight pages are abandoned, not awaited.
        self.scheduler.shutdown()
        self.client.close()

    def apply_event(self, event: Event) -> None:
        self._commit(apply(self.app_state, event))

    # --- State and intents out ---
    def _commit(self, transition: Transition, force_draw: bool = False) -> None:
        changed = transition.state is not self.app_state
        self.app_state = transition.state
        if changed or force_draw:
            self._draw()
        for intent in transition.intents:
            self._execute(intent)

    def _draw(self) -> None:
        state = self.app_state
        self.query_one(HeaderBar).show(state)
        self.query_one(ErrorBanner).show(state)
        self.query_one(StoryList).show(state)
        self.query_one(DetailsPanel).show(state)
        self.query_one(StatusBar).show(state)

    def _execute(self, intent: Intent) -> None:
        if isinstance(intent, FetchPage):
            logger.debug(
                "Fetching %s page %d (generation %d)",
                intent.category.label,
                intent.page,
                intent.generation,
            )
            # Superseded fetches are left to finish; their results are stale
            # by generation and get dropped when applied.
            self.scheduler.submit(intent, self._deliver)
        elif isinstance(intent, OpenUrl):
            self.run_worker(
                partial(self.open_browser, intent.url),
                name="browser",
                group="browser",
                thread=True,
                exit_on_error=False,
            )
        elif isinstance(intent, Exit):
            logger.info("Quitting")
            self.exit()

    def _deliver(self, result: FetchEvent) -> None:
        """Called on a fetch thread; the message is applied on the UI loop."""
        self.post_message(StateEvent(result))

from __future__ import annotations

from textual import events
from textual.widgets import Static

from .render import (
    render_details,
    render_error,
    render_header,
    render_status,
    render_story_list,
)
from .state import AppState


# --- UI Widgets ---
class HeaderBar(Static):
    def show(self, state: AppState) -> None:
        self.update(render_header(state))


class ErrorBanner(Static):
    def show(self, state: AppState) -> None:
        self.display = bool(state.error)
        self.update(render_error(state))


class StoryList(Static):
    """The story rows. Reports its height so the state can size the window."""

    def show(self, state: AppState) -> None:
        self.display = not (state.show_details and state.stories)
        self.update(render_story_list(state))

    def on_resize(self, event: events.Resize) -> None:
        self.app.resized(self.content_size.height)


class DetailsPanel(Static):
    def show(self, state: AppState) -> None:
        self.display = bool(state.show_details and state.stories)
        if self.display:
            self.update(render_details(state))


class StatusBar(Static):
    def show(self, state: AppState) -> None:
        self.update(render_status(state))

"""Pure rendering of an AppState snapshot into Rich renderables.

Nothing here touches Textual; widgets call these and ``update`` themselves
with the result.
"""
from __future__ import annotations

import time
from typing import Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from .datamodels import Story
from .state import AppState

HELP_TEXT = "[j/k] scroll [space] category [d] details [o] open [m] more [r] refresh [q] quit"
SELECTED_STYLE = "bold white on grey23"


def render_header(state: AppState) -> Text:
    text = Text()
    text.append(f"Hacker News - {state.category.label} Stories", style="bold yellow")
    if state.loading:
        label = "Loading more…" if state.stories else "Loading…"
        text.append(f"  {label}", style="italic cyan")
    text.append("  ")
    text.append(HELP_TEXT, style="dim")
    return text


def render_error(state: AppState) -> Text:
    if not state.error:
        return Text()
    return Text(f"Error: {state.error}", style="bold white on red")


def _story_meta(story: Story, now: float) -> str:
    return f" {story.score} pts | {story.time_ago(now)} | {story.descendants} comments"


def render_story_row(story: Story, rank: int, selected: bool, now: float) -> Text:
    line = Text()
    if selected:
        line.append("▶ ", style="green")
    elif story.url:
        line.append("  ")
    else:
        line.append("· ", style="dim")
    line.append(f"{rank:>3}. ", style="dim")
    line.append(story.title or "(untitled)", style="white")
    line.append(f" ({story.domain})", style="blue")
    line.append(_story_meta(story, now), style="grey62")
    if selected:
        line.stylize(SELECTED_STYLE, 2)
    return line


def render_story_list(state: AppState, now: Optional[float] = None) -> RenderableType:
    """The visible window of the list, with the selected row highlighted."""
    if not state.stories:
        if state.loading:
            return Text("Loading stories...", style="italic", justify="center")
        return Text("No stories.", style="dim", justify="center")
    now = time.time() if now is None else now
    rows = [
        render_story_row(story, state.scroll + i + 1, state.scroll + i == state.selected, now)
        for i, story in enumerate(state.visible)
    ]
    return Text("\n").join(rows)


def details_text(story: Story, now: Optional[float] = None) -> Text:
    now = time.time() if now is None else now
    text = Text()
    text.append(story.title or "(untitled)", style="bold underline yellow")
    text.append("\n\n")

    def field(label: str, value: str, style: str = "white") -> None:
        text.append(f"{label}: ", style="grey62")
        text.append(value, style=style)
        text.append("\n")

    field("Type", story.kind)
    field("Points", str(story.score), "green")
    field("By", story.by or "unknown", "blue")
    field("Time", story.time_ago(now))
    field("Comments", str(story.descendants))
    field("Discussion", story.discussion_url, "cyan")
    if story.url:
        text.append("\n")
        field("URL", story.url, "underline blue")
        field("Domain", story.domain, "cyan")
    body = story.plain_text
    if body:
        text.append("\n")
        text.append("Story Text:", style="bold grey62")
        text.append("\n\n")
        text.append(body)
        text.append("\n")
    text.append("\nPress ", style="dim")
    text.append("[d]", style="bold white")
    text.append(" to go back", style="dim")
    return text


def render_details(state: AppState, now: Optional[float] = None) -> RenderableType:
    story = state.selected_story
    if story is None:
        return Text()
    return Panel(details_text(story, now), title="Story Details", border_style="white")


def render_status(state: AppState) -> Text:
    if state.error and not state.loading:
        return Text.assemble(
            ("Error loading stories", "bold red"),
            " ",
            ("[r] retry  [m] retry page  [q] quit", "italic dim"),
        )
    if not state.stories:
        return Text("Loading..." if state.loading else "Nothing to show", style="white")
    position = f"Position: {state.selected + 1}/{len(state.stories)}"
    story = state.selected_story
    link = "[o] open" if story is not None and story.url else "[no link]"
    if state.loading:
        more = "Loading more stories..."
    elif state.has_more:
        more = "[m] more"
    else:
        more = "[all loaded]"
    return Text.assemble(
        (position, "white"), " ", (f"{link} | {more} | [q] quit", "italic dim")
    )

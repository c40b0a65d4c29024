"""The application state and its transition function.

``AppState`` is immutable; ``apply`` returns a new state together with the
intents (fetches, browser launches, exit) the App must carry out. The App
holds the only reference that ever gets replaced, so widgets can be handed
the state directly as a read-only snapshot.

Fetch results carry the generation they were requested under. Switching
category or refreshing bumps the generation, which turns every result
still in flight into a stale one that ``apply`` drops without looking at.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from .config import DEFAULT_VIEWPORT, PAGE_SIZE, SCROLL_PAGE
from .datamodels import Category, Story
from .events import (
    Event,
    Exit,
    FetchFailed,
    FetchPage,
    FetchSucceeded,
    Intent,
    JumpFirst,
    JumpLast,
    LoadMore,
    MoveDown,
    MoveUp,
    OpenSelected,
    OpenUrl,
    PageDown,
    PageUp,
    Quit,
    Refresh,
    Resized,
    SwitchCategory,
    ToggleDetails,
)

logger = logging.getLogger("hn")


@dataclass(frozen=True)
class AppState:
    category: Category = Category.TOP
    stories: Tuple[Story, ...] = ()
    # Offset into the category's id list of the most recently requested page.
    cursor: int = 0
    selected: int = 0
    # Index of the first visible row.
    scroll: int = 0
    viewport: int = DEFAULT_VIEWPORT
    show_details: bool = False
    loading: bool = True
    error: Optional[str] = None
    generation: int = 0
    has_more: bool = True
    page_size: int = PAGE_SIZE
    finished: bool = False

    @property
    def page(self) -> int:
        return self.cursor // self.page_size

    @property
    def selected_story(self) -> Optional[Story]:
        if not self.stories:
            return None
        return self.stories[self.selected]

    @property
    def visible(self) -> Tuple[Story, ...]:
        return self.stories[self.scroll : self.scroll + self.viewport]


@dataclass(frozen=True)
class Transition:
    state: AppState
    intents: Tuple[Intent, ...] = ()


def start(page_size: int = PAGE_SIZE, viewport: int = DEFAULT_VIEWPORT) -> Transition:
    """Initial state, loading page 0 of the Top listing."""
    state = AppState(page_size=page_size, viewport=max(1, viewport))
    return Transition(state, (FetchPage(state.category, 0, state.generation),))


def apply(state: AppState, event: Event) -> Transition:
    """Apply one event. Events that do not apply return ``state`` itself."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unhandled event: {event!r}")
    return handler(state, event)


# --- Selection ---
def _scroll_for(selected: int, scroll: int, viewport: int) -> int:
    if selected < scroll:
        return selected
    if selected >= scroll + viewport:
        return selected - viewport + 1
    return scroll


def _select(state: AppState, index: int) -> Transition:
    if not state.stories:
        return Transition(state)
    selected = min(max(index, 0), len(state.stories) - 1)
    scroll = _scroll_for(selected, state.scroll, state.viewport)
    if selected == state.selected and scroll == state.scroll:
        return Transition(state)
    return Transition(replace(state, selected=selected, scroll=scroll))


def _move_down(state: AppState, event: MoveDown) -> Transition:
    return _select(state, state.selected + 1)


def _move_up(state: AppState, event: MoveUp) -> Transition:
    return _select(state, state.selected - 1)


def _page_down(state: AppState, event: PageDown) -> Transition:
    return _select(state, state.selected + SCROLL_PAGE)


def _page_up(state: AppState, event: PageUp) -> Transition:
    return _select(state, state.selected - SCROLL_PAGE)


def _jump_first(state: AppState, event: JumpFirst) -> Transition:
    return _select(state, 0)


def _jump_last(state: AppState, event: JumpLast) -> Transition:
    return _select(state, len(state.stories) - 1)


def _resized(state: AppState, event: Resized) -> Transition:
    viewport = max(1, event.rows)
    if viewport == state.viewport:
        return Transition(state)
    scroll = _scroll_for(state.selected, min(state.scroll, state.selected), viewport)
    return Transition(replace(state, viewport=viewport, scroll=scroll))


# --- Loading ---
def _reload(state: AppState, category: Category, refresh: bool) -> Transition:
    generation = state.generation + 1
    new_state = replace(
        state,
        category=category,
        stories=(),
        cursor=0,
        selected=0,
        scroll=0,
        loading=True,
        has_more=True,
        generation=generation,
    )
    logger.debug(
        "Loading %s stories (generation %d, refresh=%s)", category.label, generation, refresh
    )
    return Transition(new_state, (FetchPage(category, 0, generation, refresh),))


def _switch_category(state: AppState, event: SwitchCategory) -> Transition:
    return _reload(state, state.category.next(), refresh=False)


def _refresh(state: AppState, event: Refresh) -> Transition:
    return _reload(state, state.category, refresh=True)


def _load_more(state: AppState, event: LoadMore) -> Transition:
    if state.loading or not state.has_more:
        return Transition(state)
    # A failed page is requested again rather than skipped.
    cursor = state.cursor if state.error else state.cursor + state.page_size
    new_state = replace(state, cursor=cursor, loading=True)
    return Transition(
        new_state, (FetchPage(state.category, new_state.page, state.generation),)
    )


def _fetch_succeeded(state: AppState, event: FetchSucceeded) -> Transition:
    if event.generation != state.generation:
        logger.debug(
            "Dropping stale page (generation %d, current %d)",
            event.generation,
            state.generation,
        )
        return Transition(state)
    seen = {s.id for s in state.stories}
    fresh = []
    for story in event.stories:
        if story.id not in seen:
            seen.add(story.id)
            fresh.append(story)
    stories = state.stories + tuple(fresh)
    selected = min(state.selected, max(len(stories) - 1, 0))
    new_state = replace(
        state,
        stories=stories,
        selected=selected,
        scroll=_scroll_for(selected, state.scroll, state.viewport),
        loading=False,
        error=None,
        has_more=event.has_more,
    )
    return Transition(new_state)


def _fetch_failed(state: AppState, event: FetchFailed) -> Transition:
    if event.generation != state.generation:
        logger.debug(
            "Dropping stale failure (generation %d, current %d): %s",
            event.generation,
            state.generation,
            event.error,
        )
        return Transition(state)
    return Transition(replace(state, error=event.error, loading=False))


# --- Other ---
def _toggle_details(state: AppState, event: ToggleDetails) -> Transition:
    if not state.stories:
        return Transition(state)
    return Transition(replace(state, show_details=not state.show_details))


def _open_selected(state: AppState, event: OpenSelected) -> Transition:
    story = state.selected_story
    if story is None or not story.url:
        return Transition(state)
    return Transition(state, (OpenUrl(story.url),))


def _quit(state: AppState, event: Quit) -> Transition:
    return Transition(replace(state, finished=True), (Exit(),))


_HANDLERS: Dict[type, Callable[[AppState, Event], Transition]] = {
    MoveDown: _move_down,
    MoveUp: _move_up,
    PageDown: _page_down,
    PageUp: _page_up,
    JumpFirst: _jump_first,
    JumpLast: _jump_last,
    SwitchCategory: _switch_category,
    LoadMore: _load_more,
    Refresh: _refresh,
    ToggleDetails: _toggle_details,
    OpenSelected: _open_selected,
    Resized: _resized,
    FetchSucceeded: _fetch_succeeded,
    FetchFailed: _fetch_failed,
    Quit: _quit,
}

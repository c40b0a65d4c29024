"""Events consumed by the state transition function, and the intents it emits.

Input events come from key presses, fetch events from the scheduler's
workers. Intents are side effects the App carries out after a transition.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .datamodels import Category, Story


# --- Input events ---
@dataclass(frozen=True)
class MoveDown:
    pass


@dataclass(frozen=True)
class MoveUp:
    pass


@dataclass(frozen=True)
class PageDown:
    pass


@dataclass(frozen=True)
class PageUp:
    pass


@dataclass(frozen=True)
class JumpFirst:
    pass


@dataclass(frozen=True)
class JumpLast:
    pass


@dataclass(frozen=True)
class SwitchCategory:
    pass


@dataclass(frozen=True)
class LoadMore:
    pass


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class ToggleDetails:
    pass


@dataclass(frozen=True)
class OpenSelected:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Resized:
    """The story list area now shows ``rows`` rows."""

    rows: int


InputEvent = Union[
    MoveDown,
    MoveUp,
    PageDown,
    PageUp,
    JumpFirst,
    JumpLast,
    SwitchCategory,
    LoadMore,
    Refresh,
    ToggleDetails,
    OpenSelected,
    Quit,
    Resized,
]


# --- Fetch events ---
@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    stories: Tuple[Story, ...]
    has_more: bool = True


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    error: str


FetchEvent = Union[FetchSucceeded, FetchFailed]
Event = Union[InputEvent, FetchEvent]


# --- Intents ---
@dataclass(frozen=True)
class FetchPage:
    category: Category
    page: int
    generation: int
    refresh: bool = False


@dataclass(frozen=True)
class OpenUrl:
    url: str


@dataclass(frozen=True)
class Exit:
    pass


Intent = Union[FetchPage, OpenUrl, Exit]

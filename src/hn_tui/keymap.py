from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Type

from textual.binding import Binding

from . import events
from .events import InputEvent

# (keys, action name, event, footer label). Fixed; there is no user override.
KEY_TABLE: Tuple[Tuple[Tuple[str, ...], str, Type[InputEvent], str], ...] = (
    (("j", "down"), "move_down", events.MoveDown, "Down"),
    (("k", "up"), "move_up", events.MoveUp, "Up"),
    (("space",), "switch_category", events.SwitchCategory, "Category"),
    (("o",), "open_selected", events.OpenSelected, "Open"),
    (("d",), "toggle_details", events.ToggleDetails, "Details"),
    (("m",), "load_more", events.LoadMore, "More"),
    (("r",), "refresh", events.Refresh, "Refresh"),
    (("pagedown",), "page_down", events.PageDown, "Page Down"),
    (("pageup",), "page_up", events.PageUp, "Page Up"),
    (("home",), "jump_first", events.JumpFirst, "First"),
    (("end",), "jump_last", events.JumpLast, "Last"),
    (("q",), "quit", events.Quit, "Quit"),
)

# Shown in the footer; the rest are still active.
FOOTER_ACTIONS = {"switch_category", "open_selected", "toggle_details", "load_more", "refresh", "quit"}

_ACTIONS: Dict[str, Type[InputEvent]] = {action: event for _, action, event, _ in KEY_TABLE}


def event_for_action(action: str) -> Optional[InputEvent]:
    event_type = _ACTIONS.get(action)
    return event_type() if event_type else None


def build_bindings() -> List[Binding]:
    return [
        Binding(
            ",".join(keys),
            f"dispatch('{action}')",
            label,
            show=action in FOOTER_ACTIONS,
            priority=True,
        )
        for keys, action, _, label in KEY_TABLE
    ]


BINDINGS = build_bindings()

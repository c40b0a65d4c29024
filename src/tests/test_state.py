from __future__ import annotations

import random

import pytest

from hn_tui.datamodels import Category, Story
from hn_tui.events import (
    Exit,
    FetchFailed,
    FetchPage,
    FetchSucceeded,
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
from hn_tui.state import AppState, apply, start


def make_story(i: int, url: str | None = "default") -> Story:
    if url == "default":
        url = f"https://example.com/{i}"
    return Story(id=i, title=f"Story {i}", url=url, score=i, by="pg", time=0)


def loaded(n: int, **kwargs) -> AppState:
    stories = tuple(make_story(i) for i in range(1, n + 1))
    kwargs.setdefault("loading", False)
    return AppState(stories=stories, **kwargs)


def test_start_issues_first_fetch():
    t = start()
    assert t.state.category is Category.TOP
    assert t.state.stories == ()
    assert t.state.generation == 0
    assert t.state.loading
    assert t.intents == (FetchPage(Category.TOP, 0, 0),)


def test_first_page_then_navigation():
    s1, s2, s3 = make_story(1), make_story(2), make_story(3)
    state = apply(start().state, FetchSucceeded(0, (s1, s2, s3))).state
    assert state.stories == (s1, s2, s3)
    assert not state.loading
    assert state.selected == 0

    state = apply(state, MoveDown()).state
    state = apply(state, MoveDown()).state
    assert state.selected == 2

    t = apply(state, MoveDown())
    assert t.state.selected == 2
    assert t.state is state
    assert t.intents == ()


def test_switch_category_from_loaded_state():
    state = loaded(10, selected=5, generation=3)
    t = apply(state, SwitchCategory())
    assert t.state.category is Category.NEW
    assert t.state.stories == ()
    assert t.state.selected == 0
    assert t.state.cursor == 0
    assert t.state.generation == 4
    assert t.state.loading
    assert t.intents == (FetchPage(Category.NEW, 0, 4),)


@pytest.mark.parametrize(
    "current,expected",
    [
        (Category.TOP, Category.NEW),
        (Category.NEW, Category.BEST),
        (Category.BEST, Category.SHOW),
        (Category.SHOW, Category.ASK),
        (Category.ASK, Category.JOBS),
        (Category.JOBS, Category.TOP),
    ],
)
def test_switch_category_cycles_and_resets(current, expected):
    state = loaded(12, category=current, selected=7, cursor=30, generation=2)
    t = apply(state, SwitchCategory())
    assert t.state.category is expected
    assert t.state.stories == ()
    assert t.state.selected == 0
    assert t.state.scroll == 0
    assert t.state.cursor == 0
    assert t.state.generation == 3
    assert t.intents == (FetchPage(expected, 0, 3),)


def test_stale_failure_is_discarded_and_current_failure_applied():
    state = AppState(generation=4, loading=True)
    t = apply(state, FetchFailed(3, "old"))
    assert t.state is state
    assert t.intents == ()

    t = apply(state, FetchFailed(4, "boom"))
    assert t.state.error == "boom"
    assert not t.state.loading


def test_stale_success_never_mutates():
    state = AppState(generation=2, loading=True, error="previous")
    t = apply(state, FetchSucceeded(1, (make_story(1),)))
    assert t.state is state
    assert t.state.stories == ()
    assert t.state.loading
    assert t.state.error == "previous"


def test_success_clears_error():
    state = AppState(generation=1, loading=True, error="previous")
    t = apply(state, FetchSucceeded(1, (make_story(1),), has_more=False))
    assert t.state.error is None
    assert not t.state.has_more


def test_appending_never_duplicates_ids():
    state = loaded(3, generation=1, loading=True)
    page = (make_story(3), make_story(4), make_story(2), make_story(5), make_story(4))
    t = apply(state, FetchSucceeded(1, page))
    ids = [s.id for s in t.state.stories]
    assert ids == [1, 2, 3, 4, 5]


def test_load_more_while_loading_is_noop():
    state = loaded(5, loading=True)
    t = apply(state, LoadMore())
    assert t.state is state
    assert t.intents == ()


def test_load_more_advances_cursor_and_keeps_selection():
    state = loaded(30, selected=12, generation=2, page_size=30)
    t = apply(state, LoadMore())
    assert t.state.cursor == 30
    assert t.state.loading
    assert t.state.generation == 2
    assert t.intents == (FetchPage(Category.TOP, 1, 2),)

    more = tuple(make_story(i) for i in range(31, 61))
    after = apply(t.state, FetchSucceeded(2, more)).state
    assert len(after.stories) == 60
    assert after.selected == 12


def test_load_more_after_failure_retries_same_page():
    state = loaded(30, cursor=30, generation=1, page_size=30, error="timeout")
    t = apply(state, LoadMore())
    assert t.state.cursor == 30
    assert t.intents == (FetchPage(Category.TOP, 1, 1),)


def test_load_more_when_listing_exhausted_is_noop():
    state = loaded(5, has_more=False)
    assert apply(state, LoadMore()).intents == ()


def test_refresh_resets_and_requests_fresh_ids():
    state = loaded(10, category=Category.ASK, selected=4, cursor=30, generation=7)
    t = apply(state, Refresh())
    assert t.state.category is Category.ASK
    assert t.state.stories == ()
    assert t.state.selected == 0
    assert t.state.generation == 8
    assert t.state.loading
    assert t.intents == (FetchPage(Category.ASK, 0, 8, refresh=True),)


def test_result_after_refresh_is_dropped():
    state = loaded(3, generation=1, loading=True)
    refreshed = apply(state, Refresh()).state
    late = apply(refreshed, FetchSucceeded(1, (make_story(99),)))
    assert late.state is refreshed


def test_random_moves_stay_in_bounds():
    rng = random.Random(1234)
    state = loaded(17, viewport=5)
    for _ in range(500):
        event = rng.choice([MoveDown(), MoveUp(), PageDown(), PageUp()])
        state = apply(state, event).state
        assert 0 <= state.selected < len(state.stories)
        assert state.scroll <= state.selected < state.scroll + state.viewport


@pytest.mark.parametrize(
    "event", [MoveDown(), MoveUp(), PageDown(), PageUp(), JumpFirst(), JumpLast()]
)
def test_navigation_on_empty_list(event):
    state = AppState(loading=False)
    t = apply(state, event)
    assert t.state is state
    assert t.state.selected == 0


def test_page_and_jump_clamp():
    state = loaded(25, selected=20)
    assert apply(state, PageDown()).state.selected == 24
    assert apply(state, PageUp()).state.selected == 10
    assert apply(loaded(25, selected=3), PageUp()).state.selected == 0
    assert apply(state, JumpFirst()).state.selected == 0
    assert apply(state, JumpLast()).state.selected == 24


def test_scroll_follows_selection():
    state = loaded(20, viewport=5)
    for _ in range(7):
        state = apply(state, MoveDown()).state
    assert state.selected == 7
    assert state.scroll == 3

    state = apply(state, JumpLast()).state
    assert state.scroll == 15
    assert [s.id for s in state.visible] == [16, 17, 18, 19, 20]

    state = apply(state, JumpFirst()).state
    assert state.scroll == 0


def test_resize_keeps_selection_visible():
    state = loaded(40, viewport=20, selected=19)
    t = apply(state, Resized(5))
    assert t.state.viewport == 5
    assert t.state.scroll <= 19 < t.state.scroll + 5

    assert apply(state, Resized(20)).state is state
    assert apply(state, Resized(0)).state.viewport == 1


def test_toggle_details():
    assert apply(AppState(loading=False), ToggleDetails()).state.show_details is False
    state = apply(loaded(2), ToggleDetails()).state
    assert state.show_details
    assert not apply(state, ToggleDetails()).state.show_details


def test_open_selected():
    state = loaded(3, selected=1)
    t = apply(state, OpenSelected())
    assert t.state is state
    assert t.intents == (OpenUrl("https://example.com/2"),)

    self_post = AppState(stories=(make_story(1, url=None),), loading=False)
    assert apply(self_post, OpenSelected()).intents == ()
    assert apply(AppState(), OpenSelected()).intents == ()


def test_quit():
    t = apply(loaded(1), Quit())
    assert t.state.finished
    assert t.intents == (Exit(),)


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        apply(AppState(), object())

from __future__ import annotations

import pytest

from ui_analytics.actions import LogEventAction, parse_action
from ui_analytics.errors import InvalidActionError, ValidationError


def test_taxonomy_is_the_closed_set_of_interaction_verbs() -> None:
    assert {a.value for a in LogEventAction} == {
        "LongPress",
        "Press",
        "Change",
        "Focus",
        "Blur",
        "Scroll",
        "Swipe",
        "View",
        "Refresh",
        "Error",
        "Attempt",
        "Success",
        "Open",
        "Close",
        "Restore",
    }


def test_null_placeholder_is_not_an_action() -> None:
    with pytest.raises(InvalidActionError):
        parse_action("Null")


@pytest.mark.parametrize("value", ["Press", LogEventAction.Press])
def test_parse_action_accepts_members_and_their_strings(value: str) -> None:
    assert parse_action(value) is LogEventAction.Press


@pytest.mark.parametrize("value", ["press", "Click", "", "Press "])
def test_parse_action_rejects_free_text(value: str) -> None:
    with pytest.raises(ValidationError, match="Unknown action"):
        parse_action(value)

from __future__ import annotations

import logging

import pytest

from ui_analytics.accessor import get_builder
from ui_analytics.core.context import AnalyticsProvider
from ui_analytics.dispatch import InlineDispatcher
from ui_analytics.logging_setup import configure_logging
from ui_analytics.sinks.logging_sink import LoggingSink


def test_logging_sink_writes_one_line_per_event(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="ui_analytics.sinks.logging_sink")

    with AnalyticsProvider(LoggingSink(), default_metadata={"screen": "devtools"}, dispatcher=InlineDispatcher()) as state:
        get_builder().set_product_name("DevTools").set_component_name("Button_primary_md").set_action("Press").log()
        state.identify("device-1")
        state.reset_identity()

    messages = [r.getMessage() for r in caplog.records if r.name == "ui_analytics.sinks.logging_sink"]
    assert messages == [
        'event DevTools Button_primary_md Press {"screen": "devtools"}',
        "identify device-1",
        "identity reset",
    ]


def test_delivery_errors_are_logged_as_warnings(caplog: pytest.LogCaptureFixture) -> None:
    class _Down:
        def deliver(self, event: object) -> None:
            raise ConnectionError("sink unreachable")

    with AnalyticsProvider(_Down(), dispatcher=InlineDispatcher()):
        get_builder().set_action("Press").log()

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "sink unreachable" in warnings[0].getMessage()
    assert warnings[0].exc_info is not None


def test_configure_logging_sets_level() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("DEBUG")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)

from __future__ import annotations

import logging

from ui_analytics.config import get_settings


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""

    resolved = level if level is not None else get_settings().log_level
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(resolved)
        return
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AnalyticsSettings:
    redis_url: str = "redis://localhost:6379/0"
    stream_key: str = "analytics:events"
    # 0 disables stream trimming.
    stream_maxlen: int = 10_000
    log_level: str = "INFO"
    # Product name used by the HTTP adapter when a request doesn't send one.
    default_product: str = ""

    @classmethod
    def from_env(cls) -> "AnalyticsSettings":
        d = cls()
        return cls(
            redis_url=os.environ.get("REDIS_URL", d.redis_url),
            stream_key=os.environ.get("ANALYTICS_STREAM_KEY", d.stream_key),
            stream_maxlen=int(os.environ.get("ANALYTICS_STREAM_MAXLEN", str(d.stream_maxlen))),
            log_level=os.environ.get("ANALYTICS_LOG_LEVEL", d.log_level).upper(),
            default_product=os.environ.get("ANALYTICS_PRODUCT", d.default_product),
        )


def load_dotenv_if_present(env_path: Path | None = None) -> bool:
    """Load a `.env` file without overriding variables already exported."""

    path = env_path or Path.cwd() / ".env"
    if not path.exists():
        return False

    from dotenv import load_dotenv

    return load_dotenv(dotenv_path=path, override=False)


@lru_cache(maxsize=1)
def get_settings() -> AnalyticsSettings:
    return AnalyticsSettings.from_env()

from fastapi import FastAPI
import logging

from ui_analytics.api.routes import router
from ui_analytics.config import get_settings, load_dotenv_if_present
from ui_analytics.dispatch import shutdown_default_dispatcher
from ui_analytics.logging_setup import configure_logging


def load_environment() -> bool:
    """Pick up a `.env` in the working directory, then re-read settings from it."""

    loaded = load_dotenv_if_present()
    if loaded:
        get_settings.cache_clear()
    return loaded


app = FastAPI(title="ui-analytics", version="0.1.0")
app.include_router(router)
load_environment()
# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "ui-analytics", "version": "0.1.0"}


@app.on_event("shutdown")
async def _shutdown() -> None:
    # Drain events logged by code running under the process-wide dispatcher.
    shutdown_default_dispatcher()

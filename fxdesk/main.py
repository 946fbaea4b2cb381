import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import admin, api, health, ui
from .services.rates.store import RateStore

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger("fxdesk")


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp rate file). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # A missing or corrupt rate file is not fatal: the store starts empty in
    # the FAILED state, which /health and the admin page report.
    store = RateStore(settings.rates_path, base_currency=settings.base_currency)
    store.load()

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.rate_store = store

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(ui.router)
    app.include_router(admin.router)
    app.include_router(api.router)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured port."""
    import uvicorn

    settings = get_settings()
    app = create_app(settings)
    store: RateStore = app.state.rate_store
    logger.info("server starting on http://%s:%d", settings.host, settings.port)
    logger.info("available currencies: %s", ", ".join(store.codes()) or "-")
    logger.info("rate editor: http://%s:%d/admin/rates", settings.host, settings.port)
    # log_config=None keeps the JSON logging configured in create_app
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()

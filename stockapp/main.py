import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.engine import Engine

from stockapp.config import Settings, get_settings
from stockapp.database import build_engine, build_session_factory, ensure_schema
from stockapp.routers import health_router, stock_router

logger = logging.getLogger(__name__)


def _describe_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append("{}: {}".format(location, message) if location else message)
    return "Invalid request body: {}".format("; ".join(parts) or "malformed JSON")


async def request_validation_handler(_request: Request, exc: RequestValidationError):
    return PlainTextResponse(_describe_errors(exc), status_code=400)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the application around one engine shared by every request."""
    settings = settings or get_settings()
    if engine is None:
        engine = build_engine(settings.database_url())
    ensure_schema(engine)

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health_router)
    app.include_router(stock_router)

    logger.info("Application ready", extra={"environment": settings.ENVIRONMENT})
    return app


__all__ = ["create_app"]

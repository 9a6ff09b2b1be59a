import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from . import db
from .config import Settings
from .logging_config import setup_logging
from .routes import health, todo

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "malformed JSON body"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(400, _validation_message(exc))


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(500, "database error")


async def cors_and_logging_middleware(request: Request, call_next):
    """Attach CORS headers to every response and answer preflight requests"""
    started = time.perf_counter()
    if request.method == "OPTIONS":
        response = Response(status_code=204)
    else:
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = error_response(500, "internal server error")

    response.headers.update(CORS_HEADERS)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


def create_app(
    settings: Optional[Settings] = None,
    database_url: Optional[str] = None,
    **engine_kwargs,
) -> FastAPI:
    """Build the API. Settings are read from the environment at startup if not given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        # Startup
        setup_logging()
        url = database_url
        if url is None:
            url = (settings or Settings.from_env()).sqlalchemy_url()
        app.state.engine, app.state.session_factory = db.configure_engine(url, **engine_kwargs)
        try:
            await db.init_db(app.state.engine)
        except Exception as e:
            logger.warning("Database initialization failed: %s", e)
            logger.warning("Application will start but database requests will fail")
        yield
        # Shutdown
        await db.close_db(app.state.engine)
        app.state.session_factory = None

    app = FastAPI(
        title="Todo API",
        description="A small to-do list service backed by a relational database",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.middleware("http")(cors_and_logging_middleware)

    app.include_router(todo.router)
    app.include_router(health.router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    setup_logging()
    logger.info("Starting Todo API on %s", settings.listen_address)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()

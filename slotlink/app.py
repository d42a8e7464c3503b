from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette import status

from slotlink import __version__
from slotlink.database import db, db_context
from slotlink.endpoints import ROUTERS
from slotlink.logger import get_logger
from slotlink.settings import settings


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting slotlink v%s", __version__)
    await db.create_tables()
    yield
    await db.engine.dispose()


def setup_sentry() -> None:
    if not settings.sentry_dsn:
        return

    logger.debug("initializing sentry")
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        release=f"slotlink@{__version__}",
        traces_sample_rate=0.0,
    )


setup_sentry()

app = FastAPI(
    title="slotlink",
    description="Publish availability slots on a shareable link and let visitors book them.",
    version=__version__,
    root_path=settings.root_path,
    debug=settings.debug,
    lifespan=lifespan,
)

for router in ROUTERS:
    app.include_router(router)


@app.middleware("http")
async def db_session(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    async with db_context() as session:
        response = await call_next(request)
        if response.status_code >= 400:
            await session.rollback()
        return response


@app.exception_handler(Exception)
async def handle_exception(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse({"detail": "Internal Server Error"}, status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.get("/status", include_in_schema=False)
async def get_status() -> dict[str, str]:
    return {"status": "ok"}

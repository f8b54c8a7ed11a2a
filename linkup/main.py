from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from linkup.core.logging import setup_logging
from linkup.core.init_db import init_db
from linkup.core.db import SessionLocal
from linkup.core.errors import LinkupError
from linkup.api.router import api_router
from linkup.modules.presence.registry import PresenceRegistry
from linkup.modules.realtime.router import EventRouter

setup_logging()
logger.info("Starting Linkup backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Init DB before serving
    init_db()

    registry = PresenceRegistry()
    app.state.presence = registry
    app.state.event_router = EventRouter(registry, SessionLocal)
    logger.info("Presence registry started")

    yield

    await registry.close()


app = FastAPI(
    title="Linkup Backend",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(LinkupError)
async def linkup_error_handler(request: Request, exc: LinkupError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# All API routes (connections, messages, notifications, realtime)
app.include_router(api_router)


@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.config import settings
from apps.api.exceptions import FerryException, ferry_exception_handler
from apps.api.routes import deployments, health, invites
from apps.api.middleware import RequestIDMiddleware
from apps.api.database import engine
from apps.api.services.build_client import build_client
from apps.api.services.task_queue import task_queue
from events.bus import create_event_bus

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manages application startup and shutdown lifecycle."""

    # --- Startup ---
    logger.info("%s v%s starting up...", settings.app_name, settings.app_version)

    event_bus = create_event_bus("redis", redis_url=settings.redis_url)
    task_queue.set_event_bus(event_bus)
    logger.info("Task queue initialized (Redis)")

    yield

    # --- Shutdown ---
    logger.info("%s shutting down...", settings.app_name)

    await build_client.close()
    await task_queue.close()
    await engine.dispose()

def create_app() -> FastAPI:
    """Application factory; tests build their own app from the same routers."""

    application = FastAPI(
        title=settings.app_name,
        description="Build and deploy GitHub repositories.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --- Middleware ---
    # Last added runs first: RequestID wraps everything, CORS sits inside it
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestIDMiddleware)

    # --- Exception Handlers ---
    application.add_exception_handler(FerryException, ferry_exception_handler)

    # --- Routes ---
    application.include_router(health.router, tags=["health"])
    application.include_router(invites.router)       # /invites/accept
    application.include_router(deployments.router)   # /projects/{id}/deployments

    return application

# Create the app instance: this is what uvicorn runs
app = create_app()

# backend/agora/main.py
"""
Application entry point.

Builds the FastAPI app: REST routers under ``/api``, the real-time socket at
``/ws``, health and Prometheus endpoints. The messaging hub and its
registries are created once per process in the lifespan handler.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .core.metrics import REGISTRY
from .database import SessionLocal, init_db
from .errors import register_error_handlers
from .routes import (
    answers,
    auth,
    contacts,
    global_messages,
    messages,
    questions,
    realtime,
    users,
)
from .schemas.health import HealthResponse, RootResponse
from .services.messaging import (
    ConnectionGatekeeper,
    MessageStore,
    MessagingHub,
    PresenceRegistry,
    RoomRegistry,
)
from .services.user_directory import UserDirectory

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def build_messaging_hub() -> MessagingHub:
    return MessagingHub(
        store=MessageStore(SessionLocal),
        presence=PresenceRegistry(),
        rooms=RoomRegistry(),
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    init_db()
    app.state.messaging_hub = build_messaging_hub()
    app.state.gatekeeper = ConnectionGatekeeper(UserDirectory(SessionLocal))

    yield

    online = len(app.state.messaging_hub.presence)
    logger.info(f"{BRAND_NAME} API shutting down ({online} users still connected)")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_allowed_origins)

api = APIRouter(prefix="/api")
api.include_router(auth.router, prefix="/auth")
api.include_router(users.router, prefix="/users")
api.include_router(contacts.router, prefix="/contacts")
api.include_router(global_messages.router, prefix="/global-messages")
api.include_router(messages.router, prefix="/messages")
api.include_router(questions.router, prefix="/questions")
api.include_router(answers.router)

app.include_router(api)
app.include_router(realtime.router)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )


@app.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    hub: MessagingHub = request.app.state.messaging_hub
    return HealthResponse(
        status="healthy",
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
        online_users=len(hub.presence),
    )


@app.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

"""Main FastAPI application for the Crediario identity core."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import users
from .api.middleware import (
    ProblemDetailsException,
    ProblemDetailsMiddleware,
    problem_details_exception_handler,
)
from .config import get_config
from .db.database import SessionLocal, init_db
from .events.handlers import build_event_dispatcher
from .repositories.sqlalchemy_impl import SQLAlchemyEmailNotificationRepository
from .utils.logging_config import get_logger, initialize_logging

config = get_config()

# Create FastAPI app
app = FastAPI(
    title=config.app.app_name,
    description=config.app.description,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(ProblemDetailsMiddleware)
app.add_exception_handler(ProblemDetailsException, problem_details_exception_handler)

allowed_origins = [
    "http://127.0.0.1:8000",
    "http://localhost:8000",
]

# In development mode, allow additional localhost ports
if config.server.debug:
    allowed_origins.extend([
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
)

# One dispatcher for the lifetime of the application
app.state.event_dispatcher = build_event_dispatcher(
    SQLAlchemyEmailNotificationRepository(SessionLocal), config.app
)

# Register API routers
app.include_router(users.router)


@app.on_event("startup")
async def startup_event():
    """Initialize logging and create missing tables."""
    initialize_logging()
    init_db()
    get_logger("main").info(f"{config.app.app_name} {__version__} started")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "crediario", "version": __version__}


def run() -> None:
    """Serve the application with uvicorn using the configured server settings."""
    import uvicorn

    server = get_config().server
    uvicorn.run(
        "crediario.main:app",
        host=server.host,
        port=server.port,
        reload=server.auto_reload,
        workers=None if server.auto_reload else server.workers,
        log_level="debug" if server.debug else "info",
    )


if __name__ == "__main__":
    run()

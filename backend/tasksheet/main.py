"""
Tasksheet - project and task tracking on top of Google Sheets.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasksheet.config import get_settings
from tasksheet.exceptions import register_exception_handlers
from tasksheet.logging_config import get_logger, setup_logging
from tasksheet.routes import auth, google_oauth, google_sheets, projects, tasks

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info("Starting Tasksheet API...")
    if not settings.google_sheet_id:
        logger.warning("GOOGLE_SHEET_ID is not set; user and project storage will fail")
    if not settings.google_client_id:
        logger.warning("GOOGLE_CLIENT_ID is not set; Google OAuth will be unavailable")
    if settings.session_secret == "change-me":
        logger.warning("SESSION_SECRET is the default value; set it before deploying")
    yield
    logger.info("Shutting down Tasksheet API...")


app = FastAPI(
    title="Tasksheet",
    description="Project and task tracking backed by Google Sheets",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(auth.router, tags=["Auth"])
app.include_router(projects.router, prefix="/projects", tags=["Projects"])
app.include_router(tasks.router, prefix="/projects", tags=["Tasks"])
app.include_router(google_oauth.router, prefix="/google-oauth", tags=["Google OAuth"])
app.include_router(google_sheets.router, prefix="/google-sheets", tags=["Google Sheets"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}

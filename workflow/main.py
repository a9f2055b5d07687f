import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import database, models  # noqa: F401  (models registers the tables)
from .errors import WorkflowError, InternalError
from .gql.schema import graphql_app
from .responses import error_response, validation_error_response, timestamp
from .routers import projects, tasks
from .validation import format_errors

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:4200").split(",")

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger("workflow-service")

@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.db_manager.create_all()
    logger.info("🚀 Workflow service ready")
    yield
    await database.db_manager.dispose()

app = FastAPI(
    title="Workflow Service",
    description="Projects, tasks and progress tracking over REST and GraphQL.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
    return response

# --- ERROR HANDLERS ---

@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    if isinstance(exc, InternalError) and exc.detail:
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.detail)
    return error_response(exc.message, exc.status_code, errors=exc.errors)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return validation_error_response(format_errors(exc.errors()))

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response("Route not found", 404)
    return error_response(str(exc.detail), exc.status_code)

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal server error", 500)

# --- ROUTES ---

app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(graphql_app, prefix="/graphql")

@app.get("/health")
def health_check():
    """Liveness probe."""
    return {
        "status": "OK",
        "message": "Workflow Backend is running",
        "timestamp": timestamp(),
    }

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskapi.api.auth import router as auth_router
from taskapi.api.tasks import router as tasks_router
from taskapi.api.users import router as users_router
from taskapi.core.config import get_settings
from taskapi.core.logging_config import setup_logging
from taskapi.db.engine import dispose_engines, get_engine
from taskapi.db.schema import metadata

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create missing tables; scripts/init_db.py rebuilds from scratch
    metadata.create_all(get_engine())
    logger.info("Task API started")
    yield
    logger.info("Task API shutting down")
    dispose_engines()


app = FastAPI(
    title="Task Management API",
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


def _error_message(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "detail": _error_message(errors[0]) if errors else "Invalid request",
            "errors": jsonable_encoder(errors),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception in %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(users_router)

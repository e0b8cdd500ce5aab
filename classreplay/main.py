"""
ClassReplay API
FastAPI application turning classroom recordings into narrated slide videos

Wires the routers, the request correlation middleware and startup checks.
"""

import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    CORS_ORIGINS,
    OUTPUT_DIR,
    TEMP_DIR,
    UPLOAD_DIR,
    load_service_config,
)
from .core import (
    clear_context,
    get_logger,
    parse_bool_env,
    run_startup_runtime_checks,
    set_request_id,
    setup_logging,
)
from .routes import files_router, health_router, process_router, tasks_router

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = parse_bool_env(os.getenv("JSON_LOGS"), default=False)

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")


def _run_startup(app: FastAPI) -> None:
    strict_runtime = parse_bool_env(
        os.getenv("STARTUP_STRICT_RUNTIME_CHECKS"),
        default=os.getenv("ENV", "").lower() == "production",
    )
    runtime_report = run_startup_runtime_checks(
        directories={"uploads": UPLOAD_DIR, "output": OUTPUT_DIR, "temp": TEMP_DIR},
        strict_tools=strict_runtime,
    )
    app.state.runtime_report = runtime_report
    logger.info("Startup runtime checks complete", extra={"runtime_report": runtime_report})
    logger.info("External services", extra={"services": load_service_config().status()})


@asynccontextmanager
async def lifespan(app: FastAPI):
    _run_startup(app)
    yield


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    """Attach a correlation ID to the request's logs and response."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    set_request_id(request_id)
    logger.info(f"{request.method} {request.url.path}", extra={
        "method": request.method,
        "path": request.url.path,
    })
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        logger.info(f"Response: {response.status_code}", extra={
            "status_code": response.status_code,
            "method": request.method,
            "path": request.url.path,
        })
        return response
    finally:
        clear_context()


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(process_router)
app.include_router(tasks_router)
app.include_router(files_router)


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {"message": "ClassReplay API - narrated slide videos from classroom recordings", "version": API_VERSION}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "classreplay.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
    )


if __name__ == "__main__":
    run()

"""
Student Registration Portal - FastAPI application entry point.

This module:
1. Sets up structured JSON logging
2. Builds the app around a single StudentStore owned by app.state
3. Implements request ID middleware (X-Request-ID header)
4. Registers page and API routes plus static assets
5. Renders the HTML 404 page for unmatched routes
6. Provides a health check endpoint

Run locally with `python -m student_portal.main` or the `student-portal`
console script; PORT selects the listening port (default 3000).

Layout:
- routes/: page and API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: the student store
- views.py: Jinja2 page rendering
- logging_config.py: structured logging configuration
- database.py: in-memory database engine
"""

import os
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_portal.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from student_portal.routes import pages, students
from student_portal.services.student_store import StudentStore
from student_portal.views import STATIC_DIR, render_not_found

VERSION = "1.0.0"
PORT = int(os.getenv("PORT", "3000"))

setup_logging()
logger = get_logger("http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_with_context(logger, "INFO", "Student Registration Portal is ready")
    yield
    app.state.store.close()
    log_with_context(logger, "INFO", "Student store discarded")


def create_app(store: StudentStore = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: Store to serve; a fresh empty one is created when omitted.
    """
    app = FastAPI(
        title="Student Registration Portal",
        description="Register students, browse and delete them, and view per-course statistics.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else StudentStore()

    # ──────────────────────────────────────────────────────────────
    # Request ID Middleware
    #
    # Tags every request with a UUID that appears in all log entries
    # made while handling it and in the X-Request-ID response header.
    # ──────────────────────────────────────────────────────────────
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        req_id = generate_request_id()
        request_id_var.set(req_id)

        start_time = time.time()

        log_with_context(logger, "INFO",
            f"Request started: {request.method} {request.url.path}",
            context={"request_id": req_id},
            extra_data={
                "ip": request.client.host if request.client else "unknown",
                "user_agent": request.headers.get("user-agent", ""),
            })

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        response.headers["X-Request-ID"] = req_id

        log_with_context(logger, "INFO",
            f"Request completed: {request.method} {request.url.path} → {response.status_code}",
            context={"request_id": req_id},
            extra_data={
                "duration_ms": round(duration_ms, 2),
                "status_code": response.status_code
            })

        return response

    # Unmatched paths (and unsupported methods on known paths) get the HTML 404 page
    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return render_not_found(request)
        return await http_exception_handler(request, exc)

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(students.router, tags=["Students"])

    @app.get("/health", tags=["Health"])
    def health_check():
        return {"status": "healthy", "service": "student-portal", "version": VERSION}

    return app


app = create_app()


def run():
    """Serve the application on all interfaces at PORT."""
    uvicorn.run(app, host="0.0.0.0", port=PORT, log_config=None)


if __name__ == "__main__":
    run()

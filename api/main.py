"""
GrantCraft API — Main Application

POST /review                      — Score a draft against a rubric
GET  /schemes                     — List available rubrics
GET  /schemes/{scheme_id}/signals — Signal metadata for one rubric (404 if unknown)
GET  /health                      — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from grantcraft import __version__
from grantcraft.aggregator import review_draft
from grantcraft.auth import AUTH_ENABLED, require_api_key
from grantcraft.config import settings
from grantcraft.errors import UnknownSchemeError
from grantcraft.logging import get_logger, setup_logging
from grantcraft.registry import RUBRICS, get_rubric
from grantcraft.schemas.review import (
    HealthResponse,
    ReviewRequest,
    ReviewResponse,
    SchemesResponse,
    SignalsResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Rubrics were validated at import; an unknown default is a deploy error
    get_rubric(settings.DEFAULT_SCHEME)
    logger.info(
        "GrantCraft API starting",
        extra={"scheme_id": settings.DEFAULT_SCHEME},
    )
    if not AUTH_ENABLED:
        logger.warning("API key auth disabled — set GRANTCRAFT_API_KEYS to enable it.")
    yield
    logger.info("GrantCraft API shutting down")


app = FastAPI(
    title="GrantCraft Reviewer API",
    description="Deterministic rubric-based scoring for grant proposal drafts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["X-API-Key", "Content-Type"],
    allow_credentials=False,
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing body is a plain client error (400)."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request body.")
    return JSONResponse(
        status_code=400,
        content={"detail": f"{field}: {message}" if field else message},
    )


@app.exception_handler(UnknownSchemeError)
async def unknown_scheme_handler(request: Request, exc: UnknownSchemeError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The review could not be completed."},
    )


# ============================================================
# ROUTES
# ============================================================

@app.post("/review", response_model=ReviewResponse)
def review(
    request: ReviewRequest,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Score a draft. Sync route: scoring is CPU-only and runs in the threadpool."""
    length = len(request.draft_content.strip())
    if length < settings.MIN_DRAFT_CHARS:
        raise HTTPException(
            422,
            f"Draft is too short to review meaningfully "
            f"(minimum {settings.MIN_DRAFT_CHARS} characters).",
        )

    report = review_draft(request.draft_content, request.scheme_id)
    return {"report": report.to_dict(), "draftId": request.draft_id}


@app.get("/schemes", response_model=SchemesResponse)
def list_schemes(key_id: Optional[str] = Depends(require_api_key)):
    return {
        "defaultScheme": settings.DEFAULT_SCHEME,
        "schemes": [RUBRICS[sid].describe() for sid in sorted(RUBRICS)],
    }


@app.get("/schemes/{scheme_id}/signals", response_model=SignalsResponse)
def list_signals(
    scheme_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Signal metadata only; pattern families are never exposed."""
    try:
        rubric = get_rubric(scheme_id)
    except UnknownSchemeError as e:
        raise HTTPException(404, str(e)) from None
    signals = [s.describe() for s in rubric.registry.signals]
    return {"schemeId": scheme_id, "total": len(signals), "signals": signals}


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check — no auth required."""
    return {
        "status": "operational",
        "version": __version__,
        "schemes": sorted(RUBRICS),
        "signal_count": sum(len(r.registry) for r in RUBRICS.values()),
    }


# --- Security Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-GrantCraft-Version"] = __version__
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject oversized bodies — checks Content-Length and the actual body."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > settings.MAX_BODY_BYTES:
            return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > settings.MAX_BODY_BYTES:
            return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)

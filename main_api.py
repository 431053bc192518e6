"""
RollCall - FastAPI Backend
==========================
Public teacher search and ratings, review intake, the admin moderation
queue and the roster scrape trigger, in one server.

Start:
    uvicorn main_api:app --reload --port 8000

Interactive docs:
    http://localhost:8000/docs
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from rollcall.domain.errors import RollCallError

logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(name)s: %(message)s")
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# ── Dependency-injection container (initialised at startup) ───────────────────

_container = None
_startup_error: Optional[str] = None
_scheduler_task = None


def _init_container() -> None:
    global _container, _startup_error
    try:
        from rollcall.infrastructure.config import Config
        from rollcall.infrastructure.container import Container

        _container = Container(Config.from_env())
        _startup_error = None
        logger.info("Container initialised successfully.")
    except Exception as e:
        _startup_error = str(e)
        logger.error(f"Container startup failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _scheduler_task
    from rollcall.infrastructure.scheduler import start_scheduler, stop_scheduler

    _init_container()
    if _container is not None:
        _scheduler_task = start_scheduler(
            _container.scrape_use_case, _container.config.scrape_interval_minutes
        )
    yield
    await stop_scheduler(_scheduler_task)
    _scheduler_task = None


def get_container():
    if _startup_error:
        raise HTTPException(status_code=503, detail=f"Service misconfigured: {_startup_error}")
    if _container is None:
        raise HTTPException(status_code=503, detail="Service not ready.")
    return _container


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(title="RollCall API", version="1.0.0", lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# Registered last so it wraps CORSMiddleware and answers preflights itself
@app.middleware("http")
async def short_circuit_options(request: Request, call_next):
    """Every OPTIONS request gets an empty 204 with the allow-listed headers."""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
    return await call_next(request)


# ── Error mapping ─────────────────────────────────────────────────────────────


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": message},
        headers=CORS_HEADERS,
    )


@app.exception_handler(RollCallError)
async def rollcall_error_handler(request: Request, exc: RollCallError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return _error(status.HTTP_400_BAD_REQUEST, f"{field}: {message}" if field else message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"[API] Unhandled error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or exc.__class__.__name__)


# ── Request models ────────────────────────────────────────────────────────────

# Values are coerced by the use cases, not by pydantic


class AdminRequest(BaseModel):
    token: Any = None


class PendingRequest(AdminRequest):
    limit: Any = None


class ModerateRequest(AdminRequest):
    id: Any = None
    review_id: Any = None  # Older admin consoles send this key

    @property
    def target_id(self) -> Any:
        return self.id if self.id is not None else self.review_id


async def _read_json(request: Request) -> Any:
    """Request body as JSON, or None when it is absent or malformed."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


# ── Health ────────────────────────────────────────────────────────────────────


@app.get("/health", tags=["meta"], response_class=PlainTextResponse)
async def health():
    return PlainTextResponse("OK", headers=CORS_HEADERS)


# ── Public ────────────────────────────────────────────────────────────────────


@app.get("/teachers", tags=["public"])
async def list_teachers(q: str = "", c=Depends(get_container)):
    """Search by name or school substring. Alphabetical, at most 100 rows."""
    teachers = await c.browse_use_case.search(q)
    return [t.to_summary() for t in teachers]


@app.get("/teacher", tags=["public"])
async def get_teacher(id: Optional[str] = None, c=Depends(get_container)):
    """One teacher with stats over approved reviews only."""
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")
    return await c.browse_use_case.profile(id)


@app.get("/reviews", tags=["public"])
async def list_reviews(teacher_id: Optional[str] = None, c=Depends(get_container)):
    """Approved reviews of one teacher, newest first."""
    if not teacher_id:
        raise HTTPException(status_code=400, detail="Missing teacher_id")
    reviews = await c.browse_use_case.approved_reviews(teacher_id)
    return [r.to_public_dict() for r in reviews]


@app.post("/reviews", status_code=status.HTTP_201_CREATED, tags=["public"])
async def submit_review(request: Request, c=Depends(get_container)):
    """Store a visitor review as pending. It stays hidden until approved."""
    body = await _read_json(request)
    result = await c.submit_review_use_case.execute(body)
    return result.to_dict()


@app.api_route("/top", methods=["GET", "POST"], tags=["public"])
async def top_teachers(limit: Optional[str] = None, c=Depends(get_container)):
    """Teachers with at least one approved review, best average first."""
    ranked = await c.browse_use_case.top(limit)
    return [r.to_dict() for r in ranked]


# ── Admin ─────────────────────────────────────────────────────────────────────


@app.post("/admin/pending", tags=["admin"])
async def admin_pending(body: Optional[PendingRequest] = None, c=Depends(get_container)):
    body = body or PendingRequest()
    rows = await c.moderation_use_case.list_pending(body.token, body.limit)
    return {"ok": True, "rows": [r.to_moderation_dict() for r in rows]}


@app.post("/admin/approve", tags=["admin"])
async def admin_approve(body: Optional[ModerateRequest] = None, c=Depends(get_container)):
    body = body or ModerateRequest()
    updated = await c.moderation_use_case.approve(body.token, body.target_id)
    return {"ok": True, "updated": updated}


@app.post("/admin/reject", tags=["admin"])
async def admin_reject(body: Optional[ModerateRequest] = None, c=Depends(get_container)):
    body = body or ModerateRequest()
    updated = await c.moderation_use_case.reject(body.token, body.target_id)
    return {"ok": True, "updated": updated}


@app.post("/admin/scrape", tags=["admin"])
async def admin_scrape(body: Optional[AdminRequest] = None, c=Depends(get_container)):
    """Run one roster sync now. Upstream failures come back as a 500 body."""
    body = body or AdminRequest()
    c.moderation_use_case.authorize(body.token)
    result = await c.scrape_use_case.execute()
    return result.to_dict()

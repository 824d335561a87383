"""SouqLink FastAPI application.

Web server that processes commands synchronously via HTTP. Every request is
wrapped in the souqlink domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset/"test" → in-memory providers
#   - "production" → PostgreSQL from DATABASE_URL
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from souqlink.domain import souqlink
from souqlink.media.local_adapter import URL_PREFIX
from souqlink.utils.logging import add_context, clear_context
from souqlink.utils.settings import upload_dir

souqlink.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="SouqLink API",
    description="Grocery and market delivery: customers, couriers and admins",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context and tag log events with a request id."""
    clear_context()
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
    with souqlink.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from souqlink.api import register_error_handlers, routers  # noqa: E402
from souqlink.api.schemas import HealthResponse  # noqa: E402

for router in routers:
    app.include_router(router)

register_error_handlers(app)

app.mount(URL_PREFIX.rstrip("/"), StaticFiles(directory=upload_dir(), check_dir=False), name="uploads")


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(domain=souqlink.name)

"""FoodRescue FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
under a domain route runs inside the foodrescue domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in src/foodrescue/domain.toml.
from foodrescue.domain import foodrescue  # noqa: E402
from foodrescue.utils.logging import add_context, clear_context  # noqa: E402

foodrescue.init()

_DOMAIN_ROUTES = ("/users", "/foods", "/deliveries", "/alerts")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="FoodRescue API",
    description="Food donation matching — listings, deliveries, and emergency alerts",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the foodrescue domain context and tag log lines with a request id."""
    if not request.url.path.startswith(_DOMAIN_ROUTES):
        # Health check, docs, etc.
        return await call_next(request)

    add_context(request_id=request.headers.get("x-request-id", uuid4().hex))
    try:
        with foodrescue.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from foodrescue.api import alert_router, delivery_router, food_router, user_router  # noqa: E402

app.include_router(user_router)
app.include_router(food_router)
app.include_router(delivery_router)
app.include_router(alert_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": foodrescue.name})

"""Storefront Pricing FastAPI application.

Serves shipping quotes, sales tax and promotions. Promotion commands are
processed synchronously inside the pricing domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay, LOG_LEVEL the log verbosity.
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pricing.domain import pricing
from pricing.utils.logging import add_context, clear_context

pricing.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront Pricing API",
    description="Shipping quotes, sales tax and promotions for the storefront",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag every log line emitted while serving a request with its id."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    clear_context()
    add_context(request_id=request_id, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from pricing.api import (  # noqa: E402
    admin_promotion_router,
    promotion_router,
    register_error_handlers,
    shipping_router,
    tax_router,
)

register_error_handlers(app)
app.include_router(shipping_router)
app.include_router(tax_router)
app.include_router(promotion_router)
app.include_router(admin_promotion_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": pricing.name})

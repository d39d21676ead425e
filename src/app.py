"""Pre-orders FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside the
pre-orders domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from preorders.config import get_environment, get_order_cutoff
from preorders.domain import preorders
from preorders.utils.logging import logging_context

# Initialized at module level so uvicorn workers share it
preorders.init()

from preorders.api import order_router, product_router, register_error_handlers, shop_router  # noqa: E402

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Pre-orders API",
    description="Bakery pre-orders: shop orders, daily quantities and the product catalog",
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
    """Push the pre-orders domain context for each request and tag its log lines."""
    with preorders.domain_context(), logging_context(
        method=request.method,
        path=request.url.path,
        account=request.headers.get("x-account-name"),
    ):
        response = await call_next(request)
    return response


register_exception_handlers(app)
register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(order_router)
app.include_router(product_router)
app.include_router(shop_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": preorders.name,
            "environment": get_environment(),
            "order_cutoff": get_order_cutoff().strftime("%H:%M"),
        }
    )

"""
Storefront Platform - Backend and pages
Customer storefront with seller, admin and superadmin dashboards on Supabase
"""
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api import (
    admins,
    auth,
    effects,
    orders,
    products,
    referral_codes,
    sales,
    sellers,
    shipments,
    social_settings,
    task_settings,
    tasks,
    withdrawals,
)
from storefront.core.config import settings
from storefront.core.database import get_db_connection_with_retry
from storefront.core.errors import StorefrontError
from storefront.core.rate_limit import RateLimitMiddleware
from storefront.core.route_guard import RouteGuardMiddleware, login_redirect_url
from storefront.web import admin_pages, auth_pages, customer_pages, seller_pages, superadmin_pages
from storefront.web._layout import card, esc, redirect, render

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "web" / "static"

# FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG
)

# Middleware runs bottom-up: CORS first, then rate limiting, then the route guard
app.add_middleware(RouteGuardMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


# ============================================================================
# Error handling
# ============================================================================

def _wants_html(request: Request) -> bool:
    return not request.url.path.startswith("/api/")


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if _wants_html(request):
        if exc.status_code == 401:
            return redirect(login_redirect_url(request.url.path))
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        if request.method == "GET":
            body = card("Something went wrong", f'<p>{esc(exc.message)}</p><p><a href="/">Back to the shop</a></p>')
            return render(request, body, title="Error", status_code=exc.status_code)
        return redirect("/", error=exc.message)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(StarletteHTTPException)
async def html_auth_redirect_handler(request: Request, exc: StarletteHTTPException):
    """Unauthenticated page requests go to the login page instead of a JSON 401"""
    if exc.status_code == 401 and _wants_html(request):
        return redirect(login_redirect_url(request.url.path))
    return await http_exception_handler(request, exc)


# ============================================================================
# Routers
# ============================================================================

# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])
app.include_router(task_settings.router, prefix="/api/v1/task-settings", tags=["Task Settings"])
app.include_router(sales.router, prefix="/api/v1/sales", tags=["Sales"])
app.include_router(withdrawals.router, prefix="/api/v1/withdrawals", tags=["Withdrawals"])
app.include_router(referral_codes.router, prefix="/api/v1/referral-codes", tags=["Referral Codes"])
app.include_router(social_settings.router, prefix="/api/v1/social-settings", tags=["Social Settings"])
app.include_router(sellers.router, prefix="/api/v1/sellers", tags=["Sellers"])
app.include_router(admins.router, prefix="/api/v1/admins", tags=["Admins"])
app.include_router(effects.router, prefix="/api/v1/effects", tags=["Effects"])

# Shipment routers carry their own prefixes
app.include_router(shipments.automations_router)
app.include_router(shipments.shipments_router)

# Pages
app.include_router(auth_pages.router)
app.include_router(customer_pages.router)
app.include_router(seller_pages.router)
app.include_router(admin_pages.router)
app.include_router(superadmin_pages.router)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/health")
async def health():
    """Health check endpoint - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry keeps the check fast
        conn = get_db_connection_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "storefront-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": settings.DB_CONNECT_TIMEOUT
        },
        "total_latency_ms": total_latency_ms
    }


@app.get("/api/v1/status")
async def api_status():
    """Configured integrations"""
    return {
        "supabase": {
            "connected": bool(settings.SUPABASE_URL),
            "status": "configured" if settings.SUPABASE_URL else "not_configured",
            "storage_bucket": settings.STORAGE_BUCKET
        },
        "effects": list(effects.EFFECT_NAMES)
    }

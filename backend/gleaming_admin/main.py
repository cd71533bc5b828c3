"""
Gleaming Admin - Backend API
Admin panel backend for the jewelry storefront
"""
import logging
import time

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gleaming_admin.api import bestsellers, customers, dashboard, orders, products
from gleaming_admin.core.auth import TokenUser, require_admin
from gleaming_admin.core.config import settings
from gleaming_admin.core.database import get_db_connection_dict_with_retry

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = settings.get_allowed_origins()

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
)

# Configure CORS with both specific origins and Vercel regex pattern
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https://.*\.vercel\.app",  # Preview deployments of the admin frontend
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Every admin router requires an admin user
admin_only = [Depends(require_admin)]

app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"], dependencies=admin_only)
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"], dependencies=admin_only)
app.include_router(bestsellers.router, prefix="/api/v1/bestsellers", tags=["Bestsellers"], dependencies=admin_only)
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"], dependencies=admin_only)
app.include_router(customers.router, prefix="/api/v1/customers", tags=["Customers"], dependencies=admin_only)


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": f"{settings.API_TITLE}",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Fast check: a single connection attempt
        conn = get_db_connection_dict_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Health check could not reach the database: {e}")
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    status = "healthy" if db_status == "connected" else "degraded"

    return {
        "status": status,
        "service": "gleaming-admin-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error
        },
        "total_latency_ms": total_latency_ms
    }


@app.get("/api/v1/me", tags=["Auth"])
async def current_admin(user: TokenUser = Depends(require_admin)):
    """The signed-in admin (lets the panel confirm access before rendering)"""
    return {
        "status": "success",
        "data": user.model_dump()
    }

"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter

from config.database import catalog_connection, get_supabase_client_optional
from config.settings import get_settings


router = APIRouter(tags=["Health"])


def _check_catalog() -> Tuple[str, Optional[str]]:
    try:
        with catalog_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
        return "connected", None
    except Exception as e:
        return "error", str(e)


def _check_private_store() -> Tuple[str, Optional[str]]:
    settings = get_settings()
    client = get_supabase_client_optional()
    if client is None:
        return "not_configured", None
    try:
        client.table(settings.private_products_table).select("product_id").limit(1).execute()
        return "connected", None
    except Exception as e:
        return "error", str(e)


@router.get("/health")
def health_check() -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "outfit-generator",
    }


@router.get("/health/detailed")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Public catalog (PostgreSQL) connection
    - Private store (Supabase) query
    """
    settings = get_settings()

    catalog_status, catalog_error = _check_catalog()
    private_status, private_error = _check_private_store()

    return {
        "status": "healthy" if catalog_status == "connected" else "degraded",
        "service": "outfit-generator",
        "environment": settings.environment,
        "checks": {
            "config": "ok",
            "catalog": {"status": catalog_status, "error": catalog_error},
            "private_store": {"status": private_status, "error": private_error},
        },
    }


@router.get("/ready")
def readiness_check() -> Dict[str, str]:
    """
    Kubernetes-style readiness probe.

    Ready once the public catalog answers; the private store is optional.
    """
    status, _ = _check_catalog()
    if status != "connected":
        return {"status": "not_ready", "reason": "catalog_unavailable"}
    return {"status": "ready"}


@router.get("/live")
def liveness_check() -> Dict[str, str]:
    """Kubernetes-style liveness probe."""
    return {"status": "alive"}

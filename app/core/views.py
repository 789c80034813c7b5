"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks.
"""

import logging

from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connection
from django.http import JsonResponse

from payments.catalog import get_fee_catalog

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    This endpoint is used by:
    - Docker health checks
    - Load balancers (nginx)
    - Uptime monitors

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"
        - fee_catalog: "loaded (<n> items)" or "invalid"

    HTTP Status Codes:
        200: All systems operational
        503: Database unreachable or fee catalog misconfigured

    Example Response:
        {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
            "fee_catalog": "loaded (2 items)"
        }
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
        "fee_catalog": "unknown",
    }
    is_healthy = True

    # Check database connectivity
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        is_healthy = False

    # Pending checkouts live in the cache; a failure degrades checkout
    # callbacks but the rest of the API still works
    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        health_status["cache"] = "disconnected"

    try:
        catalog = get_fee_catalog()
        health_status["fee_catalog"] = f"loaded ({len(catalog)} items)"
    except ImproperlyConfigured:
        logger.exception("Health check: fee catalog is invalid")
        health_status["fee_catalog"] = "invalid"
        is_healthy = False

    if not is_healthy:
        health_status["status"] = "unhealthy"

    # Return appropriate HTTP status
    status_code = 200 if is_healthy else 503

    return JsonResponse(health_status, status=status_code)

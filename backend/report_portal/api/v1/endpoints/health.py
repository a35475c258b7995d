"""
Health Check Endpoints

- /health        - liveness (app is running)
- /health/ready  - readiness (database reachable)
"""

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text
from typing import Dict, Any
import time

from report_portal.core.config import settings
from report_portal.core.database import get_session_local
from report_portal.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "healthy", "latency_ms": round((time.time() - start) * 1000, 2)}
    except Exception as e:
        logger.error(f"[Health] Database check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


@router.get("")
async def health_check():
    """Liveness probe"""
    return {"status": "healthy", "service": settings.APP_NAME}


@router.get("/ready")
async def readiness_check():
    """Readiness probe - fails with 503 when the database is unreachable"""
    database = await check_database()
    if database["status"] != "healthy":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "database": database}
        )
    return {"status": "ready", "database": database}

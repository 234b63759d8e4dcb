"""Health check endpoint.

Returns service status including database connectivity; 503 when the
database does not answer.
"""

import logging
from typing import Any

from fastapi import APIRouter
from pymongo.errors import PyMongoError
from starlette.responses import JSONResponse

from app.core.config import settings
from app.db.mongo import ping

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> Any:
    """Return ``{status, database}``; 200 when MongoDB answers a ping, 503 otherwise."""
    db_status = "disconnected"
    try:
        if ping():
            db_status = "connected"
    except PyMongoError:
        logger.warning("health_check_database_unreachable", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "database_name": settings.DATABASE_NAME,
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload

import logging
from fastapi import APIRouter, HTTPException, Request
from .. import db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint; fails with 503 when the database is unreachable"""
    engine = getattr(request.app.state, "engine", None)
    try:
        if engine is None:
            raise RuntimeError("Database not available")
        await db.ping(engine)
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        raise HTTPException(status_code=503, detail="database unavailable")
    return {"status": "healthy", "service": "todo-api"}

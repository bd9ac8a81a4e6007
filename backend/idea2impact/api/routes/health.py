from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging
import time

from idea2impact.api.deps import get_store
from idea2impact.core.errors import PersistenceError
from idea2impact.services.registration_store import RegistrationStore

router = APIRouter()
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

@router.get("/health")
def health_check(store: RegistrationStore = Depends(get_store)):
    """Health check endpoint"""
    uptime = round(time.monotonic() - STARTED_AT, 3)
    try:
        store.ping()
    except PersistenceError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "ERROR", "database": "disconnected", "uptime": uptime},
        )

    return {"status": "OK", "database": "connected", "uptime": uptime}

# newsbubble/routers/admin.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..deps import require_admin
from ..logging_setup import get_logger
from ..sources import ingest_feeds
from ..store import session_dependency

logger = get_logger("newsbubble.routes.admin")

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/ingest", summary="Fetch all RSS feeds now")
def run_ingest(_: None = Depends(require_admin), s: Session = Depends(session_dependency)):
    """
    Runs ingestion synchronously and reports how many items were fetched and
    how many were new.
    """
    logger.info("Manual ingestion requested")
    return ingest_feeds(s)

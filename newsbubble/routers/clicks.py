from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from .. import repository
from ..config import HISTORY_LIMIT
from ..deps import require_user
from ..logging_setup import get_logger
from ..schema import ClickIn, ClickOut
from ..store import session_dependency

logger = get_logger("newsbubble.routes.clicks")

router = APIRouter(prefix="/clicks", tags=["Click history"])


@router.post("", status_code=status.HTTP_201_CREATED)
def track_click(body: ClickIn, user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    ev = repository.record_click(s, user_id, body.article_id)
    if ev is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    logger.info(f"Click recorded: user={user_id} article={body.article_id}")
    return {"id": ev.id, "clicked_at": ev.clicked_at}


@router.get("", response_model=List[ClickOut])
def list_clicks(user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    return repository.click_history(s, user_id, limit=HISTORY_LIMIT)


@router.delete("/{click_id}")
def remove_click(click_id: int, user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    if not repository.delete_click(s, user_id, click_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Click not found")
    return {"ok": True}

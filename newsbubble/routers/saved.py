from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session

from .. import repository
from ..deps import require_user
from ..logging_setup import get_logger
from ..schema import SavedIn, SavedOut
from ..store import session_dependency

logger = get_logger("newsbubble.routes.saved")

router = APIRouter(prefix="/saved", tags=["Saved articles"])


@router.get("", response_model=List[SavedOut])
def list_saved(user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    return repository.list_saved(s, user_id)


@router.post("", response_model=SavedOut)
def save_article(
    body: SavedIn,
    response: Response,
    user_id: str = Depends(require_user),
    s: Session = Depends(session_dependency),
):
    row, created = repository.save_article(s, user_id, body.model_dump())
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return row


@router.delete("/{saved_id}")
def delete_saved(saved_id: int, user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    if not repository.delete_saved(s, user_id, saved_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Saved article not found")
    return {"ok": True}

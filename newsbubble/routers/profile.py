from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import repository
from ..deps import require_user
from ..logging_setup import get_logger
from ..profile_policy import classify_profile
from ..schema import ProfileIn, ProfileOut
from ..store import session_dependency

logger = get_logger("newsbubble.routes.profile")

router = APIRouter(prefix="/profile", tags=["Profile"])


def _out(user_id: str, prof) -> ProfileOut:
    text = prof.custom_profile if prof else None
    source = prof.profile_source if prof else None
    return ProfileOut(
        user_id=user_id,
        display_name=prof.display_name if prof else None,
        interests=prof.interests if prof else None,
        custom_profile=text,
        profile_source=source,
        mode=classify_profile(text, source).value,
    )


@router.get("", response_model=ProfileOut)
def read_profile(user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    return _out(user_id, repository.get_profile(s, user_id))


@router.put("", response_model=ProfileOut)
def update_profile(body: ProfileIn, user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    """
    Direct edit of the bubble. Any text saved here is the user's and steers
    recommendations as-is; saving an empty text hands it back to the engine.
    """
    prof = None
    if body.display_name is not None or body.interests is not None:
        prof = repository.update_profile_details(s, user_id, body.display_name, body.interests)
    if "custom_profile" in body.model_fields_set:
        prof = repository.save_user_edit(s, user_id, body.custom_profile)
        logger.info(f"Profile edited by user={user_id} chars={len(prof.custom_profile or '')}")
    return _out(user_id, prof or repository.get_profile(s, user_id))

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from .. import repository
from ..deps import require_user
from ..logging_setup import get_logger
from ..schema import SectionsIn, SectionsOut
from ..sections import is_known_section
from ..store import session_dependency

logger = get_logger("newsbubble.routes.sections")

router = APIRouter(prefix="/sections", tags=["Sections"])


def _out(s: Session, user_id: str) -> SectionsOut:
    return SectionsOut(
        sections=repository.section_flags(s, user_id),
        enabled=repository.enabled_sections(s, user_id),
    )


@router.get("", response_model=SectionsOut)
def read_sections(user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    return _out(s, user_id)


@router.put("", response_model=SectionsOut)
def update_sections(body: SectionsIn, user_id: str = Depends(require_user), s: Session = Depends(session_dependency)):
    unknown = [name for name in body.sections if not is_known_section(name)]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown sections: {', '.join(sorted(unknown))}",
        )
    repository.set_sections(s, user_id, body.sections)
    logger.info(f"Sections updated for user={user_id}")
    return _out(s, user_id)

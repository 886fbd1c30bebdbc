from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..deps import get_reasoner, require_user
from ..logging_setup import get_logger
from ..recommender import recommend_articles
from ..schema import RecommendationOut
from ..sources import ingest_feeds
from ..store import session_dependency

logger = get_logger("newsbubble.routes.recommendations")

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


@router.get("", response_model=RecommendationOut)
def get_recommendations(
    user_id: str = Depends(require_user),
    s: Session = Depends(session_dependency),
    reasoner=Depends(get_reasoner),
):
    return recommend_articles(s, user_id, reasoner).to_dict()


@router.post("", response_model=RecommendationOut, summary="Regenerate recommendations")
def regenerate_recommendations(
    refresh_feeds: bool = Query(default=True, description="Run feed ingestion before recommending"),
    user_id: str = Depends(require_user),
    s: Session = Depends(session_dependency),
    reasoner=Depends(get_reasoner),
):
    if refresh_feeds:
        logger.info(f"Refreshing feeds before recommending for user={user_id}")
        ingest_feeds(s)
    return recommend_articles(s, user_id, reasoner).to_dict()

# newsbubble/recommender.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import time
import uuid

from sqlmodel import Session

from . import repository
from .config import CANDIDATE_LIMIT, HISTORY_LIMIT, MIN_HISTORY_CLICKS
from .fallback import categorize
from .logging_setup import get_logger
from .models import PROFILE_SOURCE_AI
from .parsing import MalformedResponse, parse_reply, resolve_articles
from .profile_policy import ProfileMode, classify_profile
from .prompts import PromptBranch, build_prompts, select_branch
from .reasoner import ReasonerUnavailable

logger = get_logger("newsbubble.recommender")

NOT_ENOUGH_DATA_MSG = (
    "Non abbiamo ancora abbastanza dati per creare il tuo profilo. "
    "Continua a leggere articoli per permetterci di conoscerti meglio!"
)
FALLBACK_NOTICE = (
    "Il servizio di personalizzazione non è disponibile in questo momento: "
    "ti mostriamo gli articoli più recenti, ordinati per sezione."
)


@dataclass
class RecommendationResult:
    articles: List[Dict[str, Any]] = field(default_factory=list)
    userProfile: Optional[str] = None
    fallback: bool = False
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "articles": self.articles,
            "userProfile": self.userProfile,
            "fallback": self.fallback,
            "notice": self.notice,
        }


def recommend_articles(
    s: Session,
    user_id: str,
    reasoner,
    min_history: int = MIN_HISTORY_CLICKS,
) -> RecommendationResult:
    """
    Build the personalized article list for one user:
    - load clicks, profile, enabled sections, candidates
    - decide who owns the profile (user-written text is obeyed, never rewritten)
    - ask the reasoning service once; fall back to keyword sections on any failure
    - persist an AI-written profile only in learning mode

    Store errors propagate; reasoning-service errors never do.
    """
    run_id = uuid.uuid4().hex[:8]

    def X(**fields):
        return {"run_id": run_id, "user_id": user_id, **fields}

    t0 = time.perf_counter()
    logger.info("RECOMMEND_START", extra=X(step="init"))

    # --- INIT ---
    history = repository.click_history(s, user_id, limit=HISTORY_LIMIT)
    profile = repository.get_profile(s, user_id)
    profile_text = profile.custom_profile if profile else None
    profile_source = profile.profile_source if profile else None
    sections = repository.enabled_sections(s, user_id)
    candidates = repository.recent_articles(s, limit=CANDIDATE_LIMIT)
    logger.info(
        "INPUTS_LOADED",
        extra=X(step="init", clicks=len(history), sections=sections, candidates=len(candidates)),
    )

    # --- RESOLVE_PROFILE ---
    mode = classify_profile(profile_text, profile_source)
    enough_history = len(history) >= min_history

    def shown_profile() -> Optional[str]:
        if mode == ProfileMode.USER_CUSTOMIZED:
            return profile_text
        if not enough_history:
            return NOT_ENOUGH_DATA_MSG
        return profile_text

    if not candidates:
        logger.info("NO_CANDIDATES", extra=X(step="done", handled=True))
        return RecommendationResult(articles=[], userProfile=shown_profile())

    # --- BUILD_PROMPT ---
    branch = select_branch(mode, len(history), min_history)
    system, user = build_prompts(branch, history, profile_text, sections, candidates)
    logger.info("PROMPT_BUILT", extra=X(step="build_prompt", mode=mode.value, branch=branch.value, prompt_chars=len(user)))

    # --- CALL_REASONER ---
    t_call = time.perf_counter()
    try:
        raw = reasoner.complete(system, user)
    except ReasonerUnavailable as e:
        logger.warning(
            "REASONER_UNAVAILABLE",
            extra=X(step="call_reasoner", handled=True, status_code=e.status_code, error=str(e)),
        )
        return _fallback(candidates, sections, shown_profile(), X, t0)
    logger.info(
        "REASONER_OK",
        extra=X(step="call_reasoner", reply_chars=len(raw), elapsed_ms=round((time.perf_counter() - t_call) * 1000)),
    )

    # --- VALIDATE ---
    try:
        reply = parse_reply(raw)
    except MalformedResponse as e:
        logger.warning(
            "VALIDATE_FAIL",
            extra=X(step="validate", handled=True, error=type(e).__name__, detail=str(e), reply_head=raw[:200]),
        )
        return _fallback(candidates, sections, shown_profile(), X, t0)

    articles = resolve_articles(reply, candidates)
    if not articles:
        logger.warning("VALIDATE_FAIL", extra=X(step="validate", handled=True, error="NoArticlesResolved"))
        return _fallback(candidates, sections, shown_profile(), X, t0)

    # --- PERSIST_PROFILE ---
    result_profile = shown_profile()
    if branch == PromptBranch.LEARNING:
        new_profile = (reply.userProfile or "").strip()
        if new_profile:
            repository.save_profile_text(s, user_id, new_profile, PROFILE_SOURCE_AI)
            result_profile = new_profile
            logger.info("PROFILE_PERSISTED", extra=X(step="persist_profile", chars=len(new_profile)))
    elif branch == PromptBranch.OBEDIENCE and reply.userProfile and reply.userProfile.strip() != (profile_text or "").strip():
        # the model rewrote a user profile; the stored text stays as it is
        logger.info("PROFILE_REWRITE_IGNORED", extra=X(step="persist_profile", handled=True))

    cat_dist = Counter(a["category"] for a in articles)
    logger.info(
        "RECOMMEND_DONE",
        extra=X(
            step="done",
            branch=branch.value,
            count=len(articles),
            category_dist=dict(cat_dist),
            total_elapsed_ms=round((time.perf_counter() - t0) * 1000),
        ),
    )
    return RecommendationResult(articles=articles, userProfile=result_profile)


def _fallback(candidates, sections, profile_text, X, t0) -> RecommendationResult:
    articles = categorize(candidates, sections)
    logger.info(
        "FALLBACK_DONE",
        extra=X(
            step="fallback",
            handled=True,
            count=len(articles),
            category_dist=dict(Counter(a["category"] for a in articles)),
            total_elapsed_ms=round((time.perf_counter() - t0) * 1000),
        ),
    )
    return RecommendationResult(
        articles=articles,
        userProfile=profile_text,
        fallback=True,
        notice=FALLBACK_NOTICE,
    )

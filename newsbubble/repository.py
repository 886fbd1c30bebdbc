# newsbubble/repository.py
"""
Queries shared by the recommendation engine, the ingestion job and the routers.
Every function takes an open Session and leaves commit decisions explicit.
Errors from the database are not caught here.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from .models import (
    Article, ClickEvent, UserProfile, SectionPreference, SavedArticle,
    PROFILE_SOURCE_AI, PROFILE_SOURCE_USER,
)
from .sections import DEFAULT_SECTIONS, SECTION_CATALOG

_INSERT_IGNORING_CONFLICTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


# ---------- Articles ----------

def recent_articles(s: Session, limit: int = 100) -> List[Article]:
    stmt = select(Article).order_by(Article.published_at.desc(), Article.id.desc()).limit(limit)
    return list(s.exec(stmt).all())


def upsert_articles(s: Session, items: Iterable[Dict[str, Any]]) -> int:
    """
    Insert articles keyed on URL; URLs already stored (or repeated in the batch)
    are ignored, including URLs another ingestion run commits concurrently
    (ON CONFLICT DO NOTHING).
    Returns the number of new rows.
    """
    batch: Dict[str, Dict[str, Any]] = {}
    for it in items:
        url = (it.get("url") or "").strip()
        if url and it.get("title") and url not in batch:
            batch[url] = it
    if not batch:
        return 0

    dialect = s.get_bind().dialect.name
    if dialect not in _INSERT_IGNORING_CONFLICTS:
        raise RuntimeError(f"article upsert is not supported on {dialect!r}")
    insert = _INSERT_IGNORING_CONFLICTS[dialect]

    conn = s.connection()
    now = datetime.utcnow()
    inserted = 0
    for url, it in batch.items():
        stmt = insert(Article).values(
            url=url,
            title=it["title"],
            description=it.get("description") or None,
            source=it.get("source") or "",
            image_url=it.get("image_url"),
            published_at=it.get("published_at"),
            category=it.get("category"),
            created_at=now,
        ).on_conflict_do_nothing(index_elements=["url"])
        inserted += conn.execute(stmt).rowcount
    s.commit()
    return inserted


# ---------- Clicks ----------

def record_click(s: Session, user_id: str, article_id: int) -> Optional[ClickEvent]:
    if s.get(Article, article_id) is None:
        return None
    ev = ClickEvent(user_id=user_id, article_id=article_id)
    s.add(ev)
    s.commit()
    s.refresh(ev)
    return ev


def click_history(s: Session, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """Most recent clicks first, joined with the clicked article."""
    stmt = (
        select(ClickEvent, Article)
        .join(Article, Article.id == ClickEvent.article_id)
        .where(ClickEvent.user_id == user_id)
        .order_by(ClickEvent.clicked_at.desc(), ClickEvent.id.desc())
        .limit(limit)
    )
    out: List[Dict[str, Any]] = []
    for ev, art in s.exec(stmt).all():
        out.append({
            "id": ev.id,
            "article_id": art.id,
            "clicked_at": ev.clicked_at,
            "title": art.title,
            "description": art.description or "",
            "source": art.source,
            "url": art.url,
            "category": art.category,
        })
    return out


def delete_click(s: Session, user_id: str, click_id: int) -> bool:
    ev = s.get(ClickEvent, click_id)
    if ev is None or ev.user_id != user_id:
        return False
    s.delete(ev)
    s.commit()
    return True


# ---------- Profile ----------

def get_profile(s: Session, user_id: str) -> Optional[UserProfile]:
    return s.exec(select(UserProfile).where(UserProfile.user_id == user_id)).first()


def save_profile_text(s: Session, user_id: str, text: Optional[str], source: str) -> UserProfile:
    """Write custom_profile together with its provenance. Last write wins."""
    prof = get_profile(s, user_id) or UserProfile(user_id=user_id)
    prof.custom_profile = text
    prof.profile_source = source
    prof.updated_at = datetime.utcnow()
    s.add(prof)
    s.commit()
    s.refresh(prof)
    return prof


def save_user_edit(s: Session, user_id: str, text: Optional[str]) -> UserProfile:
    """
    Direct edit from the settings page. Clearing the text hands the profile
    back to the engine.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        return save_profile_text(s, user_id, None, PROFILE_SOURCE_AI)
    return save_profile_text(s, user_id, cleaned, PROFILE_SOURCE_USER)


def update_profile_details(
    s: Session, user_id: str, display_name: Optional[str] = None, interests: Optional[str] = None
) -> UserProfile:
    prof = get_profile(s, user_id) or UserProfile(user_id=user_id)
    if display_name is not None:
        prof.display_name = display_name
    if interests is not None:
        prof.interests = interests
    prof.updated_at = datetime.utcnow()
    s.add(prof)
    s.commit()
    s.refresh(prof)
    return prof


# ---------- Sections ----------

def section_flags(s: Session, user_id: str) -> Dict[str, bool]:
    rows = s.exec(select(SectionPreference).where(SectionPreference.user_id == user_id)).all()
    if not rows:
        return {name: name in DEFAULT_SECTIONS for name in SECTION_CATALOG}
    stored = {r.section_name: bool(r.enabled) for r in rows}
    return {name: stored.get(name, False) for name in SECTION_CATALOG}


def enabled_sections(s: Session, user_id: str) -> List[str]:
    """Enabled sections in catalog order; the default subset if none are enabled."""
    flags = section_flags(s, user_id)
    enabled = [name for name in SECTION_CATALOG if flags.get(name)]
    return enabled or list(DEFAULT_SECTIONS)


def set_sections(s: Session, user_id: str, flags: Dict[str, bool]) -> None:
    for row in s.exec(select(SectionPreference).where(SectionPreference.user_id == user_id)).all():
        s.delete(row)
    s.flush()
    for name in SECTION_CATALOG:
        if name in flags:
            s.add(SectionPreference(user_id=user_id, section_name=name, enabled=bool(flags[name])))
    s.commit()


# ---------- Saved articles ----------

def list_saved(s: Session, user_id: str) -> List[SavedArticle]:
    stmt = select(SavedArticle).where(SavedArticle.user_id == user_id).order_by(SavedArticle.saved_at.desc())
    return list(s.exec(stmt).all())


def save_article(s: Session, user_id: str, fields: Dict[str, Any]) -> Tuple[SavedArticle, bool]:
    """Returns (row, created). Saving the same URL twice keeps the first row."""
    existing = s.exec(
        select(SavedArticle).where(SavedArticle.user_id == user_id, SavedArticle.url == fields["url"])
    ).first()
    if existing:
        return existing, False
    row = SavedArticle(user_id=user_id, **fields)
    s.add(row)
    s.commit()
    s.refresh(row)
    return row, True


def delete_saved(s: Session, user_id: str, saved_id: int) -> bool:
    row = s.get(SavedArticle, saved_id)
    if row is None or row.user_id != user_id:
        return False
    s.delete(row)
    s.commit()
    return True

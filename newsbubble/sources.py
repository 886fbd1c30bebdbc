# newsbubble/sources.py
"""
RSS ingestion for the shared article store.

fetch_all()     downloads every feed in RSS_FEEDS concurrently and returns flat items
ingest_feeds()  fetch_all() + upsert by URL (duplicates ignored)

One failing feed is logged and skipped; it never fails the batch.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional
import html
import re
import time

import feedparser
import httpx
from sqlmodel import Session

from .config import FEED_TIMEOUT_S, MAX_ITEMS_PER_FEED
from .logging_setup import get_logger
from . import repository

logger = get_logger("newsbubble.sources")

DESCRIPTION_MAX_CHARS = 200
USER_AGENT = "NewsBubbleBot/1.0 (+https://example.com)"


@dataclass(frozen=True)
class Feed:
    source: str
    url: str
    section: Optional[str] = None  # hint stored on the article, not a final category


RSS_FEEDS: List[Feed] = [
    # News generali
    Feed("Repubblica", "https://www.repubblica.it/rss/homepage/rss2.0.xml"),
    Feed("Corriere della Sera", "https://www.corriere.it/rss/homepage.xml"),
    Feed("ANSA", "https://www.ansa.it/sito/ansait_rss.xml"),
    # Sport
    Feed("Repubblica Sport", "https://www.repubblica.it/rss/sport/rss2.0.xml", "Sport"),
    Feed("Corriere Sport", "https://www.corriere.it/rss/sport.xml", "Sport"),
    Feed("La Gazzetta dello Sport", "https://www.gazzetta.it/rss/home.xml", "Sport"),
    Feed("Sky Sport", "https://sport.sky.it/rss/sport.xml", "Sport"),
    # Cultura e Spettacoli
    Feed("Repubblica Spettacoli", "https://www.repubblica.it/rss/spettacoli/rss2.0.xml", "Cultura"),
    Feed("Corriere Spettacoli", "https://www.corriere.it/rss/spettacoli.xml", "Cultura"),
    Feed("ANSA Cultura", "https://www.ansa.it/sito/notizie/cultura/cultura_rss.xml", "Cultura"),
    # Politica
    Feed("ANSA Politica", "https://www.ansa.it/sito/notizie/politica/politica_rss.xml", "Politica"),
    Feed("Repubblica Politica", "https://www.repubblica.it/rss/politica/rss2.0.xml", "Politica"),
    # Esteri
    Feed("ANSA Mondo", "https://www.ansa.it/sito/notizie/mondo/mondo_rss.xml", "Politica estera"),
    # Roma
    Feed("Repubblica Roma", "https://roma.repubblica.it/rss/rss2.0.xml", "Roma"),
]


# ---------- Utilities ----------

_TAG_RE = re.compile(r"<[^>]*>")


def clean_text(value: str) -> str:
    """Drop markup and entities, collapse whitespace."""
    text = html.unescape(_TAG_RE.sub("", value or ""))
    return " ".join(text.split())


def _parse_entry_datetime(entry) -> datetime:
    """feedparser's parsed time tuple when there is one, else now (UTC, naive)."""
    tt = getattr(entry, "published_parsed", None) or getattr(entry, "updated_parsed", None)
    if tt:
        try:
            return datetime(*tt[:6])
        except (TypeError, ValueError):
            pass
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _entry_image(entry) -> Optional[str]:
    for key in ("media_content", "media_thumbnail"):
        for media in getattr(entry, key, None) or []:
            url = media.get("url")
            if url:
                return url
    for enc in getattr(entry, "enclosures", None) or []:
        if (enc.get("type") or "").startswith("image") and enc.get("href"):
            return enc["href"]
    return None


def parse_feed(text: str, feed: Feed, max_items: int = MAX_ITEMS_PER_FEED) -> List[Dict]:
    parsed = feedparser.parse(text)
    items: List[Dict] = []
    for e in parsed.entries:
        if len(items) >= max_items:
            break
        title = clean_text(getattr(e, "title", ""))
        url = (getattr(e, "link", "") or "").strip()
        if not title or not url:
            continue
        items.append({
            "url": url,
            "title": title,
            "description": clean_text(getattr(e, "summary", ""))[:DESCRIPTION_MAX_CHARS].strip(),
            "image_url": _entry_image(e),
            "source": feed.source,
            "published_at": _parse_entry_datetime(e),
            "category": feed.section,
        })
    return items


def fetch_feed(feed: Feed, client: httpx.Client) -> List[Dict]:
    try:
        r = client.get(feed.url)
        r.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("FEED_FETCH_FAILED", extra={"source": feed.source, "url": feed.url, "error": type(e).__name__})
        return []
    return parse_feed(r.text, feed)


def fetch_all(feeds: Optional[List[Feed]] = None, max_workers: int = 8) -> List[Dict]:
    feeds = feeds if feeds is not None else RSS_FEEDS
    headers = {"User-Agent": USER_AGENT}
    with httpx.Client(follow_redirects=True, timeout=FEED_TIMEOUT_S, headers=headers) as client:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda f: fetch_feed(f, client), feeds))
    items: List[Dict] = []
    for batch in results:
        items.extend(batch)
    return items


def ingest_feeds(s: Session, feeds: Optional[List[Feed]] = None) -> Dict[str, int]:
    t0 = time.perf_counter()
    items = fetch_all(feeds)
    inserted = repository.upsert_articles(s, items)
    logger.info(
        "INGEST_DONE",
        extra={
            "step": "ingest",
            "fetched": len(items),
            "inserted": inserted,
            "elapsed_ms": round((time.perf_counter() - t0) * 1000),
        },
    )
    return {"fetched": len(items), "inserted": inserted}

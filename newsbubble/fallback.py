# newsbubble/fallback.py
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .config import ARTICLES_PER_SECTION
from .parsing import article_payload
from .sections import rules_for


def match_section(article: Any, enabled: Sequence[str]) -> str | None:
    """First enabled section (in rule priority order) whose keywords hit the text."""
    text = f"{article.title or ''} {article.description or ''}".lower()
    for rule in rules_for(list(enabled)):
        if rule.matches(text):
            return rule.name
    return None


def bucket_articles(candidates: Sequence[Any], enabled: Sequence[str]) -> Dict[str, List[Any]]:
    buckets: Dict[str, List[Any]] = {name: [] for name in enabled}
    for article in candidates:
        section = match_section(article, enabled)
        if section is None:
            # smallest bucket; min() keeps the first on ties
            section = min(enabled, key=lambda name: len(buckets[name]))
        buckets[section].append(article)
    return buckets


def fill_to(items: List[Any], n: int) -> List[Any]:
    """Truncate to n, or repeat the list cyclically up to n. Empty stays empty."""
    picked = items[:n]
    while items and len(picked) < n:
        picked.append(items[len(picked) % len(items)])
    return picked


def categorize(
    candidates: Sequence[Any],
    enabled: Sequence[str],
    per_section: int = ARTICLES_PER_SECTION,
) -> List[Dict[str, Any]]:
    """
    Keyword categorization used when the reasoning service cannot be used.
    Deterministic and offline. Output is flattened in enabled-section order.
    """
    if not enabled:
        return []
    buckets = bucket_articles(candidates, enabled)
    out: List[Dict[str, Any]] = []
    for name in enabled:
        for article in fill_to(buckets[name], per_section):
            out.append(article_payload(article, name))
    return out

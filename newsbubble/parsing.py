# newsbubble/parsing.py
"""
Boundary between the reasoning service's free text and our article records.

parse_reply()    text -> ReasonerReply         (ResponseParseError / ResponseShapeError)
resolve_articles reply + candidates -> tagged article dicts
"""
from __future__ import annotations

import json
import re
from typing import Annotated, Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, StrictStr, ValidationError

from .config import CANDIDATE_LIMIT


class MalformedResponse(Exception):
    """The reply could not be turned into a recommendation."""


class ResponseParseError(MalformedResponse):
    """Reply is not a JSON object."""


class ResponseShapeError(MalformedResponse):
    """Reply is JSON but not the expected shape."""


# Never longer than the candidate pool
SectionUrls = Annotated[List[StrictStr], Field(max_length=CANDIDATE_LIMIT)]


class ReasonerReply(BaseModel):
    articles: Dict[StrictStr, SectionUrls]
    userProfile: Optional[StrictStr] = None


_FENCE_RE = re.compile(r"```[a-zA-Z]*\n?")


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_reply(text: str) -> ReasonerReply:
    cleaned = strip_fences(text)
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, ValueError) as e:
        raise ResponseParseError(f"reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseError(f"reply is JSON {type(data).__name__}, expected an object")
    try:
        return ReasonerReply.model_validate(data)
    except ValidationError as e:
        raise ResponseShapeError(f"reply has the wrong shape: {e.error_count()} error(s)") from e


def article_payload(article: Any, category: str) -> Dict[str, Any]:
    return {
        "id": article.id,
        "title": article.title,
        "description": article.description,
        "url": article.url,
        "source": article.source,
        "image_url": article.image_url,
        "published_at": article.published_at,
        "category": category,
    }


def resolve_articles(reply: ReasonerReply, candidates: Sequence[Any]) -> List[Dict[str, Any]]:
    """
    Map selected URLs back to candidate articles, tagged with the section they
    were listed under. Unknown URLs are dropped; a URL listed more than once
    (in one section or across several) is kept at its first position only.
    """
    by_url = {a.url: a for a in candidates}
    seen: set[str] = set()
    out: List[Dict[str, Any]] = []
    for section, urls in reply.articles.items():
        for url in urls:
            article = by_url.get(url)
            if article is None or url in seen:
                continue
            seen.add(url)
            out.append(article_payload(article, section))
    return out

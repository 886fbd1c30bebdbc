# tests/test_parsing.py
import json

import pytest

from newsbubble.config import CANDIDATE_LIMIT
from newsbubble.models import Article
from newsbubble.parsing import (
    MalformedResponse, ResponseParseError, ResponseShapeError,
    parse_reply, resolve_articles, strip_fences,
)

CANDIDATES = [
    Article(id=i, url=f"https://x/{i}", title=f"Titolo {i}", description="d", source="ANSA")
    for i in range(1, 6)
]


def test_strip_fences():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_fences('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_fenced_reply():
    raw = '```json\n{"articles": {"Sport": ["https://x/1"]}, "userProfile": "Ama il calcio"}\n```'
    reply = parse_reply(raw)
    assert reply.articles == {"Sport": ["https://x/1"]}
    assert reply.userProfile == "Ama il calcio"


def test_user_profile_is_optional():
    reply = parse_reply('{"articles": {"Sport": []}}')
    assert reply.userProfile is None


@pytest.mark.parametrize("raw", ["", "Ecco i tuoi articoli!", '{"articles": ', "[1, 2]"])
def test_not_json_object_is_parse_error(raw):
    with pytest.raises(ResponseParseError):
        parse_reply(raw)


@pytest.mark.parametrize("payload", [
    {"userProfile": "x"},                                 # articles missing
    {"articles": ["https://x/1"]},                        # not a mapping
    {"articles": {"Sport": "https://x/1"}},               # not a list
    {"articles": {"Sport": [1, 2]}},                      # not strings
    {"articles": {"Sport": []}, "userProfile": 42},       # profile not a string
])
def test_wrong_shape_is_shape_error(payload):
    with pytest.raises(ResponseShapeError):
        parse_reply(json.dumps(payload))


def test_both_errors_are_malformed_response():
    assert issubclass(ResponseParseError, MalformedResponse)
    assert issubclass(ResponseShapeError, MalformedResponse)


def test_resolve_tags_with_section_and_drops_unknown_urls():
    reply = parse_reply(json.dumps({"articles": {
        "Sport": ["https://x/2", "https://unknown/9", "https://x/1"],
        "Cultura": ["https://x/3"],
    }}))
    out = resolve_articles(reply, CANDIDATES)
    assert [(a["url"], a["category"]) for a in out] == [
        ("https://x/2", "Sport"),
        ("https://x/1", "Sport"),
        ("https://x/3", "Cultura"),
    ]
    assert out[0]["title"] == "Titolo 2"


def test_each_matching_url_appears_once():
    reply = parse_reply(json.dumps({"articles": {
        "Sport": ["https://x/1", "https://x/1", "https://x/1", "https://x/1"],
        "Politica": ["https://x/1", "https://x/4"],
    }}))
    out = resolve_articles(reply, CANDIDATES)
    assert [(a["url"], a["category"]) for a in out] == [
        ("https://x/1", "Sport"),
        ("https://x/4", "Politica"),
    ]


def test_url_match_is_exact():
    reply = parse_reply(json.dumps({"articles": {"Sport": ["https://x/1/", "HTTPS://X/1"]}}))
    assert resolve_articles(reply, CANDIDATES) == []


def test_section_list_is_bounded_by_candidate_pool():
    at_limit = {"articles": {"Sport": ["https://x/1"] * CANDIDATE_LIMIT}}
    assert len(parse_reply(json.dumps(at_limit)).articles["Sport"]) == CANDIDATE_LIMIT

    over = {"articles": {"Sport": ["https://x/1"] * (CANDIDATE_LIMIT + 1)}}
    with pytest.raises(ResponseShapeError):
        parse_reply(json.dumps(over))

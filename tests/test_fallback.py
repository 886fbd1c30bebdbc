# tests/test_fallback.py
from collections import Counter

from newsbubble.fallback import categorize, match_section, fill_to
from newsbubble.models import Article


def _art(n, title, desc=""):
    return Article(id=n, url=f"https://x/{n}", title=title, description=desc, source="ANSA")


def test_calcio_and_cinema_split_into_sport_and_cultura():
    calcio = [_art(i, f"Calcio, risultati della giornata {i}", "Il punto sulla giornata") for i in range(6)]
    cinema = [_art(10 + i, f"Stasera al cinema: titolo {i}", "Recensione della settimana") for i in range(4)]
    out = categorize(calcio + cinema, ["Sport", "Cultura"])

    sport = [a["url"] for a in out if a["category"] == "Sport"]
    cultura = [a["url"] for a in out if a["category"] == "Cultura"]
    assert sport == [a.url for a in calcio[:4]]
    assert cultura == [a.url for a in cinema]
    # flattened in enabled-section order
    assert [a["category"] for a in out] == ["Sport"] * 4 + ["Cultura"] * 4


def test_matching_is_case_insensitive_and_reads_description():
    a = _art(1, "Serata speciale", "Il grande CINEMA italiano in piazza")
    assert match_section(a, ["Sport", "Cultura"]) == "Cultura"


def test_short_words_match_only_as_whole_words():
    assert match_section(_art(1, "Lo sport azzurro festeggia"), ["Sport", "Cultura"]) == "Sport"
    assert match_section(_art(2, "La gara di domenica a Monza"), ["Sport", "Cultura"]) == "Sport"
    assert match_section(_art(3, "Premio Strega, i finalisti"), ["Sport", "Cultura"]) == "Cultura"
    # prefixes of unrelated words do not count
    assert match_section(_art(4, "Nuova garanzia allo sportello"), ["Sport", "Cultura"]) is None
    assert match_section(_art(5, "Tariffe, a parte i rincari"), ["Sport", "Cultura"]) is None


def test_disabled_sections_never_match():
    a = _art(1, "Calcio: il derby di stasera")
    assert match_section(a, ["Cultura", "Politica"]) is None


def test_priority_follows_rule_table_not_enabled_order():
    # both a foreign-politics and a sport keyword: the more specific section wins
    a = _art(1, "Ucraina, la nazionale di calcio gioca per la pace")
    assert match_section(a, ["Sport", "Politica estera"]) == "Politica estera"


def test_short_section_is_padded_by_repeating_its_own_articles():
    only = _art(1, "Calcio mercato: ultime notizie")
    out = categorize([only], ["Sport", "Cultura"])
    assert [a["category"] for a in out] == ["Sport"] * 4
    assert {a["url"] for a in out} == {only.url}


def test_empty_section_stays_empty():
    out = categorize([_art(1, "Calcio, la classifica")], ["Sport", "Cultura"])
    assert "Cultura" not in {a["category"] for a in out}


def test_unmatched_articles_go_to_smallest_section():
    arts = [
        _art(1, "Calcio, il derby"),
        _art(2, "Meteo: sole in arrivo"),
        _art(3, "Calcio, la classifica"),
        _art(4, "Borsa in rialzo"),
        _art(5, "Traffico in autostrada"),
    ]
    out = categorize(arts, ["Politica", "Sport"])
    politica = [a["id"] for a in out if a["category"] == "Politica"]
    sport = [a["id"] for a in out if a["category"] == "Sport"]
    assert politica == [2, 4, 5, 2]
    assert sport == [1, 3, 1, 3]


def test_never_more_than_four_per_section_and_one_section_per_article():
    titles = ["Calcio", "Cinema", "Governo", "Ucraina", "Meteo", "Borsa", "Tennis", "Teatro"]
    arts = [_art(i, f"{titles[i % len(titles)]} notizia {i}") for i in range(60)]
    enabled = ["Politica", "Politica estera", "Sport", "Cultura"]
    out = categorize(arts, enabled)

    per_section = Counter(a["category"] for a in out)
    assert set(per_section) <= set(enabled)
    assert all(n <= 4 for n in per_section.values())
    assert all(isinstance(a["category"], str) for a in out)


def test_no_sections_or_no_candidates():
    assert categorize([_art(1, "Calcio")], []) == []
    assert categorize([], ["Sport"]) == []


def test_fill_to():
    assert fill_to([1, 2], 4) == [1, 2, 1, 2]
    assert fill_to([1, 2, 3, 4, 5], 4) == [1, 2, 3, 4]
    assert fill_to([], 4) == []

# tests/test_store.py
from datetime import datetime

from sqlmodel import select

from newsbubble import repository
from newsbubble.models import Article, PROFILE_SOURCE_AI, PROFILE_SOURCE_USER
from newsbubble.sections import DEFAULT_SECTIONS


def test_db_roundtrip(session):
    a = Article(url="u", title="t")
    session.add(a); session.commit(); session.refresh(a)
    got = session.exec(select(Article).where(Article.id == a.id)).first()
    assert got and got.title == "t"


def test_upsert_articles_keys_on_url(session):
    items = [
        {"url": "https://a", "title": "A", "published_at": datetime(2025, 1, 1)},
        {"url": "https://a", "title": "A again"},
        {"url": "https://b", "title": "B", "published_at": datetime(2025, 1, 2)},
        {"url": "", "title": "no url"},
    ]
    assert repository.upsert_articles(session, items) == 2
    assert repository.upsert_articles(session, items) == 0
    assert [a.url for a in repository.recent_articles(session)] == ["https://b", "https://a"]
    assert repository.recent_articles(session, limit=1)[0].url == "https://b"


def test_upsert_skips_url_committed_by_concurrent_ingestion(session, mocker):
    from newsbubble.store import get_session

    real_connection = session.connection

    def scheduler_commits_first(*args, **kwargs):
        # the scheduler's run lands the same URL just before our insert
        with get_session() as other:
            other.add(Article(url="https://a", title="from the scheduler"))
            other.commit()
        return real_connection(*args, **kwargs)

    mocker.patch.object(session, "connection", side_effect=scheduler_commits_first)
    items = [{"url": "https://a", "title": "A"}, {"url": "https://b", "title": "B"}]

    assert repository.upsert_articles(session, items) == 1
    stored = {a.url: a.title for a in session.exec(select(Article)).all()}
    assert stored == {"https://a": "from the scheduler", "https://b": "B"}


def test_click_history_newest_first_and_scoped_to_user(session, add_articles):
    arts = add_articles([("Uno", "d1"), ("Due", "d2")])
    repository.record_click(session, "u1", arts[0].id)
    repository.record_click(session, "u1", arts[1].id)
    repository.record_click(session, "u2", arts[0].id)

    hist = repository.click_history(session, "u1")
    assert [h["title"] for h in hist] == ["Due", "Uno"]
    assert hist[0]["url"] == arts[1].url and hist[0]["description"] == "d2"
    assert len(repository.click_history(session, "u1", limit=1)) == 1


def test_click_on_missing_article_is_rejected(session):
    assert repository.record_click(session, "u1", 999) is None


def test_delete_click_only_for_owner(session, add_articles):
    arts = add_articles([("Uno", "d1")])
    ev = repository.record_click(session, "u1", arts[0].id)
    assert repository.delete_click(session, "u2", ev.id) is False
    assert repository.delete_click(session, "u1", ev.id) is True
    assert repository.click_history(session, "u1") == []


def test_sections_default_and_override(session):
    assert repository.enabled_sections(session, "u1") == DEFAULT_SECTIONS
    repository.set_sections(session, "u1", {"Sport": True, "Filosofia": True, "Politica": False})
    assert repository.enabled_sections(session, "u1") == ["Sport", "Filosofia"]
    flags = repository.section_flags(session, "u1")
    assert flags["Politica"] is False and flags["Cultura"] is False


def test_all_sections_disabled_falls_back_to_defaults(session):
    repository.set_sections(session, "u1", {"Sport": False})
    assert repository.enabled_sections(session, "u1") == DEFAULT_SECTIONS


def test_user_edit_sets_provenance_and_clearing_resets_it(session):
    prof = repository.save_user_edit(session, "u1", "  Solo tennis  ")
    assert prof.custom_profile == "Solo tennis"
    assert prof.profile_source == PROFILE_SOURCE_USER

    prof = repository.save_user_edit(session, "u1", "")
    assert prof.custom_profile is None
    assert prof.profile_source == PROFILE_SOURCE_AI


def test_saved_articles_are_deduplicated_per_user(session):
    row, created = repository.save_article(session, "u1", {"title": "T", "url": "https://a"})
    again, created_again = repository.save_article(session, "u1", {"title": "T", "url": "https://a"})
    assert created and not created_again and again.id == row.id
    assert repository.delete_saved(session, "u2", row.id) is False
    assert repository.delete_saved(session, "u1", row.id) is True
    assert repository.list_saved(session, "u1") == []

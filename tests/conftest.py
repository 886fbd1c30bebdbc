# tests/conftest.py
import itertools, pathlib, pytest
from datetime import datetime, timedelta
from dotenv import load_dotenv

# Load before any newsbubble module reads its configuration
load_dotenv(pathlib.Path(__file__).parent / ".env.test", override=True)

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _fresh_db():
    from sqlmodel import SQLModel
    from newsbubble.store import engine, init_db
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield


@pytest.fixture()
def session():
    from newsbubble.store import get_session
    with get_session() as s:
        yield s


class FakeReasoner:
    """Stands in for ReasoningClient: returns a canned reply or raises."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system, user):
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def fake_reasoner():
    return FakeReasoner


@pytest.fixture()
def add_articles(session):
    """Insert (title, description) pairs as articles, newest first; returns them."""
    from newsbubble.models import Article

    def _add(pairs, source="ANSA"):
        base = datetime(2025, 1, 1, 12, 0)
        rows = []
        for i, (title, desc) in enumerate(pairs):
            a = Article(
                url=f"https://news.example/{next(_seq)}",
                title=title,
                description=desc,
                source=source,
                published_at=base - timedelta(minutes=i),
            )
            session.add(a)
            rows.append(a)
        session.commit()
        for a in rows:
            session.refresh(a)
        return rows

    return _add


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from newsbubble.main import app
    return TestClient(app)

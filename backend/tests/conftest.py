import os
import time

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient

from forumview.db import Base, engine, SessionLocal
from forumview.models import Article, Comment, Domain, Tag, Timeline, User


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded():
    """Two users, five articles, tags, comments, domains and timelines."""
    now = int(time.time())
    session = SessionLocal()
    try:
        alice = User(name="alice", avatar_url="https://img.example.com/alice.gif", list_page_size=0, avatar_view_mode=0)
        bob = User(name="bob", avatar_url="https://img.example.com/bob.gif", list_page_size=2, avatar_view_mode=1)
        session.add_all([alice, bob])
        session.flush()
        session.add_all([
            Article(id=1, title="First", tags="python,web", author_id=alice.id, comment_count=1, view_count=10),
            Article(id=2, title="Second", tags="python", author_id=bob.id, perfect=True, comment_count=5, view_count=3),
            Article(id=3, title="Third", tags="rust,c,go", author_id=alice.id, perfect=True,
                    stick_expires_at=now + 3600, comment_count=0, view_count=1),
            Article(id=4, title="Fourth", tags="", author_id=bob.id, stick_expires_at=now - 3600,
                    comment_count=9, view_count=0),
            Article(id=5, title="Fifth", tags="misc", author_id=alice.id, perfect=True, comment_count=5, view_count=7),
        ])
        session.add_all([
            Tag(title="python", icon_path="/icons/python.png", reference_count=2),
            Tag(title="rust", icon_path=None, reference_count=1),
            Tag(title="misc", icon_path="", reference_count=1),
        ])
        session.add_all([
            Comment(content="<p>Nice <b>post</b></p>", article_id=1, author_id=bob.id),
            Comment(content="<p>" + "x" * 100 + "</p>", article_id=2, author_id=alice.id),
        ])
        session.add_all([
            Domain(title="Dev", uri="dev", sort=2, nav=True),
            Domain(title="Life", uri="life", sort=1, nav=True),
            Domain(title="Hidden", uri="hidden", sort=0, nav=False),
        ])
        session.add_all([Timeline(content="alice posted First"), Timeline(content="bob commented")])
        session.commit()
    finally:
        session.close()
    return now


@pytest.fixture
def client():
    from forumview.main import app, limiter
    limiter.reset()
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

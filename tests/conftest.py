"""
Pytest configuration and fixtures
"""
import os
from pathlib import Path

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Settings are cached on first use, so point them at the fixtures before
# anything from minimalizer is imported.
os.environ["MINIMALIZER_TEMPLATES_DIR"] = str(FIXTURES_DIR / "templates")
os.environ["MINIMALIZER_LOCALES_DIR"] = str(FIXTURES_DIR / "locales")
os.environ["MINIMALIZER_DATABASE_URL"] = "sqlite://"
os.environ["MINIMALIZER_LOG_FORMAT"] = "text"
os.environ["MINIMALIZER_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from minimalizer.core.application import create_app
from minimalizer.core.database import Base, get_db
from tests import sample_app


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite engine shared across threads"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Create a database session for testing"""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def post(db):
    post = sample_app.Post(title="Hello", slug="hello", body="First post")
    db.add(post)
    db.commit()
    return post


@pytest.fixture(scope="function")
def posts(db):
    records = [
        sample_app.Post(title=f"Post {index}", slug=f"post-{index}")
        for index in range(1, 4)
    ]
    db.add_all(records)
    db.commit()
    return records


@pytest.fixture(scope="function")
def comment(db, post):
    comment = sample_app.Comment(post_id=post.id, body="Nice one")
    db.add(comment)
    db.commit()
    return comment


@pytest.fixture(scope="function")
def client(db):
    """Create test client with database dependency override"""
    app = create_app(sample_app.router)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

"""
Pytest configuration and fixtures for the campus directory tests.
"""

import os

# Settings are read once at import time, so the test environment goes first
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "test_admin_password")
os.environ.setdefault("DEV_MODE", "true")
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from datetime import datetime, timedelta
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.core.database import Base, get_db
from app.core.auth import create_access_token
from app.core.config import settings
from app.schemas.category import CategoryCreate, CategoryRecord
from app.schemas.service import ServiceCreate, ServiceRecord
from app.services.directory_manager import CategoryManager, ServiceManager


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Rate-limit counters live in process memory; every test starts from zero."""
    from app.api.endpoints import auth, feedback, submissions

    for module in (auth, feedback, submissions):
        module.limiter.reset()
    yield


@pytest.fixture(scope="function")
def test_app(db_session):
    """Create a FastAPI test app without lifespan events."""
    from fastapi import FastAPI
    from app.main import include_routers, register_handlers

    # Create app without lifespan to avoid event loop issues
    test_app = FastAPI(title="Campus Directory - Test", version="1.0.0")
    register_handlers(test_app)
    include_routers(test_app)

    @test_app.get("/health")
    def health():
        return {"status": "ok"}

    # Override database dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db

    return test_app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def admin_headers() -> dict:
    """Authorization headers carrying an admin token."""
    access_token = create_access_token(data={"sub": settings.ADMIN_USERNAME})
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture(scope="function")
def admin_client(client) -> TestClient:
    """Create a client authenticated through the auth cookie."""
    access_token = create_access_token(data={"sub": settings.ADMIN_USERNAME})
    client.cookies.set("auth_token", access_token)
    return client


@pytest.fixture(scope="function")
def directory(db_session) -> dict:
    """
    Persisted directory:

    - A (campus) with section B, which holds service S1
    - C (general) holding service S2
    """
    categories = CategoryManager(db_session)
    services = ServiceManager(db_session)

    a = categories.create(CategoryCreate(name="A", type="campus", sort_order=0))
    c = categories.create(CategoryCreate(name="C", type="general", sort_order=1))
    b = categories.create(
        CategoryCreate(name="B", type="section", parent_id=a.id, sort_order=0)
    )
    s1 = services.create(
        ServiceCreate(
            category_id=b.id,
            title="Room booking",
            description="Reserve a study room",
            tags=["study"],
            href="https://example.com/rooms",
        )
    )
    s2 = services.create(
        ServiceCreate(
            category_id=c.id,
            title="Wellbeing hotline",
            description="Talk to someone",
            tags=["health"],
        )
    )
    return {"A": a, "B": b, "C": c, "S1": s1, "S2": s2}


def _category(id, type, parent_id=None, sort_order=0, minutes=0, services=(), **extra):
    name = extra.pop("name", id)
    return CategoryRecord(
        id=id,
        name=name,
        type=type,
        parent_id=parent_id,
        sort_order=sort_order,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        services=list(services),
        **extra,
    )


def _service(id, category_id, sort_order=0, minutes=0, **extra):
    title = extra.pop("title", id)
    return ServiceRecord(
        id=id,
        category_id=category_id,
        title=title,
        sort_order=sort_order,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **extra,
    )


@pytest.fixture
def make_category():
    """Factory for in-memory category rows."""
    return _category


@pytest.fixture
def make_service():
    """Factory for in-memory service rows."""
    return _service


@pytest.fixture
def flat_directory():
    """
    Flat collection: A (campus) > B (section) holding S1, and C (general)
    holding S2. Services are embedded in their category rows.
    """
    s1 = _service("S1", "B", title="Room booking", description="Reserve a study room")
    s2 = _service("S2", "C", title="Wellbeing hotline", tags=["health"])
    return [
        _category("A", "campus", sort_order=0),
        _category("B", "section", parent_id="A", sort_order=0, services=[s1]),
        _category("C", "general", sort_order=1, services=[s2]),
    ]

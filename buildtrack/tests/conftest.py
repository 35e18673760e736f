import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import os
from typing import Generator, Any

# Must be set before buildtrack.core.settings is imported anywhere
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "testsecretkey"
os.environ["FIRST_SUPERUSER_USERNAME"] = "testadmin"
os.environ["FIRST_SUPERUSER_EMAIL"] = "testadmin@example.com"
os.environ["FIRST_SUPERUSER_PASSWORD"] = "testpassword"
os.environ["ENV"] = "test"
os.environ.pop("TRANSLATION_CACHE_FILE", None)
os.environ.pop("LOKALISE_API_KEY", None)
os.environ.pop("LOKALISE_PROJECT_ID", None)

# Registers every model on Base.metadata
import buildtrack.models

from buildtrack.models.base import Base
from buildtrack.core.settings import settings as app_settings
from buildtrack.main import app

engine = create_engine(
    app_settings.DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

from buildtrack.dependencies import get_db
from buildtrack.crud.user import create_user, get_user_by_username
from buildtrack.schemas.user import UserCreate
from buildtrack.core import security
from buildtrack.services.translations import translation_cache


@pytest.fixture(scope="session", autouse=True)
def create_test_tables_session_scope():
    """
    Create all tables once per test session and drop them afterwards.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clear_translation_cache():
    translation_cache.clear()
    yield
    translation_cache.clear()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session bound to an outer transaction that is rolled back after each test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient whose get_db dependency yields the test session.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    del app.dependency_overrides[get_db]


@pytest.fixture(scope="function")
def test_superuser(db: Session) -> Any:
    user_in = UserCreate(
        username=app_settings.FIRST_SUPERUSER_USERNAME,
        email=app_settings.FIRST_SUPERUSER_EMAIL,
        password=app_settings.FIRST_SUPERUSER_PASSWORD,
        first_name="Test",
        last_name="Admin",
        is_superuser=True,
        is_active=True
    )
    user = get_user_by_username(db, username=user_in.username)
    if not user:
        user = create_user(db=db, data=user_in.model_dump())
    return user

@pytest.fixture(scope="function")
def test_user(db: Session) -> Any:
    user_in = UserCreate(
        username="testuser",
        email="testuser@example.com",
        password="testpassword",
        first_name="Test",
        last_name="User",
        is_superuser=False,
        is_active=True
    )
    user = get_user_by_username(db, username=user_in.username)
    if not user:
        user = create_user(db=db, data=user_in.model_dump())
    return user

@pytest.fixture(scope="function")
def other_user(db: Session) -> Any:
    user = get_user_by_username(db, username="otheruser")
    if not user:
        user = create_user(db=db, data={
            "username": "otheruser",
            "email": "otheruser@example.com",
            "password": "otherpassword",
        })
    return user

def _token_headers(username: str) -> dict[str, str]:
    token, _ = security.create_access_token(data={"sub": username})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture(scope="function")
def superuser_token_headers(test_superuser: Any) -> dict[str, str]:
    return _token_headers(test_superuser.username)

@pytest.fixture(scope="function")
def normal_user_token_headers(test_user: Any) -> dict[str, str]:
    return _token_headers(test_user.username)

@pytest.fixture(scope="function")
def other_user_token_headers(other_user: Any) -> dict[str, str]:
    return _token_headers(other_user.username)

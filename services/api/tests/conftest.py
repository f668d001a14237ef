import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import Base, get_db
from app.models import User, UserSettings, IngredientMaster
from app.core.session import create_session_token
from app.routers.extract import limiter as extract_limiter
from app.settings import settings

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool  # Important for in-memory to share connection across threads/sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    extract_limiter.reset()
    yield


@pytest.fixture
def client():
    """Test client with DB override. No session cookie."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


def make_user(db_session, social_id="google-1", nickname="Tester", terms=True):
    user = User(
        social_provider="google",
        social_id=social_id,
        nickname=nickname,
        email=f"{social_id}@example.com",
        terms_agreements=terms,
        settings=UserSettings(),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def login(client, user):
    """Attach a session cookie for the given user to the client."""
    token = create_session_token(
        user.user_id,
        is_complete=user.terms_agreements,
        name=user.nickname,
        email=user.email,
    )
    client.cookies.set(settings.session_cookie_name, token)


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, social_id="kakao-2", nickname="Someone else")


@pytest.fixture
def auth_client(client, user):
    """Client signed in as `user`."""
    login(client, user)
    return client


@pytest.fixture
def green_onion(db_session):
    master = IngredientMaster(
        name="대파", category="채소", default_unit="대", base_shelf_life=7,
        icon_url="/icons/green-onion.png",
    )
    db_session.add(master)
    db_session.commit()
    db_session.refresh(master)
    return master

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MESSAGE_ENCRYPTION_KEY", "test-message-secret")
os.environ.setdefault("MESSAGE_KDF_ITERATIONS", "1000")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import bingo.models  # noqa: E402,F401
import bingo.repos.user_repo as user_repo  # noqa: E402
from bingo.core.encryption import reset_message_cipher  # noqa: E402
from bingo.core.exceptions import AuthenticationError  # noqa: E402
from bingo.core.rate_limiter import rate_limiter  # noqa: E402
from bingo.database import Base, get_db  # noqa: E402
from bingo.dependencies import get_current_user, get_notification_dispatcher  # noqa: E402
from bingo.main import app  # noqa: E402
from bingo.models.user import ROLE_COACH, ROLE_SEEKER  # noqa: E402
from bingo.repos import coach_repo  # noqa: E402
from bingo.services.notifications import ConnectionRegistry, NotificationDispatcher  # noqa: E402


class RecordingDispatcher(NotificationDispatcher):
    """Real dispatcher over a private registry that remembers every sweep."""

    def __init__(self):
        super().__init__(ConnectionRegistry(), catchup_seconds=5)
        self.sweeps: list[tuple[str, bool]] = []

    def check_for_new_notifications(self, db, user_id, is_coach):
        self.sweeps.append((user_id, is_coach))
        return super().check_for_new_notifications(db, user_id, is_coach)


class AuthState:
    user = None


@pytest.fixture(autouse=True)
def _fresh_cipher():
    reset_message_cipher()
    yield
    reset_message_cipher()


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(db_session, monkeypatch):
    # bcrypt is slow and irrelevant outside the security tests
    monkeypatch.setattr(user_repo, "hash_password", lambda p: f"hashed:{p}")
    counter = {"n": 0}

    def _make(role=ROLE_SEEKER, first_name="Sam", last_name="Seeker", **kwargs):
        counter["n"] += 1
        email = kwargs.pop("email", f"{role}{counter['n']}@example.com")
        user = user_repo.create(
            db_session,
            email,
            "password123",
            role=role,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )
        if role == ROLE_COACH:
            coach_repo.create(db_session, user, expertise=["Interviewing"])
        return user

    return _make


@pytest.fixture
def seeker(make_user):
    return make_user(ROLE_SEEKER, "Sam", "Seeker")


@pytest.fixture
def coach(make_user):
    return make_user(ROLE_COACH, "Casey", "Coach")


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def client(db_session, auth, dispatcher):
    def _db_override():
        yield db_session

    def _current_user():
        if auth.user is None:
            raise AuthenticationError("Authentication required")
        return auth.user

    rate_limiter.reset()
    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = _current_user
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()

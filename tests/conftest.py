"""Test configuration and fixtures.

This module provides test configuration, database setup, fixtures,
and test data factories for testing the event server.
"""

import os

# Settings are read once at import time, so the environment has to be in
# place before the application package is imported.
os.environ.update(
    {
        "DATABASE_URL": "sqlite:///:memory:",
        "JWT_SECRET": "test_jwt_secret_key_for_testing_only",
        "ENVIRONMENT": "testing",
        "DEBUG": "false",
        "LOG_LEVEL": "WARNING",
        "BCRYPT_ROUNDS": "4",
        "STORAGE_BACKEND": "memory",
        "MAIL_BACKEND": "console",
    }
)

from datetime import date, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from email.mime.multipart import MIMEMultipart  # noqa: E402
from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine, select  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from event_server.config import Settings, get_settings  # noqa: E402
from event_server.database import get_session  # noqa: E402
from event_server.dependencies import get_mailer, get_storage_client  # noqa: E402
from event_server.main import app  # noqa: E402
from event_server.models.event import Event  # noqa: E402
from event_server.models.item import Item  # noqa: E402
from event_server.models.rsvp import Rsvp  # noqa: E402
from event_server.models.user import Admin, User  # noqa: E402
from event_server.services.auth_service import AuthService  # noqa: E402
from event_server.services.storage_service import InMemoryStorageClient  # noqa: E402


# Test database configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "s3cret-pass"


class RecordingMailer:
    """Mailer double that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[MIMEMultipart] = []
        self.error: Exception | None = None

    def send(self, message: MIMEMultipart) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings the application under test was configured with."""
    return get_settings()


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with in-memory SQLite."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False  # Set to True for SQL debugging
    )

    # Create all tables
    SQLModel.metadata.create_all(engine)

    yield engine

    # Clean up
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    """Create test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(scope="function")
def storage() -> InMemoryStorageClient:
    """In-memory poster storage shared by the app and the test."""
    return InMemoryStorageClient()


@pytest.fixture(scope="function")
def mailer() -> RecordingMailer:
    """Mailer that records outgoing messages."""
    return RecordingMailer()


@pytest.fixture(scope="function")
def client(
    test_session: Session,
    storage: InMemoryStorageClient,
    mailer: RecordingMailer,
) -> TestClient:
    """Create test client with test database session and fake external services."""

    def get_test_session():
        return test_session

    # Override the database session and external client dependencies
    app.dependency_overrides[get_session] = get_test_session
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_mailer] = lambda: mailer

    with TestClient(app) as test_client:
        yield test_client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def auth_service(test_settings: Settings) -> AuthService:
    """Authentication service using the application's JWT secret."""
    return AuthService(test_settings)


# Test data factories

class TestDataFactory:
    """Factory class for creating test data."""

    def __init__(self, session: Session, auth_service: AuthService) -> None:
        self.session = session
        self.auth_service = auth_service

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def create_user(
        self,
        username: str = "alice",
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        """Create a user with a real bcrypt hash."""
        return self._save(
            User(
                username=username,
                email=email or f"{username}@example.com",
                password_hash=self.auth_service.hash_password(password),
            )
        )

    def create_admin(
        self,
        username: str = "root",
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> Admin:
        """Create an admin with a real bcrypt hash."""
        return self._save(
            Admin(
                username=username,
                email=email or f"{username}@example.com",
                password_hash=self.auth_service.hash_password(password),
            )
        )

    def create_event(
        self,
        title: str = "Spring Meetup",
        days_ahead: int = 30,
        price: Decimal = Decimal("0.00"),
        **overrides,
    ) -> Event:
        """Create an event; ``days_ahead`` may be negative for past events."""
        fields = {
            "title": title,
            "description": f"All about {title}",
            "event_date": date.today() + timedelta(days=days_ahead),
            "location": "Main Hall",
            "poster_url": "https://storage.example.test/posters/poster.png",
            "price": price,
        }
        fields.update(overrides)
        return self._save(Event(**fields))

    def create_item(self, data=None) -> Item:
        """Create an item holding ``data``."""
        return self._save(Item(data=data if data is not None else {"name": "chair"}))


@pytest.fixture(scope="function")
def test_data_factory(test_session: Session, auth_service: AuthService) -> TestDataFactory:
    """Create test data factory."""
    return TestDataFactory(test_session, auth_service)


@pytest.fixture(scope="function")
def test_user(test_data_factory: TestDataFactory) -> User:
    """Create test user in database."""
    return test_data_factory.create_user()


@pytest.fixture(scope="function")
def test_admin(test_data_factory: TestDataFactory) -> Admin:
    """Create test admin in database."""
    return test_data_factory.create_admin()


@pytest.fixture(scope="function")
def test_event(test_data_factory: TestDataFactory) -> Event:
    """Create an upcoming free event."""
    return test_data_factory.create_event()


@pytest.fixture(scope="function")
def paid_event(test_data_factory: TestDataFactory) -> Event:
    """Create an upcoming event with a ticket price."""
    return test_data_factory.create_event(title="Gala Dinner", price=Decimal("15.00"))


@pytest.fixture(scope="function")
def past_event(test_data_factory: TestDataFactory) -> Event:
    """Create an event that took place yesterday."""
    return test_data_factory.create_event(title="Last Week's Talk", days_ahead=-1)


@pytest.fixture(scope="function")
def user_token(test_user: User, auth_service: AuthService) -> str:
    """Access token issued to the test user."""
    return auth_service.create_access_token(test_user.id, test_user.username, "user")


@pytest.fixture(scope="function")
def admin_token(test_admin: Admin, auth_service: AuthService) -> str:
    """Access token issued to the test admin."""
    return auth_service.create_access_token(test_admin.id, test_admin.username, "admin")


@pytest.fixture(scope="function")
def user_headers(user_token: str) -> dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture(scope="function")
def admin_headers(admin_token: str) -> dict[str, str]:
    """Authorization headers for the test admin."""
    return {"Authorization": f"Bearer {admin_token}"}


# Database state helpers

class DatabaseStateChecker:
    """Helper class for checking database state in tests."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def count_users(self) -> int:
        """Count total users in database."""
        return len(self.session.exec(select(User)).all())

    def count_admins(self) -> int:
        """Count total admins in database."""
        return len(self.session.exec(select(Admin)).all())

    def count_rsvps(self, event_id: int | None = None) -> int:
        """Count RSVPs, optionally for one event."""
        statement = select(Rsvp)
        if event_id is not None:
            statement = statement.where(Rsvp.event_id == event_id)
        return len(self.session.exec(statement).all())

    def get_event(self, event_id: int) -> Event | None:
        """Reload an event from the database."""
        self.session.expire_all()
        return self.session.get(Event, event_id)

    def item_exists(self, item_id: int) -> bool:
        """Check if item exists in database."""
        self.session.expire_all()
        return self.session.get(Item, item_id) is not None


@pytest.fixture(scope="function")
def db_state_checker(test_session: Session) -> DatabaseStateChecker:
    """Create database state checker."""
    return DatabaseStateChecker(test_session)

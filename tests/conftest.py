"""Test configuration and fixtures.

This module provides test configuration, database setup, fixtures,
and test data factories for testing the ReWear API.
"""

import os

# Settings are read at import time, so the test environment must be in place
# before anything from rewear_api is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["IDENTITY_JWT_SECRET"] = "test_identity_secret_for_testing_only"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import func  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine, select  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from rewear_api.config import Settings, get_settings  # noqa: E402
from rewear_api.database import get_session  # noqa: E402
from rewear_api.main import app  # noqa: E402
from rewear_api.models.item import Item, ItemStatus  # noqa: E402
from rewear_api.models.point_transaction import PointTransaction  # noqa: E402
from rewear_api.models.user import User  # noqa: E402
from rewear_api.services.auth_service import AuthService  # noqa: E402

# Test database configuration
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings built from the test environment above."""
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

    SQLModel.metadata.create_all(engine)

    yield engine

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    """Create test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(scope="function")
def client(test_session: Session) -> Generator[TestClient, None, None]:
    """Create test client with test database session."""

    def get_test_session():
        return test_session

    app.dependency_overrides[get_session] = get_test_session

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def auth_service(test_settings: Settings) -> AuthService:
    return AuthService(test_settings)


class TestDataFactory:
    """Factory for persisting users and items."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._counter = 0

    def create_user(
        self,
        user_id: str | None = None,
        points: int = 100,
        is_admin: bool = False,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> User:
        """Create a user with customizable fields."""
        self._counter += 1
        user_id = user_id or f"user-{self._counter}"
        user = User(
            id=user_id,
            email=f"{user_id}@example.com",
            first_name=first_name,
            last_name=last_name,
            points=points,
            is_admin=is_admin,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def create_item(
        self,
        owner: User,
        title: str = "Vintage Denim Jacket",
        point_value: int = 50,
        status: ItemStatus = ItemStatus.APPROVED,
        is_available: bool = True,
        category: str = "Outerwear",
        description: str | None = "Classic cut, barely worn",
        brand: str | None = "Levi's",
    ) -> Item:
        """Create an item with customizable fields."""
        item = Item(
            user_id=owner.id,
            title=title,
            description=description,
            category=category,
            size="M",
            condition="Like New",
            brand=brand,
            point_value=point_value,
            tags=["denim"],
            images=["https://images.example.com/jacket.jpg"],
            status=status.value,
            is_available=is_available,
        )
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item


@pytest.fixture(scope="function")
def factory(test_session: Session) -> TestDataFactory:
    """Provide test data factory."""
    return TestDataFactory(test_session)


@pytest.fixture(scope="function")
def owner(factory: TestDataFactory) -> User:
    return factory.create_user("owner-1", first_name="Olivia", last_name="Owner")


@pytest.fixture(scope="function")
def requester(factory: TestDataFactory) -> User:
    return factory.create_user("requester-1", first_name="Riley", last_name="Requester")


@pytest.fixture(scope="function")
def admin_user(factory: TestDataFactory) -> User:
    return factory.create_user("admin-1", is_admin=True, first_name="Ada", last_name="Admin")


@pytest.fixture(scope="function")
def approved_item(factory: TestDataFactory, owner: User) -> Item:
    return factory.create_item(owner, point_value=50)


@pytest.fixture(scope="function")
def headers_for(auth_service: AuthService) -> Callable[[User], dict[str, str]]:
    """Build Authorization headers carrying an identity token for a user."""

    def _headers(user: User) -> dict[str, str]:
        token = auth_service.create_identity_token(
            user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture(scope="function")
def db_state_checker(test_session: Session):
    """Utility for checking database state in tests."""

    class DatabaseStateChecker:
        def __init__(self, session: Session):
            self.session = session

        def points(self, user_id: str) -> int:
            self.session.expire_all()
            return self.session.exec(select(User.points).where(User.id == user_id)).one()

        def item(self, item_id: int) -> Item:
            self.session.expire_all()
            return self.session.exec(select(Item).where(Item.id == item_id)).one()

        def ledger(self, user_id: str) -> list[PointTransaction]:
            statement = (
                select(PointTransaction)
                .where(PointTransaction.user_id == user_id)
                .order_by(PointTransaction.id)
            )
            return list(self.session.exec(statement).all())

        def ledger_sum(self, user_id: str) -> int:
            statement = select(func.coalesce(func.sum(PointTransaction.amount), 0)).where(
                PointTransaction.user_id == user_id
            )
            return int(self.session.exec(statement).one())

        def count_transactions(self) -> int:
            return self.session.exec(select(func.count(PointTransaction.id))).one()

    return DatabaseStateChecker(test_session)

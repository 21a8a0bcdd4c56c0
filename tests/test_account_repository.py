"""Unit tests for the account repositories.

This module contains unit tests for UserRepository and AdminRepository,
including uniqueness handling and database error translation.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from event_server.models.user import Admin, User
from event_server.repositories.user_repository import (
    AccountAlreadyExistsError,
    AccountRepositoryError,
    AdminRepository,
    UserRepository,
)


class TestUserRepository:
    """Test cases for UserRepository."""

    @pytest.fixture
    def user_repository(self, test_session: Session) -> UserRepository:
        """Create UserRepository instance for testing."""
        return UserRepository(test_session)

    @pytest.mark.asyncio
    async def test_create_success(self, user_repository: UserRepository):
        """Test successful user creation."""
        user = await user_repository.create("alice", "alice@example.com", "hash")

        assert isinstance(user, User)
        assert user.id is not None
        assert user.username == "alice"
        assert user.email == "alice@example.com"
        assert user.password_hash == "hash"
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_create_duplicate_username(self, user_repository: UserRepository, test_user: User):
        """Test user creation with a taken username."""
        with pytest.raises(AccountAlreadyExistsError):
            await user_repository.create(test_user.username, "other@example.com", "hash")

    @pytest.mark.asyncio
    async def test_create_duplicate_email(self, user_repository: UserRepository, test_user: User):
        """Test user creation with a taken email."""
        with pytest.raises(AccountAlreadyExistsError):
            await user_repository.create("someone-else", test_user.email, "hash")

    @pytest.mark.asyncio
    async def test_create_duplicate_caught_by_constraint(
        self, user_repository: UserRepository, test_user: User, db_state_checker
    ):
        """Test the unique constraint catches a duplicate the pre-check missed."""
        with patch.object(
            user_repository, "exists_by_username_or_email", AsyncMock(return_value=False)
        ):
            with pytest.raises(AccountAlreadyExistsError) as exc_info:
                await user_repository.create(test_user.username, test_user.email, "hash")

        assert exc_info.value.original_error is not None
        assert db_state_checker.count_users() == 1

    @pytest.mark.asyncio
    async def test_get_by_id_success(self, user_repository: UserRepository, test_user: User):
        """Test successful user retrieval by ID."""
        result = await user_repository.get_by_id(test_user.id)

        assert result is not None
        assert result.username == test_user.username

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, user_repository: UserRepository):
        """Test user retrieval by ID when user not found."""
        assert await user_repository.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_get_by_username(self, user_repository: UserRepository, test_user: User):
        result = await user_repository.get_by_username(test_user.username)

        assert result is not None
        assert result.id == test_user.id

    @pytest.mark.asyncio
    async def test_get_by_username_is_exact(self, user_repository: UserRepository, test_user: User):
        assert await user_repository.get_by_username(test_user.username.upper()) is None

    @pytest.mark.asyncio
    async def test_get_by_id_database_error(self, user_repository: UserRepository):
        """Test user retrieval by ID with database error."""
        with patch.object(user_repository.session, "exec") as mock_exec:
            mock_exec.side_effect = SQLAlchemyError("Database error")

            with pytest.raises(AccountRepositoryError) as exc_info:
                await user_repository.get_by_id(1)

            assert "Failed to get users row by ID" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_create_database_error(self, user_repository: UserRepository):
        """Test user creation with database error."""
        with patch.object(user_repository.session, "commit") as mock_commit:
            mock_commit.side_effect = SQLAlchemyError("Database error")

            with pytest.raises(AccountRepositoryError) as exc_info:
                await user_repository.create("alice", "alice@example.com", "hash")

        assert not isinstance(exc_info.value, AccountAlreadyExistsError)


class TestAdminRepository:
    """Test cases for AdminRepository."""

    @pytest.fixture
    def admin_repository(self, test_session: Session) -> AdminRepository:
        """Create AdminRepository instance for testing."""
        return AdminRepository(test_session)

    def test_table_name(self, admin_repository: AdminRepository):
        assert admin_repository.table_name == "admins"

    @pytest.mark.asyncio
    async def test_create_success(self, admin_repository: AdminRepository):
        admin = await admin_repository.create("root", "root@example.com", "hash")

        assert isinstance(admin, Admin)
        assert admin.id is not None

    @pytest.mark.asyncio
    async def test_tables_are_independent(
        self, admin_repository: AdminRepository, test_user: User
    ):
        """Test an admin may reuse a user's username and email."""
        admin = await admin_repository.create(test_user.username, test_user.email, "hash")

        assert admin.username == test_user.username

    @pytest.mark.asyncio
    async def test_user_lookup_does_not_see_admins(
        self, test_session: Session, test_admin: Admin
    ):
        user_repository = UserRepository(test_session)

        assert await user_repository.get_by_username(test_admin.username) is None

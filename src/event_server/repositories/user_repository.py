"""Account repositories for database operations.

This module provides data access for user and admin accounts. Both account
types share one implementation parameterized by the table model, so the
registration and login rules stay identical for the two tables.
"""

from typing import Generic, Optional, TypeVar

from sqlmodel import Session, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models.user import Admin, User

AccountModel = TypeVar("AccountModel", User, Admin)


class AccountRepositoryError(Exception):
    """Base exception for account repository errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class AccountAlreadyExistsError(AccountRepositoryError):
    """Exception raised when the username or email is already taken."""
    pass


class AccountRepository(Generic[AccountModel]):
    """Repository for account database operations.

    Subclasses only pick the table model; every query is shared.
    """

    model: type[AccountModel]

    def __init__(self, session: Session) -> None:
        """Initialize account repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    async def get_by_id(self, account_id: int) -> Optional[AccountModel]:
        """Get account by ID.

        Args:
            account_id: Account ID to search for

        Returns:
            Account if found, None otherwise

        Raises:
            AccountRepositoryError: If database operation fails
        """
        try:
            statement = select(self.model).where(self.model.id == account_id)
            result = self.session.exec(statement)
            return result.first()
        except SQLAlchemyError as e:
            raise AccountRepositoryError(
                f"Failed to get {self.table_name} row by ID {account_id}: {str(e)}",
                original_error=e
            ) from e

    async def get_by_username(self, username: str) -> Optional[AccountModel]:
        """Get account by username.

        Args:
            username: Login name to search for

        Returns:
            Account if found, None otherwise

        Raises:
            AccountRepositoryError: If database operation fails
        """
        try:
            statement = select(self.model).where(self.model.username == username)
            result = self.session.exec(statement)
            return result.first()
        except SQLAlchemyError as e:
            raise AccountRepositoryError(
                f"Failed to get {self.table_name} row by username: {str(e)}",
                original_error=e
            ) from e

    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        """Check whether the username or the email is already registered.

        Raises:
            AccountRepositoryError: If database operation fails
        """
        try:
            statement = select(self.model.id).where(
                or_(self.model.username == username, self.model.email == email)
            )
            result = self.session.exec(statement)
            return result.first() is not None
        except SQLAlchemyError as e:
            raise AccountRepositoryError(
                f"Failed to check {self.table_name} existence: {str(e)}",
                original_error=e
            ) from e

    async def create(self, username: str, email: str, password_hash: str) -> AccountModel:
        """Create a new account.

        The pre-check gives a clean error for the common case; the unique
        constraints on username and email catch concurrent registrations.

        Args:
            username: Login name
            email: Contact email address
            password_hash: bcrypt hash of the password

        Returns:
            Created account

        Raises:
            AccountAlreadyExistsError: If the username or email is taken
            AccountRepositoryError: If database operation fails
        """
        try:
            if await self.exists_by_username_or_email(username, email):
                raise AccountAlreadyExistsError(
                    f"{self.table_name} row with this username or email already exists"
                )

            account = self.model(
                username=username, email=email, password_hash=password_hash
            )
            self.session.add(account)
            self.session.commit()
            self.session.refresh(account)
            return account

        except AccountAlreadyExistsError:
            raise
        except IntegrityError as e:
            self.session.rollback()
            raise AccountAlreadyExistsError(
                f"{self.table_name} row with this username or email already exists",
                original_error=e
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise AccountRepositoryError(
                f"Failed to create {self.table_name} row: {str(e)}",
                original_error=e
            ) from e


class UserRepository(AccountRepository[User]):
    """Repository for the ``users`` table."""

    model = User


class AdminRepository(AccountRepository[Admin]):
    """Repository for the ``admins`` table."""

    model = Admin

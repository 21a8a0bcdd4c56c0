"""Account service for registration, login and profile operations.

This module provides business logic for user and admin accounts. Both account
types follow the same rules; only the table and the token role differ.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from ..logging_config import get_logger, log_database_operation
from ..repositories.rsvp_repository import RsvpRepository
from ..repositories.user_repository import (
    AccountAlreadyExistsError,
    AccountRepository,
    AccountRepositoryError,
    AdminRepository,
    UserRepository,
)
from ..schemas.auth_schemas import (
    AccountSummary,
    AdminLoginResponse,
    LoginRequest,
    RegisterRequest,
    RsvpResponse,
    UserLoginResponse,
    UserProfile,
)
from .auth_service import AuthService, Role

logger = get_logger("account_service")


class AccountServiceError(Exception):
    """Base exception for account service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        original_error: Exception | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class DuplicateAccountError(AccountServiceError):
    """Raised when the username or email is already registered."""

    def __init__(self, original_error: Exception | None = None) -> None:
        super().__init__(
            "Username or email already exists.",
            status_code=400,
            original_error=original_error,
        )


class InvalidCredentialsError(AccountServiceError):
    """Raised for an unknown username or a wrong password.

    Both cases share one message so the response does not reveal which
    usernames exist.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials", status_code=400)


class AccountNotFoundError(AccountServiceError):
    """Raised when an authenticated account no longer exists."""

    def __init__(self, account_id: int) -> None:
        super().__init__(f"Account with id {account_id} not found", status_code=404)


class AccountService:
    """Service for account business logic operations.

    This service hashes passwords on registration, checks credentials on
    login and issues access tokens for the matching role.
    """

    def __init__(self, session: Session, auth_service: AuthService) -> None:
        """Initialize account service.

        Args:
            session: SQLModel database session
            auth_service: Password hashing and token service
        """
        self.session = session
        self.auth_service = auth_service
        self.user_repository = UserRepository(session)
        self.admin_repository = AdminRepository(session)
        self.rsvp_repository = RsvpRepository(session)

    async def register_user(self, data: RegisterRequest) -> int:
        """Register a user and return the new user ID.

        Raises:
            DuplicateAccountError: If the username or email is taken
            AccountServiceError: If registration fails
        """
        return await self._register(self.user_repository, data, "user")

    async def register_admin(self, data: RegisterRequest) -> int:
        """Register an admin and return the new admin ID.

        Raises:
            DuplicateAccountError: If the username or email is taken
            AccountServiceError: If registration fails
        """
        return await self._register(self.admin_repository, data, "admin")

    async def login_user(self, data: LoginRequest) -> UserLoginResponse:
        """Authenticate a user and issue an access token.

        Raises:
            InvalidCredentialsError: If the username or password is wrong
        """
        account, token = await self._authenticate(self.user_repository, data, "user")
        return UserLoginResponse(
            user=AccountSummary.model_validate(account),
            access_token=token,
            expires_in=self.auth_service.expires_in,
        )

    async def login_admin(self, data: LoginRequest) -> AdminLoginResponse:
        """Authenticate an admin and issue an access token.

        Raises:
            InvalidCredentialsError: If the username or password is wrong
        """
        account, token = await self._authenticate(self.admin_repository, data, "admin")
        return AdminLoginResponse(
            admin=AccountSummary.model_validate(account),
            access_token=token,
            expires_in=self.auth_service.expires_in,
        )

    async def get_user_profile(self, user_id: int) -> UserProfile:
        """Get the profile of a user.

        Raises:
            AccountNotFoundError: If the user does not exist
            AccountServiceError: If the lookup fails
        """
        try:
            user = await self.user_repository.get_by_id(user_id)
        except AccountRepositoryError as e:
            logger.error(f"Failed to load user {user_id}: {e.message}", exc_info=True)
            raise AccountServiceError(
                "Failed to load user profile", status_code=500, original_error=e
            ) from e

        if not user:
            raise AccountNotFoundError(user_id)
        return UserProfile.model_validate(user)

    async def list_user_rsvps(self, user_id: int) -> list[RsvpResponse]:
        """List a user's RSVPs with event title and date, newest first.

        Raises:
            AccountServiceError: If the lookup fails
        """
        try:
            rows = self.rsvp_repository.list_for_user(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list RSVPs for user {user_id}", exc_info=True)
            raise AccountServiceError(
                "Failed to load RSVPs", status_code=500, original_error=e
            ) from e

        return [
            RsvpResponse(
                id=rsvp.id,
                event_id=event.id,
                title=event.title,
                event_date=event.event_date,
                created_at=rsvp.created_at,
            )
            for rsvp, event in rows
        ]

    async def _register(
        self, repository: AccountRepository, data: RegisterRequest, role: Role
    ) -> int:
        logger.info(f"Registering {role}", extra={"username": data.username, "role": role})

        password_hash = await run_in_threadpool(self.auth_service.hash_password, data.password)
        try:
            account = await repository.create(
                username=data.username,
                email=str(data.email),
                password_hash=password_hash,
            )
        except AccountAlreadyExistsError as e:
            logger.info(
                f"Rejected duplicate {role} registration",
                extra={"username": data.username, "role": role},
            )
            raise DuplicateAccountError(original_error=e) from e
        except AccountRepositoryError as e:
            log_database_operation(
                operation="INSERT",
                table=repository.table_name,
                success=False,
                error=type(e.original_error or e).__name__,
            )
            raise AccountServiceError(
                f"Failed to create {role}", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="INSERT",
            table=repository.table_name,
            success=True,
            account_id=account.id,
        )
        return account.id

    async def _authenticate(
        self, repository: AccountRepository, data: LoginRequest, role: Role
    ):
        try:
            account = await repository.get_by_username(data.username)
        except AccountRepositoryError as e:
            logger.error(f"Failed to look up {role} during login", exc_info=True)
            raise AccountServiceError(
                "Login failed", status_code=500, original_error=e
            ) from e

        if not account:
            self.auth_service.log_authentication_attempt(
                username=data.username, role=role, success=False, reason="unknown username"
            )
            raise InvalidCredentialsError()

        if not await run_in_threadpool(
            self.auth_service.verify_password, data.password, account.password_hash
        ):
            self.auth_service.log_authentication_attempt(
                username=data.username, role=role, success=False, reason="wrong password"
            )
            raise InvalidCredentialsError()

        token = self.auth_service.create_access_token(account.id, account.username, role)
        self.auth_service.log_authentication_attempt(
            username=account.username, role=role, success=True, account_id=account.id
        )
        return account, token

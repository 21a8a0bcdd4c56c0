"""Authentication service for password hashing and JWT token management.

This module provides authentication services including bcrypt password hashing,
JWT token creation and validation for the two account roles (user and admin),
with comprehensive error handling, type hints, and security logging.
"""

from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import jwt
from passlib.context import CryptContext
from pydantic import BaseModel, Field

from ..config import Settings
from ..logging_config import SecurityLoggingMixin, get_logger

logger = get_logger("auth_service")

Role = Literal["user", "admin"]


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str = Field(description="Subject (account ID)")
    role: Role = Field(description="Account role the token was issued for")
    username: str = Field(description="Login name at issue time")
    exp: int = Field(description="Expiration timestamp")
    iat: int = Field(description="Issued at timestamp")

    @property
    def account_id(self) -> int:
        return int(self.sub)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""

    def __init__(self, message: str, status_code: int = 401) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TokenError(AuthenticationError):
    """Exception for JWT token errors."""

    pass


class AuthService(SecurityLoggingMixin):
    """Authentication service for passwords and JWT management.

    This service hashes and verifies passwords with bcrypt and creates and
    validates the signed access tokens handed out at login.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize authentication service with configuration.

        Args:
            settings: Application settings containing JWT and bcrypt configuration
        """
        super().__init__()  # Initialize SecurityLoggingMixin
        self.jwt_secret = settings.jwt_secret
        self.jwt_algorithm = settings.jwt_algorithm
        self.jwt_expire_minutes = settings.jwt_expire_minutes
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.jwt_expire_minutes * 60

    def hash_password(self, password: str) -> str:
        """Hash a plain-text password with bcrypt."""
        return self.pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Check a plain-text password against a stored bcrypt hash.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return self.pwd_context.verify(password, password_hash)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False

    def create_access_token(self, account_id: int, username: str, role: Role) -> str:
        """Create JWT token for an authenticated account.

        Args:
            account_id: Internal user or admin ID
            username: Login name
            role: ``user`` or ``admin``

        Returns:
            str: Encoded JWT token

        Raises:
            TokenError: If token creation fails
        """
        try:
            logger.debug(
                f"Creating JWT token for {role} {account_id}",
                extra={"account_id": account_id, "role": role},
            )

            now = datetime.now(timezone.utc)
            expire = now + timedelta(minutes=self.jwt_expire_minutes)

            payload = TokenPayload(
                sub=str(account_id),
                role=role,
                username=username,
                exp=int(expire.timestamp()),
                iat=int(now.timestamp()),
            )

            token = jwt.encode(
                payload.model_dump(), self.jwt_secret, algorithm=self.jwt_algorithm
            )

            logger.info(
                f"JWT token created successfully for {role} {account_id}",
                extra={
                    "account_id": account_id,
                    "role": role,
                    "expires_at": expire.isoformat(),
                },
            )

            return token

        except Exception as e:
            logger.error(
                f"Failed to create JWT token for {role} {account_id}: {str(e)}",
                exc_info=True,
                extra={"account_id": account_id, "role": role},
            )
            raise TokenError("Failed to create access token", status_code=500) from e

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode JWT token.

        Args:
            token: JWT token to verify

        Returns:
            TokenPayload: Decoded token payload

        Raises:
            TokenError: If token verification fails
        """
        try:
            payload = jwt.decode(
                token, self.jwt_secret, algorithms=[self.jwt_algorithm]
            )
            token_payload = TokenPayload(**payload)
            if not token_payload.sub.isdigit():
                raise TokenError("Invalid account ID in token", status_code=401)
            return token_payload

        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired", status_code=401)
        except jwt.JWTError as e:
            raise TokenError(f"Invalid token: {str(e)}", status_code=401)
        except ValueError as e:
            raise TokenError("Invalid token payload", status_code=401) from e

    def extract_token_from_header(self, authorization: str | None) -> str:
        """Extract JWT token from Authorization header.

        Args:
            authorization: Authorization header value

        Returns:
            str: Extracted JWT token

        Raises:
            TokenError: If token extraction fails
        """
        if not authorization:
            raise TokenError("Authorization header is missing", status_code=401)

        try:
            scheme, token = authorization.split()
        except ValueError:
            raise TokenError("Invalid authorization header format", status_code=401)

        if scheme.lower() != "bearer":
            raise TokenError(
                "Invalid authorization scheme. Expected 'Bearer'", status_code=401
            )
        return token

    def authenticate_header(self, authorization: str | None) -> TokenPayload:
        """Extract and verify the bearer token of a request."""
        token = self.extract_token_from_header(authorization)
        return self.verify_token(token)

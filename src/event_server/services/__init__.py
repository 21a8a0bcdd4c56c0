"""Business logic layer.

This module provides business logic services for the event server,
including authentication, accounts, items, events, payments, and the
storage, mail and ticket helpers they rely on.
"""

from .account_service import (
    AccountService,
    AccountServiceError,
    DuplicateAccountError,
    InvalidCredentialsError,
)
from .auth_service import AuthenticationError, AuthService, TokenError, TokenPayload
from .event_service import EventService, EventServiceError
from .item_service import ItemService, ItemServiceError
from .mail_service import ConsoleMailer, Mailer, MailDeliveryError, SmtpMailer
from .payment_service import PaymentService, PaymentServiceError
from .storage_service import (
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
    StorageError,
)

__all__ = [
    "AuthService",
    "AuthenticationError",
    "TokenError",
    "TokenPayload",
    "AccountService",
    "AccountServiceError",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "ItemService",
    "ItemServiceError",
    "EventService",
    "EventServiceError",
    "PaymentService",
    "PaymentServiceError",
    "StorageClient",
    "S3StorageClient",
    "InMemoryStorageClient",
    "StorageError",
    "Mailer",
    "SmtpMailer",
    "ConsoleMailer",
    "MailDeliveryError",
]

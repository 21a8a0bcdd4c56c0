"""Data access layer.

This module provides data access repositories for database operations
with proper error handling and type safety.
"""

from .event_repository import EventNotFoundError, EventRepository
from .item_repository import ItemNotFoundError, ItemRepository
from .rsvp_repository import RsvpAlreadyExistsError, RsvpRepository
from .user_repository import (
    AccountAlreadyExistsError,
    AccountRepository,
    AccountRepositoryError,
    AdminRepository,
    UserRepository,
)

__all__ = [
    "AccountRepository",
    "AccountRepositoryError",
    "AccountAlreadyExistsError",
    "UserRepository",
    "AdminRepository",
    "EventRepository",
    "EventNotFoundError",
    "RsvpRepository",
    "RsvpAlreadyExistsError",
    "ItemRepository",
    "ItemNotFoundError",
]

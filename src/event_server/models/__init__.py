"""SQLModel data models.

This module exports all database models for the event server.
Import models from here to ensure every table is registered with the metadata.
"""

from .event import Event, EventBase, EventCreate
from .item import Item
from .rsvp import Rsvp
from .user import AccountBase, Admin, User

__all__ = [
    # Account models
    "AccountBase",
    "User",
    "Admin",
    # Event models
    "EventBase",
    "Event",
    "EventCreate",
    "Rsvp",
    # Item models
    "Item",
]

"""Item repository for database operations.

This module provides the ItemRepository class that handles all database operations
for the generic JSON items resource, including CRUD operations and transaction
management.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, asc, select

from ..models.item import Item


class ItemNotFoundError(Exception):
    """Raised when an item is not found."""

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__(f"Item with id {item_id} not found")


class ItemRepository:
    """Repository for item database operations.

    Items are opaque JSON documents; the repository stores and returns the
    payload without looking inside it.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, data: Any) -> Item:
        """Store a new item.

        Args:
            data: Any JSON value supplied by the client

        Returns:
            Item: The created item with its assigned id

        Raises:
            SQLAlchemyError: If database operation fails

        Example:
            item = repository.create({"name": "chair", "legs": 4})
        """
        try:
            db_item = Item(data=data)

            self.session.add(db_item)
            self.session.commit()
            self.session.refresh(db_item)

            return db_item

        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while creating item: {str(e)}"
            ) from e

    def get_by_id(self, item_id: int) -> Item | None:
        """Get an item by ID.

        Args:
            item_id: ID of the item to retrieve

        Returns:
            Item: The item if found, None otherwise
        """
        try:
            statement = select(Item).where(Item.id == item_id)
            result = self.session.exec(statement)
            return result.first()

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while retrieving item {item_id}: {str(e)}"
            ) from e

    def get_by_id_or_raise(self, item_id: int) -> Item:
        """Get an item by ID or raise an exception.

        Raises:
            ItemNotFoundError: If item is not found
        """
        item = self.get_by_id(item_id)
        if not item:
            raise ItemNotFoundError(item_id)
        return item

    def get_all(self) -> list[Item]:
        """Get every item in ascending id order.

        Returns:
            List[Item]: All stored items
        """
        try:
            statement = select(Item).order_by(asc(Item.id))
            result = self.session.exec(statement)
            return list(result.all())

        except SQLAlchemyError as e:
            raise SQLAlchemyError(
                f"Database error while retrieving items: {str(e)}"
            ) from e

    def replace(self, item_id: int, data: Any) -> Item:
        """Replace the payload of an existing item.

        The whole document is swapped; there is no partial merge.

        Args:
            item_id: ID of the item to replace
            data: New JSON value

        Returns:
            Item: The updated item

        Raises:
            ItemNotFoundError: If item is not found
            SQLAlchemyError: If database operation fails
        """
        try:
            db_item = self.get_by_id_or_raise(item_id)

            db_item.data = data
            db_item.updated_at = datetime.utcnow()

            self.session.add(db_item)
            self.session.commit()
            self.session.refresh(db_item)

            return db_item

        except ItemNotFoundError:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while replacing item {item_id}: {str(e)}"
            ) from e

    def delete(self, item_id: int) -> bool:
        """Delete an item.

        Args:
            item_id: ID of the item to delete

        Returns:
            bool: True if item was deleted

        Raises:
            ItemNotFoundError: If item is not found
            SQLAlchemyError: If database operation fails
        """
        try:
            db_item = self.get_by_id_or_raise(item_id)

            self.session.delete(db_item)
            self.session.commit()

            return True

        except ItemNotFoundError:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            raise SQLAlchemyError(
                f"Database error while deleting item {item_id}: {str(e)}"
            ) from e

"""Item service for business logic operations.

This module provides business logic for the generic items resource: storing,
listing, replacing and deleting opaque JSON documents, with error translation
and operation logging.
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..logging_config import get_logger, log_database_operation
from ..models.item import Item
from ..repositories.item_repository import ItemNotFoundError, ItemRepository
from ..schemas.item_schemas import ItemResponse

logger = get_logger("item_service")


class ItemServiceError(Exception):
    """Base exception for item service errors."""

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


class ItemNotFoundServiceError(ItemServiceError):
    """Exception raised when item is not found."""

    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item with id {item_id} not found", status_code=404)


class ItemService:
    """Service for item business logic operations."""

    def __init__(self, session: Session) -> None:
        """Initialize item service with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session
        self.item_repository = ItemRepository(session)

    async def create_item(self, data: Any) -> ItemResponse:
        """Store a new item.

        Args:
            data: Any JSON value

        Returns:
            Created item response

        Raises:
            ItemServiceError: If item creation fails
        """
        try:
            item = self.item_repository.create(data)
        except SQLAlchemyError as e:
            log_database_operation(
                operation="INSERT", table="items", success=False, error=type(e).__name__
            )
            logger.error("Database error creating item", exc_info=True)
            raise ItemServiceError(
                "Failed to create item", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="INSERT", table="items", success=True, item_id=item.id
        )
        return self._convert_to_response(item)

    async def list_items(self) -> list[ItemResponse]:
        """Get every item in id order.

        Raises:
            ItemServiceError: If operation fails
        """
        try:
            items = self.item_repository.get_all()
        except SQLAlchemyError as e:
            logger.error("Database error listing items", exc_info=True)
            raise ItemServiceError(
                "Failed to get items", status_code=500, original_error=e
            ) from e

        return [self._convert_to_response(item) for item in items]

    async def get_item(self, item_id: int) -> ItemResponse:
        """Get item by ID.

        Raises:
            ItemNotFoundServiceError: If item is not found
            ItemServiceError: If operation fails
        """
        try:
            item = self.item_repository.get_by_id_or_raise(item_id)
            return self._convert_to_response(item)

        except ItemNotFoundError as e:
            raise ItemNotFoundServiceError(item_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error reading item {item_id}", exc_info=True)
            raise ItemServiceError(
                "Failed to get item", status_code=500, original_error=e
            ) from e

    async def replace_item(self, item_id: int, data: Any) -> ItemResponse:
        """Replace the document stored under an item ID.

        Args:
            item_id: ID of the item to replace
            data: New JSON value

        Returns:
            Updated item response

        Raises:
            ItemNotFoundServiceError: If item is not found
            ItemServiceError: If update fails
        """
        try:
            item = self.item_repository.replace(item_id, data)

        except ItemNotFoundError as e:
            raise ItemNotFoundServiceError(item_id) from e
        except SQLAlchemyError as e:
            log_database_operation(
                operation="UPDATE",
                table="items",
                success=False,
                error=type(e).__name__,
                item_id=item_id,
            )
            logger.error(f"Database error replacing item {item_id}", exc_info=True)
            raise ItemServiceError(
                "Failed to update item", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="UPDATE", table="items", success=True, item_id=item_id
        )
        return self._convert_to_response(item)

    async def delete_item(self, item_id: int) -> bool:
        """Delete an item.

        Raises:
            ItemNotFoundServiceError: If item is not found
            ItemServiceError: If deletion fails
        """
        try:
            deleted = self.item_repository.delete(item_id)

        except ItemNotFoundError as e:
            raise ItemNotFoundServiceError(item_id) from e
        except SQLAlchemyError as e:
            log_database_operation(
                operation="DELETE",
                table="items",
                success=False,
                error=type(e).__name__,
                item_id=item_id,
            )
            logger.error(f"Database error deleting item {item_id}", exc_info=True)
            raise ItemServiceError(
                "Failed to delete item", status_code=500, original_error=e
            ) from e

        log_database_operation(
            operation="DELETE", table="items", success=True, item_id=item_id
        )
        return deleted

    def _convert_to_response(self, item: Item) -> ItemResponse:
        """Convert Item model to ItemResponse schema."""
        return ItemResponse(
            id=item.id,
            data=item.data,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

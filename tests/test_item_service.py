"""Unit tests for ItemService.

This module contains unit tests for the ItemService class,
including error translation from the repository layer.
"""

from datetime import datetime
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from event_server.models.item import Item
from event_server.repositories.item_repository import ItemNotFoundError, ItemRepository
from event_server.schemas.item_schemas import ItemResponse
from event_server.services.item_service import (
    ItemNotFoundServiceError,
    ItemService,
    ItemServiceError,
)


class TestItemService:
    """Test cases for ItemService."""

    @pytest.fixture
    def mock_session(self) -> Mock:
        """Create mock database session."""
        return Mock(spec=Session)

    @pytest.fixture
    def mock_item_repository(self) -> Mock:
        """Create mock item repository."""
        return Mock(spec=ItemRepository)

    @pytest.fixture
    def item_service(self, mock_session: Mock, mock_item_repository: Mock) -> ItemService:
        """Create ItemService instance with a mocked repository."""
        service = ItemService(mock_session)
        service.item_repository = mock_item_repository
        return service

    @pytest.fixture
    def sample_item(self) -> Item:
        """Create sample item for testing."""
        return Item(
            id=1,
            data={"name": "chair"},
            created_at=datetime(2024, 1, 1, 12, 0, 0),
        )

    @pytest.mark.asyncio
    async def test_create_item_success(
        self, item_service: ItemService, mock_item_repository: Mock, sample_item: Item
    ):
        """Test successful item creation."""
        mock_item_repository.create.return_value = sample_item

        result = await item_service.create_item({"name": "chair"})

        assert isinstance(result, ItemResponse)
        assert result.id == 1
        assert result.data == {"name": "chair"}
        mock_item_repository.create.assert_called_once_with({"name": "chair"})

    @pytest.mark.asyncio
    async def test_create_item_database_error(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test item creation with database error."""
        mock_item_repository.create.side_effect = SQLAlchemyError("Database error")

        with pytest.raises(ItemServiceError) as exc_info:
            await item_service.create_item({"name": "chair"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to create item"
        assert isinstance(exc_info.value.original_error, SQLAlchemyError)

    @pytest.mark.asyncio
    async def test_list_items(
        self, item_service: ItemService, mock_item_repository: Mock, sample_item: Item
    ):
        """Test listing items."""
        mock_item_repository.get_all.return_value = [sample_item]

        result = await item_service.list_items()

        assert [item.id for item in result] == [1]

    @pytest.mark.asyncio
    async def test_get_item_not_found(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test item retrieval when item not found."""
        mock_item_repository.get_by_id_or_raise.side_effect = ItemNotFoundError(5)

        with pytest.raises(ItemNotFoundServiceError) as exc_info:
            await item_service.get_item(5)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_replace_item_not_found(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test replacing a non-existent item."""
        mock_item_repository.replace.side_effect = ItemNotFoundError(5)

        with pytest.raises(ItemNotFoundServiceError):
            await item_service.replace_item(5, {"name": "ghost"})

    @pytest.mark.asyncio
    async def test_replace_item_database_error(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test item replacement with database error."""
        mock_item_repository.replace.side_effect = SQLAlchemyError("Database error")

        with pytest.raises(ItemServiceError) as exc_info:
            await item_service.replace_item(5, {})

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_delete_item_success(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test successful item deletion."""
        mock_item_repository.delete.return_value = True

        assert await item_service.delete_item(1) is True
        mock_item_repository.delete.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_delete_item_not_found(
        self, item_service: ItemService, mock_item_repository: Mock
    ):
        """Test deleting a non-existent item."""
        mock_item_repository.delete.side_effect = ItemNotFoundError(1)

        with pytest.raises(ItemNotFoundServiceError):
            await item_service.delete_item(1)


class TestItemServiceExceptions:
    """Test cases for ItemService exception classes."""

    def test_item_service_error_defaults(self):
        error = ItemServiceError("Bad item")

        assert error.message == "Bad item"
        assert error.status_code == 400
        assert error.original_error is None

    def test_item_not_found_service_error(self):
        error = ItemNotFoundServiceError(123)

        assert error.status_code == 404
        assert "Item with id 123 not found" in error.message

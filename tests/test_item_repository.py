"""Unit tests for ItemRepository.

This module contains unit tests for the ItemRepository class,
including database operations and error handling.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from event_server.models.item import Item
from event_server.repositories.item_repository import ItemNotFoundError, ItemRepository


class TestItemRepository:
    """Test cases for ItemRepository."""

    @pytest.fixture
    def item_repository(self, test_session: Session) -> ItemRepository:
        """Create ItemRepository instance for testing."""
        return ItemRepository(test_session)

    def test_create_success(self, item_repository: ItemRepository):
        """Test successful item creation."""
        result = item_repository.create({"name": "chair", "legs": 4})

        assert result.id is not None
        assert result.data == {"name": "chair", "legs": 4}
        assert result.created_at is not None
        assert result.updated_at is None

    def test_create_database_error(self, item_repository: ItemRepository):
        """Test item creation with database error."""
        with patch.object(item_repository.session, "commit") as mock_commit:
            mock_commit.side_effect = SQLAlchemyError("Database error")

            with pytest.raises(SQLAlchemyError) as exc_info:
                item_repository.create({"name": "chair"})

            assert "Database error while creating item" in str(exc_info.value)

    def test_get_by_id_success(self, item_repository: ItemRepository, test_data_factory):
        """Test successful item retrieval by ID."""
        item = test_data_factory.create_item({"name": "lamp"})

        result = item_repository.get_by_id(item.id)

        assert result is not None
        assert result.id == item.id
        assert result.data == {"name": "lamp"}

    def test_get_by_id_not_found(self, item_repository: ItemRepository):
        """Test item retrieval by ID when item not found."""
        assert item_repository.get_by_id(999) is None

    def test_get_by_id_database_error(self, item_repository: ItemRepository):
        """Test item retrieval by ID with database error."""
        with patch.object(item_repository.session, "exec") as mock_exec:
            mock_exec.side_effect = SQLAlchemyError("Database error")

            with pytest.raises(SQLAlchemyError) as exc_info:
                item_repository.get_by_id(1)

            assert "Database error while retrieving item" in str(exc_info.value)

    def test_get_by_id_or_raise_not_found(self, item_repository: ItemRepository):
        """Test get_by_id_or_raise when item not found."""
        with pytest.raises(ItemNotFoundError) as exc_info:
            item_repository.get_by_id_or_raise(999)

        assert exc_info.value.item_id == 999

    def test_get_all_orders_by_id(self, item_repository: ItemRepository, test_data_factory):
        """Test items are returned in ascending id order."""
        created = [test_data_factory.create_item({"n": n}) for n in range(3)]

        result = item_repository.get_all()

        assert [item.id for item in result] == [item.id for item in created]

    def test_replace_success(self, item_repository: ItemRepository, test_data_factory):
        """Test successful item replacement."""
        item = test_data_factory.create_item({"name": "lamp", "watts": 40})

        result = item_repository.replace(item.id, ["now", "a", "list"])

        assert result.id == item.id
        assert result.data == ["now", "a", "list"]
        assert result.updated_at is not None

    def test_replace_not_found(self, item_repository: ItemRepository):
        """Test replacing a non-existent item."""
        with pytest.raises(ItemNotFoundError):
            item_repository.replace(999, {"name": "ghost"})

        assert item_repository.get_all() == []

    def test_delete_success(self, item_repository: ItemRepository, test_data_factory):
        """Test successful item deletion."""
        item = test_data_factory.create_item()

        assert item_repository.delete(item.id) is True
        assert item_repository.get_by_id(item.id) is None

    def test_delete_not_found(self, item_repository: ItemRepository):
        """Test deleting a non-existent item."""
        with pytest.raises(ItemNotFoundError):
            item_repository.delete(999)

    def test_delete_database_error(self, item_repository: ItemRepository, test_data_factory):
        """Test item deletion with database error."""
        item = test_data_factory.create_item()

        with patch.object(item_repository.session, "commit") as mock_commit:
            mock_commit.side_effect = SQLAlchemyError("Database error")

            with pytest.raises(SQLAlchemyError) as exc_info:
                item_repository.delete(item.id)

            assert "Database error while deleting item" in str(exc_info.value)


class TestItemRepositoryExceptions:
    """Test cases for ItemRepository exception classes."""

    def test_item_not_found_error(self):
        """Test ItemNotFoundError exception."""
        error = ItemNotFoundError(123)

        assert error.item_id == 123
        assert "Item with id 123 not found" in str(error)

    def test_item_defaults_to_null_document(self):
        assert Item().data is None

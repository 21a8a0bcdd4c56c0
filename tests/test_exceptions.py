"""Unit tests for error codes and error response formatting."""

import json
from decimal import Decimal

import pytest

from event_server.exceptions import (
    AuthenticationException,
    DatabaseException,
    create_error_response,
    error_code_for,
)
from event_server.services.event_service import DuplicateRsvpError, EventNotFoundServiceError
from event_server.services.payment_service import AmountMismatchError


class TestErrorCodes:
    """Test cases for deriving error codes from exception classes."""

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (EventNotFoundServiceError(1), "event_not_found_service_error"),
            (DuplicateRsvpError(1), "duplicate_rsvp_error"),
            (ValueError("x"), "value_error"),
        ],
    )
    def test_error_code_for(self, exc: Exception, expected: str):
        assert error_code_for(exc) == expected

    def test_amount_mismatch_message(self):
        error = AmountMismatchError(Decimal("10"), Decimal("15.00"))

        assert error.status_code == 400
        assert "10" in error.message
        assert "15.00" in error.message


class TestErrorResponses:
    """Test cases for the standard error body."""

    def test_create_error_response(self):
        response = create_error_response(
            status_code=404,
            message="Event with id 1 not found",
            error_code="event_not_found_service_error",
            request_id="req-1",
        )

        body = json.loads(response.body)
        assert response.status_code == 404
        assert body == {
            "error": {
                "code": "event_not_found_service_error",
                "message": "Event with id 1 not found",
                "status_code": 404,
                "request_id": "req-1",
            }
        }

    def test_details_included_when_present(self):
        response = create_error_response(400, "Bad", "validation_error", details={"field": "x"})

        assert json.loads(response.body)["error"]["details"] == {"field": "x"}

    def test_authentication_exception(self):
        exc = AuthenticationException()

        assert exc.status_code == 401
        assert exc.error_code == "authentication_error"

    def test_database_exception_is_generic(self):
        exc = DatabaseException()

        assert exc.status_code == 500
        assert exc.error_code == "database_error"
        assert exc.message == "Database operation failed"
        assert exc.details == {}

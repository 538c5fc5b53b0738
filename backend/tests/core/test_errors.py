"""Error Hierarchy — codes, statuses and the REST error envelope.

Tests:
    - Every error subclass maps to its HTTP status and category
    - to_response() carries code, message, severity and context ids
    - HabitValidationError keeps the violated rule codes
"""

from datetime import datetime, timezone

import pytest

from devhabits.core.errors import (
    BusinessRuleViolationError, DatabaseError, DevHabitsError,
    DuplicateResourceError, ErrorCategory, ErrorContext, ErrorSeverity,
    HabitValidationError, ResourceNotFoundError,
)


@pytest.mark.parametrize("error,status,category", [
    (HabitValidationError(["INVALID_NAME"]), 400, ErrorCategory.VALIDATION),
    (BusinessRuleViolationError("LOG_NOT_ALLOWED", "nope"), 409, ErrorCategory.BUSINESS_RULE),
    (ResourceNotFoundError("Habit", "abc"), 404, ErrorCategory.RESOURCE_NOT_FOUND),
    (DuplicateResourceError("Tag", "work"), 409, ErrorCategory.CONFLICT),
    (DatabaseError("timeout", "query"), 503, ErrorCategory.DATABASE),
])
def test_error_status_and_category(error, status, category):
    assert isinstance(error, DevHabitsError)
    assert error.http_status == status
    assert error.category == category


def test_business_rule_code_is_rule_name():
    error = BusinessRuleViolationError("DELETE_NOT_ALLOWED", "Completed habit has history")
    assert error.code == "DELETE_NOT_ALLOWED"
    assert error.rule == "DELETE_NOT_ALLOWED"


def test_validation_error_lists_violations():
    error = HabitValidationError(["INVALID_NAME", "TARGET_REQUIRED"])
    assert error.violations == ["INVALID_NAME", "TARGET_REQUIRED"]
    assert "INVALID_NAME, TARGET_REQUIRED" in error.message


def test_database_error_is_critical():
    error = DatabaseError("connection refused", "connection")
    assert error.severity == ErrorSeverity.CRITICAL
    assert error.message == "Database connection failed: connection refused"


def test_to_response_envelope():
    timestamp = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)
    error = ResourceNotFoundError(
        "Habit", "abc", ErrorContext(timestamp=timestamp, habit_id="abc"),
    )
    assert error.to_response() == {
        "error": {
            "code": "RESOURCE_NOT_FOUND",
            "message": "Habit 'abc' not found",
            "category": "resource_not_found",
            "severity": "error",
            "timestamp": "2025-01-02T12:00:00+00:00",
            "context": {"habit_id": "abc", "tag_id": None},
        },
    }


def test_default_context_timestamp_is_utc():
    error = DuplicateResourceError("Tag", "work")
    assert error.context.timestamp.tzinfo is not None

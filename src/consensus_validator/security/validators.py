"""
Input Validators - Boundary checks for ValidationRequest fields.

Parse at the boundary: validate and type-check all external input
before it enters the pipeline. Never pass raw dicts or unvalidated
strings through multiple layers.
"""

import logging

logger = logging.getLogger(__name__)

MAX_PREREQUISITES = 50
MAX_TOPIC_LENGTH = 500
MAX_GUIDELINES_LENGTH = 10_000


class ValidationError(ValueError):
    """Raised when input validation fails. Contains a user-friendly message."""

    pass


def validate_not_empty(value: str, field_name: str = "input") -> str:
    """Validate that a string is not empty or whitespace-only."""
    if not value or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty")
    return value


def validate_length(
    value: str,
    field_name: str = "input",
    min_length: int = 0,
    max_length: int = 100_000,
) -> str:
    """Validate string length is within bounds."""
    if len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value


def validate_in_choices(value: str, choices: list[str], field_name: str = "value") -> str:
    """Validate that a value is one of the allowed choices."""
    if value not in choices:
        raise ValidationError(f"{field_name} must be one of: {', '.join(choices)}")
    return value


def validate_list_size(items: list, field_name: str = "list", max_items: int = 100) -> list:
    """Validate list doesn't exceed max size."""
    if len(items) > max_items:
        raise ValidationError(f"{field_name} must have at most {max_items} items (got {len(items)})")
    return items


def validate_request(request, max_content_length: int) -> None:
    """
    Check a ValidationRequest before it reaches the injection gate.

    Raises:
        ValidationError: empty or oversized content, malformed context
    """
    validate_not_empty(request.content, "content")
    validate_length(request.content, "content", max_length=max_content_length)

    context = request.context
    if context is None:
        return
    validate_not_empty(context.topic, "topic")
    validate_length(context.topic, "topic", max_length=MAX_TOPIC_LENGTH)
    validate_list_size(list(context.prerequisite_topics), "prerequisite_topics", MAX_PREREQUISITES)
    if context.guidelines:
        validate_length(context.guidelines, "guidelines", max_length=MAX_GUIDELINES_LENGTH)

"""Security utilities -- injection gate, content sanitization, input validation."""
from .prompt_guard import (
    detect_injection_attempt,
    fence_user_content,
    sanitize_content,
    sanitize_for_prompt,
    validate_for_injection,
)
from .validators import (
    ValidationError,
    validate_in_choices,
    validate_length,
    validate_list_size,
    validate_not_empty,
    validate_request,
)

"""Eval fixtures -- sample content, sample context, mock LLM client."""

from unittest.mock import AsyncMock

import pytest

from consensus_validator.llm import LLMResponse, TokenUsage
from consensus_validator.models import AssignmentContext, ContentType

from .fakes import SAMPLE_CONTENT, scoring_json


@pytest.fixture
def sample_content():
    return SAMPLE_CONTENT


@pytest.fixture
def sample_context():
    return AssignmentContext(
        topic="Recursion",
        prerequisite_topics=("Functions", "Call stack"),
        guidelines="Include at least one worked example.",
        content_type=ContentType.LECTURE_NOTE,
    )


@pytest.fixture
def mock_llm():
    """Mock LLMClient that returns a well-formed scoring response without API calls."""
    client = AsyncMock()
    client.model = "mock-model"
    client.call.return_value = LLMResponse(
        content=scoring_json(),
        usage=TokenUsage(input_tokens=900, output_tokens=120),
        model="mock-model",
        provider="openai",
        latency_ms=42.0,
    )
    return client

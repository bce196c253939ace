"""
Scoring providers -- one polymorphic validate() behind every backend.

  - LLMProvider: OpenAI, Gemini, Anthropic through LLMClient
  - HTTPProvider: any OpenAI-compatible endpoint through httpx
  - StubProvider: deterministic offline fallback
"""
from .base import (
    ScoringProvider,
    clamp_output,
    failure_output,
    output_payload,
    validate_with_fallback,
)
from .http_provider import HTTPProvider
from .llm_provider import LLMProvider
from .registry import build_provider, build_providers
from .schema import ScorePayload, parse_scoring_response
from .stub import STUB_ID, StubProvider, stub_scores

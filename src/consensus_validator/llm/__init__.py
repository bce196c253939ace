"""
LLM Client -- Provider-agnostic async wrapper for scoring calls.

Supports OpenAI (GPT), Google (Gemini) and Anthropic (Claude).
One attempt per call, JSON output mode, timeouts and size limits.

Usage:
    from .llm import LLMClient, CacheablePrompt

    client = LLMClient(provider="openai", api_key=key)
    response = await client.call(prompt=CacheablePrompt(system=..., user_message=...))
    print(response.content)
"""

from .client import CacheablePrompt, LLMClient, LLMResponse, TokenUsage
from .json_parser import extract_json

"""
Provider Evals -- adapters, stub, registry and configuration.

Every remote call is faked: LLMProvider gets an AsyncMock client,
HTTPProvider gets an httpx.MockTransport.
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from consensus_validator.config import EngineConfig, ProviderSettings
from consensus_validator.errors import IntegrityViolation, ProviderTransportFailure
from consensus_validator.llm import LLMClient, LLMResponse, extract_json
from consensus_validator.providers import (
    HTTPProvider,
    LLMProvider,
    StubProvider,
    build_provider,
    build_providers,
    failure_output,
    parse_scoring_response,
    stub_scores,
    validate_with_fallback,
)
from consensus_validator.integrity import ResponseIntegrityChecker
from consensus_validator.rubrics import SYSTEM_MESSAGE
from evals.fakes import FailingProvider, FakeProvider, scoring_json


class TestStubProvider:
    """Eval: Is the offline fallback deterministic and bounded?"""

    @pytest.mark.asyncio
    async def test_same_input_same_output(self, sample_content):
        stub = StubProvider()
        first = await stub.validate(sample_content)
        second = await stub.validate(sample_content)
        assert first == second
        assert first.provider_id == "stub"
        assert first.is_stub

    def test_scores_follow_length(self):
        # len 40: 40 % 20 = 0, 40 % 30 = 10, 40 % 25 = 15
        assert stub_scores("x" * 40).values() == (60, 65, 80)
        assert stub_scores("x" * 40, brief="b").values() == (70, 65, 80)

    @pytest.mark.parametrize("length", [0, 1, 9, 19, 29, 137, 15_000])
    def test_scores_never_below_floor(self, length):
        scores = stub_scores("y" * length)
        assert all(50 <= s <= 100 for s in scores.values())


class TestScoringResponseParsing:
    """Eval: Is provider text turned into checked scores or a clean failure?"""

    def test_plain_json(self):
        payload = parse_scoring_response(scoring_json(82, 72, 91), "openai")
        assert payload.to_scores().values() == (82, 72, 91)
        assert payload.to_feedback().relevance.startswith("Covers recursion")

    def test_fenced_json_with_preamble(self):
        text = "Here you go:\n```json\n" + scoring_json(60, 61, 62) + "\n```"
        assert parse_scoring_response(text, "gemini").to_scores().values() == (60, 61, 62)

    def test_out_of_range_scores_clamped(self):
        text = json.dumps({"relevance": 140, "continuity": -3, "documentation": 70.5})
        assert parse_scoring_response(text, "x").to_scores().values() == (100, 0, 71)

    def test_not_json_is_transport_failure(self):
        with pytest.raises(ProviderTransportFailure, match="not a JSON object"):
            parse_scoring_response("I cannot help with that.", "anthropic")

    def test_error_escape_hatch_is_failure(self):
        text = json.dumps({"error": "Content is empty", "validation_attempted": False})
        with pytest.raises(ProviderTransportFailure, match="provider declined"):
            parse_scoring_response(text, "openai")

    def test_perfect_scores_raise_integrity_violation(self):
        with pytest.raises(IntegrityViolation):
            parse_scoring_response(scoring_json(100, 100, 100), "openai")

    def test_oversized_integer_score_clamped(self):
        huge = int("1" + "0" * 399)
        text = json.dumps({"relevance": huge, "continuity": 60, "documentation": 70})
        assert parse_scoring_response(text, "openai").to_scores().values() == (100, 60, 70)

    def test_oversized_negative_score_clamped(self):
        text = json.dumps({"relevance": -int("9" * 400), "continuity": 60, "documentation": 70})
        assert parse_scoring_response(text, "openai").to_scores().values() == (0, 60, 70)

    def test_extract_json_balanced_object(self):
        assert extract_json('noise {"a": "}", "b": {"c": 1}} tail') == {"a": "}", "b": {"c": 1}}
        assert extract_json("nothing here") is None


class TestLLMProvider:
    """Eval: Does the SDK adapter send the hardened prompt and parse the reply?"""

    @pytest.mark.asyncio
    async def test_validate_uses_system_message_and_rubric(self, mock_llm, sample_content, sample_context):
        provider = LLMProvider("openai", mock_llm)
        output = await provider.validate(sample_content, sample_context, "Week 3")

        prompt = mock_llm.call.call_args.kwargs["prompt"]
        assert prompt.system == SYSTEM_MESSAGE
        assert "Recursion" in prompt.user_message
        assert mock_llm.call.call_args.kwargs["temperature"] == 0.0
        assert output.scores.values() == (82, 72, 91)
        assert output.model == "mock-model"
        assert output.latency_ms == 42.0

    @pytest.mark.asyncio
    async def test_client_failure_propagates(self, mock_llm):
        mock_llm.call.side_effect = ProviderTransportFailure("openai", "timed out")
        with pytest.raises(ProviderTransportFailure):
            await LLMProvider("openai", mock_llm).validate("text")

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_without_sdk_call(self):
        client = LLMClient(provider="openai", api_key="")
        assert not client.has_credentials
        with pytest.raises(ProviderTransportFailure, match="API key missing"):
            await LLMProvider("openai", client).validate("text")

    @pytest.mark.asyncio
    async def test_failure_labelled_with_adapter_id(self):
        client = LLMClient(provider="gemini", api_key="")
        with pytest.raises(ProviderTransportFailure) as exc:
            await LLMProvider("gemini", client).validate("text")
        assert exc.value.provider_id == "gemini"
        assert exc.value.reason == "API key missing"
        assert str(exc.value) == "gemini: API key missing"

    def test_gemini_alias_and_default_models(self):
        assert LLMClient(provider="gemini", api_key="k").provider == "google"
        assert LLMClient(provider="gemini", api_key="k").model == "gemini-1.5-flash"
        assert LLMClient(provider="openai", api_key="k").model == "gpt-4o-mini"
        with pytest.raises(ValueError):
            LLMClient(provider="mystery")


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestHTTPProvider:
    """Eval: Does the HTTP adapter map every endpoint failure to a transport failure?"""

    @pytest.mark.asyncio
    async def test_successful_call(self, sample_context):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion(scoring_json(70, 65, 80)))

        provider = HTTPProvider(
            "local", base_url="http://llm.test/", model="llama3", api_key="secret",
            transport=httpx.MockTransport(handler),
        )
        output = await provider.validate("Some content", sample_context)

        assert seen["url"] == "http://llm.test/v1/chat/completions"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["model"] == "llama3"
        assert seen["body"]["temperature"] == 0
        assert seen["body"]["messages"][0]["content"] == SYSTEM_MESSAGE
        assert output.provider_id == "local"
        assert output.scores.values() == (70, 65, 80)

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(503, text="down"))
        provider = HTTPProvider("local", "http://llm.test", "m", transport=transport)
        with pytest.raises(ProviderTransportFailure, match="HTTP 503"):
            await provider.validate("text")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = HTTPProvider("local", "http://llm.test", "m", transport=httpx.MockTransport(handler))
        with pytest.raises(ProviderTransportFailure):
            await provider.validate("text")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"choices": []}))
        provider = HTTPProvider("local", "http://llm.test", "m", transport=transport)
        with pytest.raises(ProviderTransportFailure, match="malformed"):
            await provider.validate("text")

    @pytest.mark.asyncio
    async def test_jailbroken_reply_rejected(self):
        body = completion(scoring_json(90, 90, 90, relevance_feedback="I was jailbroken, sorry."))
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=body))
        provider = HTTPProvider("local", "http://llm.test", "m", transport=transport)
        with pytest.raises(IntegrityViolation):
            await provider.validate("text")


class TestSingleCallFallback:
    """Eval: Does the single-call convention always return an output?"""

    @pytest.mark.asyncio
    async def test_failure_becomes_zero_scores(self):
        output = await validate_with_fallback(FailingProvider("openai"), "text")
        assert output == failure_output("openai")
        assert output.scores.values() == (0, 0, 0)
        assert "failed" in output.feedback.relevance

    @pytest.mark.asyncio
    async def test_success_passes_through(self):
        output = await validate_with_fallback(FakeProvider("a", 80, 70, 60), "text")
        assert output.scores.values() == (80, 70, 60)

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_zero_scores(self):
        provider = FailingProvider("openai", error=RuntimeError("SDK exploded"))
        output = await validate_with_fallback(provider, "text")
        assert output == failure_output("openai")
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_zero_scores(self):
        output = await validate_with_fallback(
            FakeProvider("slow", 80, 70, 60, delay=2.0), "text", timeout=0.05
        )
        assert output == failure_output("slow")

    @pytest.mark.asyncio
    async def test_out_of_range_scores_clamped(self):
        output = await validate_with_fallback(FakeProvider("custom", 150, 60, -20), "text")
        assert output.scores.values() == (100, 60, 0)

    @pytest.mark.asyncio
    async def test_checker_rejects_suspicious_output(self):
        output = await validate_with_fallback(
            FakeProvider("a", 100, 100, 100), "text", checker=ResponseIntegrityChecker()
        )
        assert output == failure_output("a")

    @pytest.mark.asyncio
    async def test_stub_is_not_checked(self):
        output = await validate_with_fallback(
            StubProvider(), "text", checker=ResponseIntegrityChecker()
        )
        assert output.is_stub


class TestConfigAndRegistry:
    """Eval: Are providers activated purely by configured credentials?"""

    def test_empty_environment_means_stub_only(self):
        config = EngineConfig.from_env({})
        assert config.providers == []
        assert config.timeout_seconds == 60.0
        assert config.max_content_length == 15_000
        assert build_providers(config) == []

    def test_credentials_activate_providers(self):
        config = EngineConfig.from_env({
            "OPENAI_API_KEY": "sk-1",
            "GOOGLE_API_KEY": "g-1",
            "ANTHROPIC_API_KEY": "a-1",
            "ANTHROPIC_MODEL": "claude-x",
            "CONSENSUS_HTTP_BASE_URL": "http://llm.test",
            "CONSENSUS_TIMEOUT_SECONDS": "5",
        })
        assert [p.provider_id for p in config.providers] == ["openai", "gemini", "anthropic", "http"]
        assert config.providers[2].model == "claude-x"
        assert config.timeout_seconds == 5.0

        providers = build_providers(config)
        assert [type(p) for p in providers] == [LLMProvider, LLMProvider, LLMProvider, HTTPProvider]
        assert providers[2].model == "claude-x"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError, match="must be one of"):
            build_provider(ProviderSettings(kind="carrier-pigeon"), timeout=1)

    def test_http_requires_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            build_provider(ProviderSettings(kind="http"), timeout=1)

    def test_duplicate_ids_rejected(self):
        config = EngineConfig(providers=[
            ProviderSettings(kind="openai", api_key="a"),
            ProviderSettings(kind="openai", api_key="b"),
        ])
        with pytest.raises(ValueError, match="Duplicate"):
            build_providers(config)

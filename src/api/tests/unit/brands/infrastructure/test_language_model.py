"""Unit tests for the OpenAI-compatible language model client."""

import json
from unittest.mock import create_autospec

import httpx
import pytest

from brands.domain.analysis import MalformedAnalysisError
from brands.domain.value_objects import EvidenceType
from brands.infrastructure.language_model import (
    OpenAICompatibleClient,
    _parse_sse_line,
    strip_code_fence,
)
from brands.infrastructure.observability import AnalyzerClientProbe
from brands.ports.exceptions import AnalyzerError, AnalyzerTimeoutError
from brands.ports.services import ChatMessage


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def mock_probe():
    return create_autospec(AnalyzerClientProbe, instance=True)


@pytest.fixture
def make_client(mock_probe):
    def _make(handler, api_key="sk-test"):
        return OpenAICompatibleClient(
            api_key=api_key,
            base_url="https://llm.example/v1/",
            model="gpt-test",
            timeout_seconds=5,
            probe=mock_probe,
            transport=httpx.MockTransport(handler),
        )

    return _make


class TestStripCodeFence:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('{"a": 1}', '{"a": 1}'),
            ('```json\n{"a": 1}\n```', '{"a": 1}'),
            ('```\n{"a": 1}\n```  ', '{"a": 1}'),
            ("  plain  ", "plain"),
        ],
    )
    def test_strip(self, text, expected):
        assert strip_code_fence(text) == expected


class TestAnalyzeBrand:
    """Tests for analyze_brand."""

    @pytest.mark.asyncio
    async def test_sends_json_mode_request_and_parses_reply(self, make_client, mock_probe):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion('{"summary": "Eco"}'))

        result = await make_client(handler).analyze_brand("Acme Co", "Evidence 1 [MANUAL]: x")

        assert result == {"summary": "Eco"}
        assert seen["url"] == "https://llm.example/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["model"] == "gpt-test"
        assert seen["body"]["response_format"] == {"type": "json_object"}
        assert "Brand name: Acme Co" in seen["body"]["messages"][1]["content"]
        mock_probe.request_completed.assert_called_once()

    @pytest.mark.asyncio
    async def test_brand_name_only_prompt(self, make_client):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("{}"))

        await make_client(handler).analyze_brand("Acme Co", "")

        assert "No evidence was supplied" in seen["body"]["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_accepts_fenced_json(self, make_client):
        def handler(request):
            return httpx.Response(200, json=completion('```json\n{"tone": "Bold"}\n```'))

        assert await make_client(handler).analyze_brand("Acme", "x") == {"tone": "Bold"}

    @pytest.mark.asyncio
    async def test_non_json_reply_is_malformed(self, make_client):
        def handler(request):
            return httpx.Response(200, json=completion("Sure! Here is your analysis."))

        with pytest.raises(MalformedAnalysisError):
            await make_client(handler).analyze_brand("Acme", "x")

    @pytest.mark.asyncio
    async def test_http_error(self, make_client, mock_probe):
        def handler(request):
            return httpx.Response(502, json={"error": "bad gateway"})

        with pytest.raises(AnalyzerError, match="HTTP 502"):
            await make_client(handler).analyze_brand("Acme", "x")

        mock_probe.request_failed.assert_called_once_with(
            operation="analyze_brand", error="HTTP 502"
        )

    @pytest.mark.asyncio
    async def test_timeout(self, make_client, mock_probe):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(AnalyzerTimeoutError):
            await make_client(handler).analyze_brand("Acme", "x")

        mock_probe.request_timed_out.assert_called_once_with(
            operation="analyze_brand", timeout_seconds=5
        )

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, make_client):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        with pytest.raises(AnalyzerError):
            await make_client(handler).analyze_brand("Acme", "x")

    @pytest.mark.asyncio
    async def test_missing_key_fails_without_request(self, make_client):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=completion("{}"))

        with pytest.raises(AnalyzerError):
            await make_client(handler, api_key=None).analyze_brand("Acme", "x")

        assert calls == []


class TestSummarizeEvidence:
    @pytest.mark.asyncio
    async def test_document_is_truncated(self, make_client):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("Notes"))

        result = await make_client(handler).summarize_evidence(
            EvidenceType.DOCUMENT, "x" * 5000
        )

        assert result == "Notes"
        prompt = seen["body"]["messages"][1]["content"]
        assert "x" * 3000 in prompt
        assert "x" * 3001 not in prompt

    @pytest.mark.asyncio
    async def test_brand_name_search_is_not_sent(self, make_client):
        def handler(request):
            raise AssertionError("no request expected")

        result = await make_client(handler).summarize_evidence(
            EvidenceType.BRAND_NAME_SEARCH, "Acme"
        )

        assert result == "Acme"


class TestStreamReply:
    """Tests for the streaming chat reply."""

    @pytest.mark.asyncio
    async def test_yields_deltas_until_done(self, make_client):
        events = [
            {"choices": [{"delta": {"role": "assistant"}}]},
            {"choices": [{"delta": {"content": "Hello"}}]},
            {"choices": [{"delta": {"content": " there"}}]},
        ]
        body = "".join(f"data: {json.dumps(e)}\n\n" for e in events)
        body += "data: [DONE]\n\ndata: {\"choices\": [{\"delta\": {\"content\": \"late\"}}]}\n\n"

        def handler(request):
            assert json.loads(request.content)["stream"] is True
            return httpx.Response(
                200, content=body.encode(), headers={"Content-Type": "text/event-stream"}
            )

        client = make_client(handler)
        chunks = [
            chunk
            async for chunk in client.stream_reply([ChatMessage(role="user", content="Hi")])
        ]

        assert chunks == ["Hello", " there"]

    @pytest.mark.asyncio
    async def test_http_error_raises(self, make_client):
        def handler(request):
            return httpx.Response(500, text="boom")

        client = make_client(handler)
        with pytest.raises(AnalyzerError, match="HTTP 500"):
            async for _ in client.stream_reply([ChatMessage(role="user", content="Hi")]):
                pass

    @pytest.mark.asyncio
    async def test_missing_key_raises_on_first_chunk(self, make_client):
        client = make_client(lambda request: httpx.Response(200), api_key="")
        stream = client.stream_reply([ChatMessage(role="user", content="Hi")])

        with pytest.raises(AnalyzerError):
            await anext(stream)


class TestParseSseLine:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("", ""),
            (": keep-alive", ""),
            ("data: [DONE]", None),
            ('data: {"choices": [{"delta": {"content": "Hi"}}]}', "Hi"),
            ('data: {"choices": [{"delta": {}}]}', ""),
            ("data: not json", ""),
        ],
    )
    def test_parse(self, line, expected):
        assert _parse_sse_line(line) == expected

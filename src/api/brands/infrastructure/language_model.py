"""OpenAI-compatible chat-completions client.

Implements both the brand analyzer and the onboarding chat model over
``httpx.AsyncClient``. Every call is bounded by the configured timeout;
timeouts surface as AnalyzerTimeoutError and every other transport or API
failure as AnalyzerError.
"""

from __future__ import annotations

import json
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from brands.domain.analysis import ANALYSIS_KEYS, MalformedAnalysisError
from brands.domain.value_objects import EvidenceType
from brands.infrastructure.observability import (
    AnalyzerClientProbe,
    DefaultAnalyzerClientProbe,
)
from brands.ports.exceptions import AnalyzerError, AnalyzerTimeoutError
from brands.ports.services import ChatMessage, IBrandAnalyzer, IChatModel

ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 2000
CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 1000
DOCUMENT_EXCERPT_LENGTH = 3000

ANALYST_SYSTEM_PROMPT = (
    "You are a senior brand strategist. You turn raw brand material into a "
    "concise, structured strategy profile and answer only with JSON."
)

_SUMMARY_PROMPTS: dict[EvidenceType, str] = {
    EvidenceType.WEBSITE: (
        "Analyze this website for brand insights: {value}\n\n"
        "Cover brand positioning, likely industry and target market, key value "
        "propositions, and tone indicators."
    ),
    EvidenceType.DOCUMENT: (
        "Extract brand insights from this document:\n\n{value}\n\n"
        "Cover mission and vision, target market, positioning, business goals, "
        "key messaging, and tone."
    ),
    EvidenceType.SOCIAL: (
        "Analyze this social media presence for brand insights: {value}\n\n"
        "Cover engagement style, recurring themes, and brand personality."
    ),
    EvidenceType.MANUAL: "Summarize and structure this brand information:\n\n{value}",
}


def _analysis_prompt(brand_name: str, evidence_text: str) -> str:
    keys = ", ".join(ANALYSIS_KEYS)
    source = (
        f"Evidence:\n{evidence_text}"
        if evidence_text
        else "No evidence was supplied. Use what is publicly known about the brand name."
    )
    return (
        f"Brand name: {brand_name}\n\n{source}\n\n"
        f"Return one JSON object with exactly these keys: {keys}.\n"
        "summary, audience, tone and offers are strings. pillars and "
        "recommendations are arrays of 3 to 5 strings. competitors and channels "
        "are arrays of strings."
    )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence such as ```json ... ```."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    first_newline = stripped.find("\n")
    body = stripped[first_newline + 1 :] if first_newline != -1 else ""
    if body.rstrip().endswith("```"):
        body = body.rstrip()[:-3]
    return body.strip()


class OpenAICompatibleClient(IBrandAnalyzer, IChatModel):
    """Async client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        model: str,
        timeout_seconds: float,
        probe: AnalyzerClientProbe | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer token; when absent every call fails with AnalyzerError
            base_url: API base URL, e.g. ``https://api.openai.com/v1``
            model: Model name sent with every request
            timeout_seconds: Timeout applied to every call
            probe: Optional domain probe for observability
            transport: Optional httpx transport, used by tests
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout_seconds
        self._probe = probe or DefaultAnalyzerClientProbe()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_key(self, operation: str) -> None:
        if not self._api_key:
            self._probe.request_failed(operation=operation, error="no API key")
            raise AnalyzerError("Analyzer API key is not configured")

    async def _complete(
        self,
        operation: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        self._require_key(operation)
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        start = time.monotonic()
        try:
            response = await self._get_client().post("/chat/completions", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            self._probe.request_timed_out(operation=operation, timeout_seconds=self._timeout)
            raise AnalyzerTimeoutError(
                f"Analyzer timed out after {self._timeout:g}s"
            ) from e
        except httpx.HTTPStatusError as e:
            self._probe.request_failed(
                operation=operation, error=f"HTTP {e.response.status_code}"
            )
            raise AnalyzerError(
                f"Analyzer returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            self._probe.request_failed(operation=operation, error=str(e))
            raise AnalyzerError(f"Analyzer request failed: {e}") from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            self._probe.request_failed(operation=operation, error="unexpected response shape")
            raise AnalyzerError("Analyzer returned an unexpected response") from e

        self._probe.request_completed(
            operation=operation,
            model=self._model,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return content or ""

    async def analyze_brand(self, brand_name: str, evidence_text: str) -> Any:
        """Ask for the structured brand analysis and parse it as JSON.

        Raises:
            AnalyzerTimeoutError: If the call times out
            AnalyzerError: If the call fails
            MalformedAnalysisError: If the reply is not valid JSON
        """
        content = await self._complete(
            "analyze_brand",
            [
                {"role": "system", "content": ANALYST_SYSTEM_PROMPT},
                {"role": "user", "content": _analysis_prompt(brand_name, evidence_text)},
            ],
            temperature=ANALYSIS_TEMPERATURE,
            max_tokens=ANALYSIS_MAX_TOKENS,
            json_mode=True,
        )
        try:
            return json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            raise MalformedAnalysisError(f"Analyzer reply is not JSON: {e}") from e

    async def summarize_evidence(self, type: EvidenceType, value: str) -> str:
        """Structured brand notes for one evidence item."""
        template = _SUMMARY_PROMPTS.get(type)
        if template is None:
            return value
        if type is EvidenceType.DOCUMENT:
            value = value[:DOCUMENT_EXCERPT_LENGTH]
        return await self._complete(
            "summarize_evidence",
            [
                {
                    "role": "system",
                    "content": "You are a brand analysis expert. Extract brand insights.",
                },
                {"role": "user", "content": template.format(value=value)},
            ],
            temperature=ANALYSIS_TEMPERATURE,
            max_tokens=ANALYSIS_MAX_TOKENS,
        )

    async def stream_reply(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Stream reply text from server-sent events.

        Raises:
            AnalyzerTimeoutError: If the call times out
            AnalyzerError: If the call fails before or during streaming
        """
        self._require_key("chat")
        payload = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": CHAT_TEMPERATURE,
            "max_tokens": CHAT_MAX_TOKENS,
            "stream": True,
        }
        try:
            async with self._get_client().stream(
                "POST", "/chat/completions", json=payload
            ) as response:
                if response.status_code >= 400:
                    self._probe.request_failed(
                        operation="chat", error=f"HTTP {response.status_code}"
                    )
                    raise AnalyzerError(
                        f"Chat model returned HTTP {response.status_code}"
                    )
                async for line in response.aiter_lines():
                    chunk = _parse_sse_line(line)
                    if chunk is None:
                        break
                    if chunk:
                        yield chunk
        except httpx.TimeoutException as e:
            self._probe.request_timed_out(operation="chat", timeout_seconds=self._timeout)
            raise AnalyzerTimeoutError(
                f"Chat model timed out after {self._timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            self._probe.request_failed(operation="chat", error=str(e))
            raise AnalyzerError(f"Chat model request failed: {e}") from e


def _parse_sse_line(line: str) -> str | None:
    """Text delta carried by one SSE line.

    Returns None at the end-of-stream marker and an empty string for lines
    without text.
    """
    if not line.startswith("data:"):
        return ""
    data = line[len("data:") :].strip()
    if data == "[DONE]":
        return None
    try:
        event = json.loads(data)
        return event["choices"][0].get("delta", {}).get("content") or ""
    except (json.JSONDecodeError, KeyError, IndexError, AttributeError, TypeError):
        return ""

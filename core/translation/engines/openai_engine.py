"""
OpenAI Translation Engine: chat completions over httpx.

Works with api.openai.com and any OpenAI-compatible endpoint.
"""

import logging
from typing import Optional

import httpx

from .base import TranslationEngine, TranslationResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional native translator.\n"
    "Translate the following {source} text into {target} using native-level, "
    "idiomatic structures typical of the {target} language. Do not mirror the "
    "sentence structure or punctuation of the source. However, you must preserve "
    "every meaning in the original {source} text with full precision. Do not add, "
    "omit, generalize, or invent anything. The final result must read as if it "
    "were originally written in the {target} language: fluid, accurate, and "
    "professional."
)


class OpenAIEngine(TranslationEngine):
    """
    Translation engine backed by an OpenAI chat model.

    The response content is returned as the translation, unmodified
    apart from surrounding whitespace.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        temperature: float = 1.0,
        max_completion_tokens: int = 15000,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout)
        self.temperature = temperature
        self.max_completion_tokens = max_completion_tokens
        self._client = client

    @property
    def engine_id(self) -> str:
        return f"openai_{self.model}"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        return self._client

    def is_available(self) -> bool:
        return bool(self.api_key)

    def build_messages(self, text: str, source_lang: str, target_lang: str) -> list:
        return [
            {
                "role": "system",
                "content": SYSTEM_PROMPT.format(source=source_lang, target=target_lang),
            },
            {"role": "user", "content": text},
        ]

    def _failure(self, source_lang: str, target_lang: str, error: str) -> TranslationResult:
        return TranslationResult(
            translated_text="",
            source_lang=source_lang,
            target_lang=target_lang,
            engine=self.engine_id,
            success=False,
            error=error,
        )

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        **kwargs,
    ) -> TranslationResult:
        if not self.is_available():
            return self._failure(source_lang, target_lang, "OpenAI API key not configured")

        try:
            resp = await self.client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "messages": self.build_messages(text, source_lang, target_lang),
                    "response_format": {"type": "text"},
                    "temperature": self.temperature,
                    "max_completion_tokens": self.max_completion_tokens,
                },
            )
        except httpx.TimeoutException:
            return self._failure(source_lang, target_lang, "Translation timeout")
        except httpx.TransportError as e:
            return self._failure(source_lang, target_lang, f"Connection error: {e}")

        if resp.status_code != 200:
            return self._failure(
                source_lang, target_lang, f"Server error: {resp.status_code} {resp.text[:200]}"
            )

        try:
            data = resp.json()
            translated = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            return self._failure(source_lang, target_lang, f"Malformed response: {e}")

        if not translated:
            return self._failure(source_lang, target_lang, "Empty translation")

        usage = data.get("usage", {})
        return TranslationResult(
            translated_text=translated.strip(),
            source_lang=source_lang,
            target_lang=target_lang,
            engine=self.engine_id,
            success=True,
            tokens_used=usage.get("total_tokens", 0),
            metadata={
                "model": self.model,
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
            },
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

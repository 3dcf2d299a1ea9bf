"""
Translation Client
负责调用 LLM 翻译单篇文章 (Anthropic Messages API / OpenAI-compatible endpoint)。
Each backend is a callable `translate(content, locale) -> str` raising TranslationError.
"""

import logging
import re
from collections.abc import Callable

import requests
from openai import APIStatusError, OpenAI, OpenAIError

from config import (
    ANTHROPIC_API_KEY,
    ANTHROPIC_API_URL,
    ANTHROPIC_VERSION,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
    REQUEST_TIMEOUT_SECONDS,
    TRANSLATE_MAX_TOKENS,
    TRANSLATE_MODEL,
    TRANSLATION_PROVIDER,
    LocaleConfig,
)
from translator.models import TranslationError
from translator.translation.prompts import build_translation_prompt

logger = logging.getLogger(__name__)

Translator = Callable[[str, LocaleConfig], str]

_RE_LEADING_FENCE = re.compile(r"^```[\w+.]*[ \t]*\n?")
_RE_TRAILING_FENCE = re.compile(r"\n?```\s*$")
_ERROR_BODY_LIMIT = 500


def strip_code_fences(text: str) -> str:
    """
    Remove an accidental ```markdown ... ``` wrapper around the whole document.
    Only applies when the text starts with a fence; one leading and one trailing fence line are removed.
    """
    if not text.startswith("```"):
        return text
    text = _RE_LEADING_FENCE.sub("", text, count=1)
    return _RE_TRAILING_FENCE.sub("", text, count=1)


class AnthropicTranslator:
    """Anthropic Messages API backend over plain HTTP."""

    def __init__(
        self,
        api_key: str,
        model: str = TRANSLATE_MODEL,
        max_tokens: int = TRANSLATE_MAX_TOKENS,
        api_url: str = ANTHROPIC_API_URL,
        api_version: str = ANTHROPIC_VERSION,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY is not set.")
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.api_url = api_url
        self.api_version = api_version
        self.timeout = timeout

    def __call__(self, content: str, locale: LocaleConfig) -> str:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "user", "content": build_translation_prompt(content, locale)},
            ],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

        try:
            response = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TranslationError(f"Claude API request failed: {exc}") from exc

        if not response.ok:
            body = response.text
            raise TranslationError(
                f"Claude API error {response.status_code}: {body[:_ERROR_BODY_LIMIT]}",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TranslationError(
                "Claude API returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        text = _first_text_block(data)
        if text is None:
            raise TranslationError(
                "Claude API response has no text content",
                status_code=response.status_code,
                body=response.text,
            )

        stop_reason = data.get("stop_reason")
        if stop_reason == "max_tokens":
            logger.warning("[TRANSLATE] %s output hit max_tokens=%s, result may be truncated", locale.code, self.max_tokens)

        return strip_code_fences(text)


def _first_text_block(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    blocks = data.get("content")
    if not isinstance(blocks, list) or not blocks:
        return None
    first = blocks[0]
    if not isinstance(first, dict):
        return None
    text = first.get("text")
    return text if isinstance(text, str) else None


class OpenAICompatibleTranslator:
    """Backend for any OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = OPENAI_MODEL,
        base_url: str | None = OPENAI_BASE_URL,
        max_tokens: int = TRANSLATE_MAX_TOKENS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        client: OpenAI | None = None,
    ):
        if client is None:
            if not api_key:
                raise ValueError("OPENAI_API_KEY is not set.")
            # No SDK retries: a failed locale is retried by the next run.
            client = OpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=timeout)
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def __call__(self, content: str, locale: LocaleConfig) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_translation_prompt(content, locale)}],
                max_tokens=self.max_tokens,
            )
        except APIStatusError as exc:
            body = exc.response.text if exc.response is not None else str(exc)
            raise TranslationError(
                f"OpenAI API error {exc.status_code}: {body[:_ERROR_BODY_LIMIT]}",
                status_code=exc.status_code,
                body=body,
            ) from exc
        except OpenAIError as exc:
            raise TranslationError(f"OpenAI API request failed: {exc}") from exc

        if not response.choices:
            raise TranslationError("OpenAI API response has no choices")
        choice = response.choices[0]
        text = choice.message.content
        if not isinstance(text, str) or not text:
            raise TranslationError(
                f"OpenAI API response has no text content (finish_reason={choice.finish_reason})"
            )
        if choice.finish_reason == "length":
            logger.warning("[TRANSLATE] %s output hit max_tokens=%s, result may be truncated", locale.code, self.max_tokens)

        return strip_code_fences(text)


def build_translator(provider: str = TRANSLATION_PROVIDER) -> Translator:
    """Create the backend selected by TRANSLATION_PROVIDER."""
    if provider == "anthropic":
        return AnthropicTranslator(api_key=ANTHROPIC_API_KEY)
    if provider == "openai":
        return OpenAICompatibleTranslator(api_key=OPENAI_API_KEY)
    raise ValueError(f"Unknown translation provider: {provider}")

"""Central configuration for the missing-translation batch translator."""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


# --- API Config ---
# Priority: explicit TRANSLATION_PROVIDER, otherwise Anthropic Messages API
TRANSLATION_PROVIDER = os.getenv("TRANSLATION_PROVIDER", "anthropic").lower()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_API_URL = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_VERSION = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
TRANSLATE_MODEL = os.getenv("TRANSLATE_MODEL", "claude-sonnet-4-20250514")

# OpenAI-compatible endpoint (OpenAI, NVIDIA NIM, local Ollama ...)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

_max_tokens = os.getenv("TRANSLATE_MAX_TOKENS")
TRANSLATE_MAX_TOKENS = int(_max_tokens) if _max_tokens else 8192

_timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
REQUEST_TIMEOUT_SECONDS = float(_timeout) if _timeout else 300.0

# --- Pipeline Config ---
# 8000 input tokens/min on the default tier: one article per minute plus headroom
_delay = os.getenv("RATE_LIMIT_DELAY_SECONDS")
RATE_LIMIT_DELAY_SECONDS = float(_delay) if _delay else 65.0

ARTICLES_DIR = os.getenv("ARTICLES_DIR", os.path.join(os.getcwd(), "articles"))

SUPPORTED_PROVIDERS = ("anthropic", "openai")


# --- Target Locale Definitions ---
@dataclass(frozen=True)
class LocaleConfig:
    code: str  # directory name under ARTICLES_DIR, e.g. "ja"
    name: str  # display name, e.g. "Japanese"
    instructions: str  # free-text guidance embedded in the prompt


LOCALES: tuple[LocaleConfig, ...] = (
    LocaleConfig(
        code="en",
        name="English",
        instructions=(
            "Translate to natural, professional English.\n"
            "Preserve theological terms accurately (Logos, Sarx, incarnation).\n"
            "Keep technical terms precise.\n"
            "Maintain the author's intellectual voice: thoughtful, direct, with philosophical depth.\n"
            "Do NOT translate proper nouns: Paul Kuo, CircleFlow, AppWorks, SDTI, etc."
        ),
    ),
    LocaleConfig(
        code="ja",
        name="Japanese",
        instructions=(
            "自然で知的な日本語に翻訳してください。\n"
            "神学用語（ロゴス、サルクス、受肉）は正確に。\n"
            "技術用語は適切なカタカナまたは漢字を使用。\n"
            "文体は「だ・である」調で。\n"
            "著者の知的で歯切れの良い語り口を維持してください。"
        ),
    ),
    LocaleConfig(
        code="zh-cn",
        name="Simplified Chinese",
        instructions=(
            "转换为简体中文。注意繁体到简体的字符转换。\n"
            "保持原文的思想深度和知识分子语气。\n"
            "神学术语保持准确。\n"
            "不要大幅改变句式结构，主要做字符层面的繁简转换和必要的用语调整"
            "（如：軟體→软件、網路→网络、品質→质量等台湾用语转为大陆用语）。"
        ),
    ),
)


def validate_config() -> tuple[bool, list[str]]:
    """Check that the active provider has the settings it needs."""
    errors: list[str] = []

    if TRANSLATION_PROVIDER not in SUPPORTED_PROVIDERS:
        errors.append(
            f"TRANSLATION_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)} "
            f"(got '{TRANSLATION_PROVIDER}')"
        )
    elif TRANSLATION_PROVIDER == "anthropic" and not ANTHROPIC_API_KEY:
        errors.append("ANTHROPIC_API_KEY not set")
    elif TRANSLATION_PROVIDER == "openai" and not OPENAI_API_KEY:
        errors.append("OPENAI_API_KEY not set")

    if TRANSLATE_MAX_TOKENS <= 0:
        errors.append("TRANSLATE_MAX_TOKENS must be positive")
    if RATE_LIMIT_DELAY_SECONDS < 0:
        errors.append("RATE_LIMIT_DELAY_SECONDS must not be negative")

    return not errors, errors

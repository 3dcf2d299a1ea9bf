"""
Translation Runner
顺序翻译缺失的 (文章, 语言) 组合，并在两次 API 调用之间固定等待以遵守速率限制。
"""

import logging
import os
import tempfile
import time
from collections.abc import Callable, Sequence

from config import LocaleConfig
from translator.models import GapReport, LocaleFailure, RunResult, TranslationError
from translator.translation.client import Translator
from translator.translation.frontmatter import check_translation_frontmatter

logger = logging.getLogger(__name__)


def _read_source(articles_dir: str, slug: str) -> str:
    with open(os.path.join(articles_dir, f"{slug}.md"), "r", encoding="utf-8") as handle:
        return handle.read()


def _write_translation(path: str, text: str) -> None:
    """Write to a temp file beside `path` and rename it, so a failed write leaves no `<slug>.md` behind."""
    handle = tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=os.path.dirname(path), suffix=".tmp", delete=False
    )
    try:
        with handle:
            handle.write(text)
        os.replace(handle.name, path)
    except BaseException:
        if os.path.exists(handle.name):
            os.unlink(handle.name)
        raise


def run_translations(
    report: GapReport,
    articles_dir: str,
    locales: Sequence[LocaleConfig],
    translate: Translator,
    delay_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """
    Translate every missing (slug, locale) pair in `report`.

    Articles run in sorted slug order, locales in declared order. A failed locale is
    recorded and skipped; an unreadable source file aborts the whole run.
    `sleep(delay_seconds)` is called after each attempt except the last one.
    """
    started = time.perf_counter()
    result = RunResult()
    slugs = report.slugs_to_process()
    remaining_attempts = sum(
        1 for slug in slugs for locale in locales if report.is_missing(locale.code, slug)
    )

    logger.info("[TRANSLATE] Translating %s article(s), %s call(s)", len(slugs), remaining_attempts)

    for index, slug in enumerate(slugs, start=1):
        content = _read_source(articles_dir, slug)
        logger.info("[TRANSLATE] [%s/%s] %s", index, len(slugs), slug)

        for locale in locales:
            if not report.is_missing(locale.code, slug):
                logger.info("[TRANSLATE]   %s: already exists", locale.name)
                result.skipped += 1
                continue

            out_dir = os.path.join(articles_dir, locale.code)
            out_file = os.path.join(out_dir, f"{slug}.md")
            logger.info("[TRANSLATE]   -> %s...", locale.name)
            result.attempted += 1
            remaining_attempts -= 1

            try:
                os.makedirs(out_dir, exist_ok=True)
                translated = translate(content, locale)
                _write_translation(out_file, translated)
            except Exception as exc:
                status_code = exc.status_code if isinstance(exc, TranslationError) else None
                result.failures.append(
                    LocaleFailure(slug=slug, locale=locale.code, message=str(exc), status_code=status_code)
                )
                logger.error("[TRANSLATE]   ❌ %s failed: %s", locale.name, exc)
            else:
                result.succeeded += 1
                logger.info("[TRANSLATE]   ✅ %s", locale.name)
                for issue in check_translation_frontmatter(content, translated):
                    logger.warning("[FRONTMATTER] %s/%s.md: %s", locale.code, slug, issue)

            if remaining_attempts > 0 and delay_seconds > 0:
                logger.info("[RATE]   Waiting %ss for rate limit...", f"{delay_seconds:g}")
                sleep(delay_seconds)

        result.processed += 1

    result.duration_seconds = round(time.perf_counter() - started, 3)
    return result

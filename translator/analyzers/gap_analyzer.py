"""
Gap Analyzer
Finds which (article, locale) pairs still lack a translated Markdown file.
"""

import logging
import os
from collections.abc import Iterable

from config import LocaleConfig
from translator.models import GapReport

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


def list_slugs(directory: str) -> list[str]:
    """Return the stems of the Markdown files directly inside `directory`, in listing order."""
    slugs: list[str] = []
    for entry in os.listdir(directory):
        if not entry.endswith(MARKDOWN_SUFFIX):
            continue
        if not os.path.isfile(os.path.join(directory, entry)):
            continue
        slugs.append(entry[: -len(MARKDOWN_SUFFIX)])
    return slugs


def _existing_slugs(locale_dir: str) -> set[str]:
    # A locale that was never translated has no directory yet.
    if not os.path.isdir(locale_dir):
        return set()
    return set(list_slugs(locale_dir))


def find_missing_translations(
    articles_dir: str,
    locales: Iterable[LocaleConfig],
    slug_filter: str | None = None,
) -> GapReport:
    """
    Compute, for every locale, the source slugs that have no `<code>/<slug>.md` file.

    With `slug_filter`, every other slug is treated as not needing translation.
    Raises FileNotFoundError if `articles_dir` itself does not exist.
    """
    source_slugs = list_slugs(articles_dir)
    missing: dict[str, list[str]] = {}

    for locale in locales:
        existing = _existing_slugs(os.path.join(articles_dir, locale.code))
        missing[locale.code] = [
            slug
            for slug in source_slugs
            if (slug_filter is None or slug == slug_filter) and slug not in existing
        ]
        logger.debug("[GAP] %s: %s existing, %s missing", locale.code, len(existing), len(missing[locale.code]))

    if slug_filter is not None and slug_filter not in source_slugs:
        logger.warning("[GAP] No source article named '%s%s'", slug_filter, MARKDOWN_SUFFIX)

    return GapReport(source_slugs=source_slugs, missing=missing, slug_filter=slug_filter)

from __future__ import annotations

from pathlib import Path

import pytest

from config import LocaleConfig
from translator.analyzers.gap_analyzer import find_missing_translations
from translator.models import TranslationError
from translator.runner import run_translations

EN = LocaleConfig(code="en", name="English", instructions="en")
JA = LocaleConfig(code="ja", name="Japanese", instructions="ja")
LOCALES = (EN, JA)

SOURCE = """---
title: 原文標題
description: 原文描述
date: 2025-01-15
pillar: faith
tags: ["神學", "科技"]
readingTime: 8
---

# 標題

內容
"""


def _translated(locale: LocaleConfig) -> str:
    return SOURCE.replace("title: 原文標題", f'title: "Title {locale.code}"').replace(
        "description: 原文描述", f'description: "Description {locale.code}"'
    )


class FakeTranslator:
    def __init__(self, fail: set[tuple[str, str]] | None = None):
        self.calls: list[tuple[str, str]] = []
        self.fail = fail or set()

    def __call__(self, content: str, locale: LocaleConfig) -> str:
        slug = "a" if "slug: a" in content else "b"
        self.calls.append((slug, locale.code))
        if (slug, locale.code) in self.fail:
            raise TranslationError("Claude API error 500: boom", status_code=500, body="boom")
        return _translated(locale)


@pytest.fixture
def articles(tmp_path: Path) -> Path:
    root = tmp_path / "articles"
    (root / "en").mkdir(parents=True)
    (root / "a.md").write_text(SOURCE.replace("readingTime: 8", "readingTime: 8\nslug: a"), encoding="utf-8")
    (root / "b.md").write_text(SOURCE.replace("readingTime: 8", "readingTime: 8\nslug: b"), encoding="utf-8")
    (root / "en" / "a.md").write_text("existing", encoding="utf-8")
    return root


def test_runs_missing_pairs_in_sorted_order_and_skips_existing(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    translator = FakeTranslator()
    sleeps: list[float] = []

    result = run_translations(report, str(articles), LOCALES, translator, 65, sleep=sleeps.append)

    assert translator.calls == [("a", "ja"), ("b", "en"), ("b", "ja")]
    assert (articles / "en" / "a.md").read_text(encoding="utf-8") == "existing"
    assert (articles / "ja" / "a.md").exists()
    assert (articles / "en" / "b.md").read_text(encoding="utf-8") == _translated(EN)
    assert result.processed == 2
    assert result.succeeded == 3
    assert result.skipped == 1
    assert result.failed == 0


def test_delay_follows_every_attempt_except_the_last(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    sleeps: list[float] = []

    run_translations(report, str(articles), LOCALES, FakeTranslator(), 65, sleep=sleeps.append)

    assert sleeps == [65, 65]


def test_single_attempt_never_sleeps(articles: Path):
    report = find_missing_translations(str(articles), LOCALES, slug_filter="a")
    sleeps: list[float] = []

    result = run_translations(report, str(articles), LOCALES, FakeTranslator(), 65, sleep=sleeps.append)

    assert result.attempted == 1
    assert sleeps == []


def test_locale_failure_is_counted_and_processing_continues(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    translator = FakeTranslator(fail={("b", "ja")})
    sleeps: list[float] = []

    result = run_translations(report, str(articles), LOCALES, translator, 65, sleep=sleeps.append)

    assert result.failed == 1
    assert result.failures[0].slug == "b"
    assert result.failures[0].locale == "ja"
    assert result.failures[0].status_code == 500
    assert not (articles / "ja" / "b.md").exists()
    assert (articles / "en" / "b.md").exists()
    assert result.processed == 2
    # A failed attempt still waits before the next call.
    assert sleeps == [65, 65]


def test_failure_in_the_middle_still_delays_next_call(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    translator = FakeTranslator(fail={("a", "ja")})
    sleeps: list[float] = []

    result = run_translations(report, str(articles), LOCALES, translator, 30, sleep=sleeps.append)

    assert translator.calls == [("a", "ja"), ("b", "en"), ("b", "ja")]
    assert result.failed == 1
    assert sleeps == [30, 30]


def test_write_error_is_a_locale_failure(articles: Path, monkeypatch):
    import translator.runner as runner

    def broken_write(path: str, text: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(runner, "_write_translation", broken_write)
    report = find_missing_translations(str(articles), LOCALES, slug_filter="b")

    result = run_translations(report, str(articles), LOCALES, FakeTranslator(), 0, sleep=lambda s: None)

    assert result.failed == 2
    assert result.failures[0].status_code is None
    assert "disk full" in result.failures[0].message


def test_unreadable_source_aborts_the_run(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    (articles / "a.md").unlink()
    translator = FakeTranslator()

    with pytest.raises(FileNotFoundError):
        run_translations(report, str(articles), LOCALES, translator, 0, sleep=lambda s: None)
    assert translator.calls == []


def test_second_run_finds_nothing_to_do(articles: Path):
    report = find_missing_translations(str(articles), LOCALES)
    run_translations(report, str(articles), LOCALES, FakeTranslator(), 0, sleep=lambda s: None)

    second = find_missing_translations(str(articles), LOCALES)
    assert second.total_missing == 0

    translator = FakeTranslator()
    result = run_translations(second, str(articles), LOCALES, translator, 0, sleep=lambda s: None)
    assert translator.calls == []
    assert result.processed == 0


def test_frontmatter_drift_is_logged_not_fatal(articles: Path, caplog):
    def drifting(content: str, locale: LocaleConfig) -> str:
        return _translated(locale).replace("date: 2025-01-15", "date: 2025-01-16")

    report = find_missing_translations(str(articles), LOCALES, slug_filter="a")
    with caplog.at_level("WARNING"):
        result = run_translations(report, str(articles), LOCALES, drifting, 0, sleep=lambda s: None)

    assert result.succeeded == 1
    assert "date changed" in caplog.text


def test_failed_write_leaves_pair_missing_for_next_run(articles: Path):
    def unencodable(content: str, locale: LocaleConfig) -> str:
        return '---\ntitle: "\ud800"\n---\n'

    report = find_missing_translations(str(articles), LOCALES, slug_filter="b")
    result = run_translations(report, str(articles), (JA,), unencodable, 0, sleep=lambda s: None)

    assert result.failed == 1
    assert not (articles / "ja" / "b.md").exists()
    assert list((articles / "ja").iterdir()) == []

    second = find_missing_translations(str(articles), (JA,), slug_filter="b")
    assert second.missing == {"ja": ["b"]}


def test_successful_write_leaves_no_temp_files(articles: Path):
    report = find_missing_translations(str(articles), LOCALES, slug_filter="a")
    run_translations(report, str(articles), LOCALES, FakeTranslator(), 0, sleep=lambda s: None)

    assert [p.name for p in (articles / "ja").iterdir()] == ["a.md"]

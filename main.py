#!/usr/bin/env python3
"""主流程控制器: 差异分析 -> 翻译 -> 写入 (Gap analysis -> Translate -> Write)."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import traceback
from collections.abc import Callable

from config import ARTICLES_DIR, LOCALES, RATE_LIMIT_DELAY_SECONDS, TRANSLATION_PROVIDER, validate_config
from translator.analyzers.gap_analyzer import find_missing_translations
from translator.models import GapReport
from translator.runner import run_translations
from translator.translation.client import Translator, build_translator

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """
    简单的 JSON 日志格式化器 (Simple JSON Log Formatter)
    用于生成机器可读的运行日志。
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(log_format: str) -> None:
    """配置日志系统 (Configure Logging)"""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数 (Parse Command Line Arguments)"""
    parser = argparse.ArgumentParser(
        description="Translate articles that are missing in one or more target locales"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="只列出缺少的翻译，不调用 API、不写文件 (List missing translations only)",
    )
    parser.add_argument(
        "--slug",
        default=None,
        help="只翻译指定文章 (Restrict the run to one article slug)",
    )
    parser.add_argument(
        "--articles-dir",
        default=ARTICLES_DIR,
        help="源文章目录，语言子目录位于其下 (default: ./articles)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=RATE_LIMIT_DELAY_SECONDS,
        help="两次 API 调用之间的等待秒数 (Default: 65)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任一语言翻译失败即返回非零退出码 (Exit 1 on any locale failure)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="日志格式 (text|json)",
    )
    return parser.parse_args(argv)


def _log_gap_report(report: GapReport) -> None:
    logger.info("[GAP] Translation gap analysis:")
    logger.info("[GAP]   Total articles: %s", len(report.source_slugs))
    if report.slug_filter is not None:
        logger.info("[GAP]   Slug filter: %s (other articles are not checked)", report.slug_filter)
    for locale in LOCALES:
        logger.info(
            "[GAP]   %s (%s): missing %s translations",
            locale.name,
            locale.code,
            len(report.missing.get(locale.code, [])),
        )
    logger.info("[GAP]   Total translations needed: %s", report.total_missing)


def render_missing_list(report: GapReport) -> str:
    """Human-readable list of missing translations for --dry-run."""
    lines = ["Missing translations:"]
    for locale in LOCALES:
        slugs = report.missing.get(locale.code, [])
        if not slugs:
            continue
        lines.append("")
        lines.append(f"  {locale.name}:")
        lines.extend(f"    - {slug}" for slug in slugs)
    lines.append("")
    lines.append("(dry run - no translations performed)")
    return "\n".join(lines)


def run(
    args: argparse.Namespace,
    translate: Translator | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    执行一次完整运行 (Execute one run)

    Steps:
    1. Gap analysis (差异分析)
    2. Translate missing pairs (翻译)
    Returns the process exit status.
    """
    report = find_missing_translations(args.articles_dir, LOCALES, slug_filter=args.slug or None)
    _log_gap_report(report)

    if args.dry_run:
        print("\n" + render_missing_list(report))
        return 0

    if report.total_missing == 0:
        logger.info("✅ All translations are up to date!")
        return 0

    if translate is None:
        translate = build_translator(TRANSLATION_PROVIDER)

    result = run_translations(
        report,
        args.articles_dir,
        LOCALES,
        translate,
        delay_seconds=args.delay,
        sleep=sleep,
    )

    logger.info(
        "[SUMMARY] Done! %s articles processed, %s failures. (written=%s duration=%.2fs)",
        result.processed,
        result.failed,
        result.succeeded,
        result.duration_seconds,
    )
    for failure in result.failures:
        logger.info("[SUMMARY]   failed: %s/%s.md | %s", failure.locale, failure.slug, failure.message)

    return 1 if args.strict and result.failed else 0


def main(argv: list[str] | None = None) -> int:
    """程序入口点：解析参数，校验配置，运行翻译，处理异常。"""
    args = parse_args(argv)
    configure_logging(args.log_format)

    valid, config_errors = validate_config()
    if not valid:
        for item in config_errors:
            logger.error("❌ %s", item)
        return 1

    try:
        return run(args)
    except Exception as exc:
        logger.critical("Fatal error: %s", exc)
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Data models shared by the gap analyzer, the runner and the CLI."""

from dataclasses import dataclass, field


class TranslationError(Exception):
    """
    Raised when a translation backend cannot produce a document.
    Carries the HTTP status code and the response body when the remote side answered.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass
class GapReport:
    """
    Missing translations per locale, recomputed on every run.
    Lists keep directory-listing order.
    """
    source_slugs: list[str]                # all source articles found
    missing: dict[str, list[str]]          # locale code -> slugs without a translation
    slug_filter: str | None = None         # single-article restriction, if any

    @property
    def total_missing(self) -> int:
        return sum(len(slugs) for slugs in self.missing.values())

    def is_missing(self, locale_code: str, slug: str) -> bool:
        return slug in self.missing.get(locale_code, ())

    def slugs_to_process(self) -> list[str]:
        """Unique slugs missing in at least one locale, sorted for a reproducible run order."""
        return sorted({slug for slugs in self.missing.values() for slug in slugs})


@dataclass
class LocaleFailure:
    slug: str
    locale: str
    message: str
    status_code: int | None = None


@dataclass
class RunResult:
    """Counters reported at the end of a translation run."""
    processed: int = 0          # articles attempted, whatever the per-locale outcome
    attempted: int = 0          # translation calls issued
    succeeded: int = 0          # artifacts written
    skipped: int = 0            # (article, locale) pairs that already existed
    duration_seconds: float = 0.0
    failures: list[LocaleFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

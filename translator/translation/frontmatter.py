"""
Frontmatter helpers.
Used after a translation is written to check that metadata survived the round trip.
"""

import re

from translator.translation.prompts import PRESERVED_FIELDS, TRANSLATED_FIELDS

FRONTMATTER_DELIMITER = "---"
_RE_FIELD = re.compile(r"^(\w[\w-]*)\s*:\s*(.*)$")


def parse_frontmatter(text: str) -> dict[str, str] | None:
    """
    Return the raw `key: value` pairs of the leading frontmatter block.
    Values are kept exactly as written (quotes included). Indented continuation lines,
    such as block-style list items, are folded into the preceding key's value.
    None if there is no closed block.
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None

    fields: dict[str, str] = {}
    current: str | None = None
    for line in lines[1:]:
        if line.strip() == FRONTMATTER_DELIMITER:
            return fields
        match = _RE_FIELD.match(line)
        if match:
            current = match.group(1)
            fields[current] = match.group(2).rstrip()
        elif current is not None and line.strip() and (line[0].isspace() or line.startswith("- ")):
            fields[current] = f"{fields[current]}\n{line.rstrip()}" if fields[current] else line.rstrip()
    return None


def _is_double_quoted(value: str) -> bool:
    return len(value) >= 2 and value.startswith('"') and value.endswith('"')


def _unquoted(value: str) -> str:
    return value[1:-1] if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'" else value


def check_translation_frontmatter(source: str, translated: str) -> list[str]:
    """List the ways `translated` breaks the frontmatter rules relative to `source`."""
    source_fm = parse_frontmatter(source)
    if source_fm is None:
        return []

    translated_fm = parse_frontmatter(translated)
    if translated_fm is None:
        return ["frontmatter block missing or not closed"]

    issues: list[str] = []
    for key in PRESERVED_FIELDS:
        if key not in source_fm:
            continue
        if key not in translated_fm:
            issues.append(f"{key} missing")
        elif translated_fm[key] != source_fm[key]:
            issues.append(f"{key} changed: {source_fm[key]!r} -> {translated_fm[key]!r}")

    for key in TRANSLATED_FIELDS:
        if key not in translated_fm:
            continue
        if not _is_double_quoted(translated_fm[key]):
            issues.append(f"{key} is not wrapped in double quotes")
        if key in source_fm and _unquoted(translated_fm[key]) == _unquoted(source_fm[key]):
            issues.append(f"{key} unchanged from source")

    return issues

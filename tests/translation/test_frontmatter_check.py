from translator.translation.frontmatter import check_translation_frontmatter, parse_frontmatter

SOURCE = """---
title: 信仰的崩塌與重建
description: 一篇關於信仰的文章
date: 2025-01-15
pillar: faith
tags: ["神學", "反思"]
readingTime: 8
---

## 前言
"""

GOOD = """---
title: "The Collapse and Rebuilding of Faith"
description: "An essay on faith"
date: 2025-01-15
pillar: faith
tags: ["神學", "反思"]
readingTime: 8
---

## Preface
"""


def test_parse_frontmatter_keeps_raw_values():
    fields = parse_frontmatter(GOOD)
    assert fields["title"] == '"The Collapse and Rebuilding of Faith"'
    assert fields["tags"] == '["神學", "反思"]'
    assert fields["readingTime"] == "8"


def test_parse_frontmatter_requires_closed_block():
    assert parse_frontmatter("# no frontmatter") is None
    assert parse_frontmatter("---\ntitle: x\n") is None


def test_good_translation_has_no_issues():
    assert check_translation_frontmatter(SOURCE, GOOD) == []


def test_changed_preserved_field_is_reported():
    bad = GOOD.replace("readingTime: 8", "readingTime: 9")
    issues = check_translation_frontmatter(SOURCE, bad)
    assert len(issues) == 1
    assert issues[0].startswith("readingTime changed")


def test_dropped_field_and_unquoted_title_are_reported():
    bad = GOOD.replace("pillar: faith\n", "").replace('title: "The Collapse and Rebuilding of Faith"', "title: Faith")
    issues = check_translation_frontmatter(SOURCE, bad)
    assert "pillar missing" in issues
    assert "title is not wrapped in double quotes" in issues


def test_missing_block_in_translation():
    assert check_translation_frontmatter(SOURCE, "## Preface") == ["frontmatter block missing or not closed"]


def test_source_without_frontmatter_is_not_checked():
    assert check_translation_frontmatter("plain body", "anything") == []


BLOCK_SOURCE = """---
title: 標題
tags:
  - 神學
  - 科技
date: 2025-01-15
---
"""


def test_block_style_list_items_are_compared():
    fields = parse_frontmatter(BLOCK_SOURCE)
    assert fields["tags"] == "  - 神學\n  - 科技"
    assert fields["date"] == "2025-01-15"

    drifted = BLOCK_SOURCE.replace("title: 標題", 'title: "Title"').replace("  - 科技", "  - Technology")
    issues = check_translation_frontmatter(BLOCK_SOURCE, drifted)
    assert len(issues) == 1
    assert issues[0].startswith("tags changed")


def test_untranslated_title_is_reported():
    untranslated = GOOD.replace('title: "The Collapse and Rebuilding of Faith"', 'title: "信仰的崩塌與重建"')
    issues = check_translation_frontmatter(SOURCE, untranslated)
    assert issues == ["title unchanged from source"]

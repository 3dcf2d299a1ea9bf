"""Prompt composition for article translation requests."""

from config import LocaleConfig

SITE_CONTEXT = (
    "You are translating a blog article for paulkuo.tw, a personal website by Paul Kuo (郭曜郎) "
    "about rebuilding order at the intersection of technology, theology, and civilization."
)

# Frontmatter fields the model must translate vs. copy exactly.
TRANSLATED_FIELDS = ("title", "description")
PRESERVED_FIELDS = ("date", "pillar", "tags", "readingTime")

CRITICAL_RULES = (
    f"Translate the ENTIRE article including frontmatter fields: {', '.join(TRANSLATED_FIELDS)}",
    f"Keep these frontmatter fields UNCHANGED: {', '.join(PRESERVED_FIELDS)} (copy them exactly)",
    "Keep all Markdown formatting intact (headings, bold, lists, horizontal rules)",
    "Keep URLs and proper nouns unchanged",
    "The frontmatter must remain valid YAML between --- delimiters",
    "Wrap translated title and description in double quotes in frontmatter",
    "Output ONLY the translated Markdown file content: no explanations, no code fences, no preamble",
)


def build_translation_prompt(content: str, locale: LocaleConfig) -> str:
    """Compose the single user message sent for one (article, locale) pair."""
    rules = "\n".join(f"{idx}. {rule}" for idx, rule in enumerate(CRITICAL_RULES, start=1))
    return (
        f"{SITE_CONTEXT}\n\n"
        f"{locale.instructions}\n\n"
        f"CRITICAL RULES:\n{rules}\n\n"
        f"Here is the article to translate:\n\n"
        f"{content}"
    )

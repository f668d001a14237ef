import re

_WHITESPACE_RE = re.compile(r"\s+")


def clean_md(text: str) -> str:
    """
    Sanitize markdown artifacts from text.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *)
    """
    if not text:
        return ""

    # Remove bolding (**text** -> text)
    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)

    # Remove leading headers (# Title -> Title)
    text = re.sub(r"^\s*#+\s+", "", text)

    # Remove leading bullets (- Item -> Item)
    text = re.sub(r"^\s*[-*]\s+", "", text)

    return text.strip()


def collapse_whitespace(text: str) -> str:
    """Runs of any whitespace become one space; ends are trimmed."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_prefix(text: str, max_chars: int) -> str:
    """Keep the first max_chars characters. Recipe content tends to come first on a page."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars]

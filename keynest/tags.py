"""Tag helpers for ``VaultEntry.tags``.

All functions return new lists; the input is never mutated.
"""
import re

_WHITESPACE = re.compile(r"\s+")


def normalise_tag(tag: str) -> str:
    return _WHITESPACE.sub(" ", tag.strip()).lower()


def has_tag(tags: list[str], tag: str) -> bool:
    wanted = tag.lower()
    return any(existing.lower() == wanted for existing in tags)


def add_tag(tags: list[str], raw: str) -> list[str]:
    tag = normalise_tag(raw)
    if not tag or has_tag(tags, tag):
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    target = normalise_tag(tag)
    return [t for t in tags if normalise_tag(t) != target]


def add_tags_from_input(tags: list[str], text: str) -> list[str]:
    """Add every comma-separated tag in ``text``."""
    result = list(tags)
    for part in text.split(","):
        result = add_tag(result, part)
    return result

"""Deterministic names and paths derived from requirement text."""

import posixpath
import re
from typing import Set


def slugify(text: str, max_words: int = 6) -> str:
    """Lowercase hyphenated slug from the first few words of text."""
    words = re.findall(r"[a-z0-9]+", text.lower())[:max_words]
    return "-".join(words) or "component"


def pascal_case(text: str, max_words: int = 4) -> str:
    """PascalCase identifier from the first few words of text."""
    words = re.findall(r"[A-Za-z0-9]+", text)[:max_words]
    name = "".join(word[:1].upper() + word[1:].lower() for word in words)
    if not name:
        return "Generated"
    if name[0].isdigit():
        name = "N" + name
    return name


def comment_safe(text: str) -> str:
    """Single-line text that cannot terminate a block comment."""
    return " ".join(text.split()).replace("*/", "* /")


def unique_path(path: str, taken: Set[str]) -> str:
    """Path not yet in taken, numbering the stem from -2 upward on collision."""
    if path not in taken:
        return path
    stem, ext = posixpath.splitext(path)
    index = 2
    while f"{stem}-{index}{ext}" in taken:
        index += 1
    return f"{stem}-{index}{ext}"

"""Pick localised texts and reduce rich text to plain text."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup

FALLBACK_LANGUAGE = "en"

# Elements that break a line when rendered
BLOCK_TAGS = [
    "address", "blockquote", "br", "dd", "div", "dl", "dt", "h1", "h2", "h3",
    "h4", "h5", "h6", "hr", "li", "ol", "p", "pre", "table", "td", "th", "tr", "ul",
]

D = TypeVar("D")


def normalize_language(lang: Optional[str]) -> str:
    return (lang or "").strip().lower()


def desc_for(descs: Iterable[D], lang: Optional[str]) -> Optional[D]:
    """Description in the given language, if any. Codes match case-insensitively."""
    wanted = normalize_language(lang)
    if not wanted:
        return None
    for desc in descs or []:
        if normalize_language(getattr(desc, "lang", None)) == wanted:
            return desc
    return None


def resolve_desc(
    descs: Sequence[D], language: Optional[str], fallback: str = FALLBACK_LANGUAGE
) -> Optional[D]:
    """Requested language first, then ``fallback``, else None."""
    return desc_for(descs, language) or desc_for(descs, fallback)


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def html_to_text(text: Optional[str]) -> Optional[str]:
    """Strip tags and decode entities, collapsing whitespace.

    Text without markup is returned untouched.
    """
    if text is None or ("<" not in text and "&" not in text):
        return text
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_after(" ")
    return " ".join(soup.get_text().split())

import math
import re
import unicodedata

import bleach


MAX_SLUG_LENGTH = 100
WORDS_PER_MINUTE = 200

ALLOWED_TAGS = {
    "p", "br", "strong", "em", "u", "s", "h1", "h2", "h3", "h4", "h5", "h6",
    "blockquote", "ul", "ol", "li", "code", "pre", "a", "img", "span", "div",
    "hr", "figure", "figcaption",
}
ALLOWED_ATTRIBUTES = {
    "*": ["class", "id"],
    "a": ["href", "target", "rel", "title"],
    "img": ["src", "alt", "title", "width", "height"],
}
ALLOWED_PROTOCOLS = {"http", "https", "mailto"}

_html_cleaner = bleach.Cleaner(
    tags=ALLOWED_TAGS,
    attributes=ALLOWED_ATTRIBUTES,
    protocols=ALLOWED_PROTOCOLS,
    strip=True,
    strip_comments=True,
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def slugify(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Lowercase ASCII slug: accents folded, punctuation dropped, words joined by '-'."""
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^\w\s-]", "", ascii_text).strip().lower()
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_length].rstrip("-")


def sanitize_html(dirty: str) -> str:
    if not dirty:
        return ""
    return _html_cleaner.clean(dirty)


def sanitize_user_input(value: str, max_length: int = 10000) -> str:
    return _CONTROL_CHARS.sub("", value or "").strip()[:max_length]


def extract_text_from_json(node) -> str:
    """Concatenate every text node of an editor document tree."""
    if not isinstance(node, dict):
        return ""

    parts = []
    if node.get("text"):
        parts.append(str(node["text"]))

    children = node.get("content")
    if isinstance(children, list):
        parts.extend(extract_text_from_json(child) for child in children)

    return " ".join(part for part in parts if part)


def html_to_text(html: str) -> str:
    return bleach.clean(html or "", tags=set(), strip=True)


def calculate_reading_time(content) -> int:
    if isinstance(content, dict):
        text = extract_text_from_json(content)
    else:
        text = html_to_text(content or "")

    words = len(text.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))

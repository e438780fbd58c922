import re

import markdown

from app.utils.text import sanitize_html


DEFAULT_TITLE = "Imported Post"
EXCERPT_LENGTH = 200

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

_HEADING = re.compile(r"^(#{1,3})\s+(.*)$")
_BULLET = re.compile(r"^[-*]\s+(.*)$")


def render_markdown(text: str) -> str:
    html = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS).convert(text or "")
    return sanitize_html(html)


def extract_title(text: str) -> str:
    for line in (text or "").splitlines():
        match = _HEADING.match(line.strip())
        if match and len(match.group(1)) == 1 and match.group(2).strip():
            return match.group(2).strip()
    return DEFAULT_TITLE


def extract_excerpt(text: str) -> str:
    for line in (text or "").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            return line[:EXCERPT_LENGTH]
    return ""


def _text_node(text):
    return {"type": "text", "text": text}


def _paragraph(lines):
    return {"type": "paragraph", "content": [_text_node(" ".join(lines))]}


def markdown_to_document(text: str) -> dict:
    """Convert Markdown into an editor document of headings, bullet lists and paragraphs.

    Inline formatting is kept as plain text; the sanitized HTML rendering
    carries the full markup.
    """
    content = []
    paragraph = []
    bullets = []

    def flush():
        if paragraph:
            content.append(_paragraph(paragraph))
            paragraph.clear()
        if bullets:
            content.append({
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [_paragraph([item])]}
                    for item in bullets
                ],
            })
            bullets.clear()

    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            flush()
            continue

        heading = _HEADING.match(line)
        if heading:
            flush()
            content.append({
                "type": "heading",
                "attrs": {"level": len(heading.group(1))},
                "content": [_text_node(heading.group(2).strip())],
            })
            continue

        bullet = _BULLET.match(line)
        if bullet:
            if paragraph:
                content.append(_paragraph(paragraph))
                paragraph.clear()
            bullets.append(bullet.group(1).strip())
            continue

        if bullets:
            flush()
        paragraph.append(line)

    flush()
    return {"type": "doc", "content": content or [{"type": "paragraph"}]}

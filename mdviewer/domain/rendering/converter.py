"""
Markdown Converter

Pure functions turning markdown text into HTML and pulling titles out of
markdown and HTML sources. No state is kept between calls.
"""

import re
from typing import Optional

import markdown

MARKDOWN_EXTENSIONS = [
    "fenced_code",
    "tables",
    "codehilite",
    "nl2br",
    "sane_lists",
]

MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {
        "css_class": "highlight",
        "guess_lang": True,
    },
}

_MARKDOWN_H1 = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_HTML_TITLE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)


def render_markdown(text: str) -> str:
    """
    Convert GitHub-flavoured markdown to HTML.

    Fenced code blocks are syntax-highlighted with Pygments CSS classes and
    single newlines become <br> tags.
    """
    return markdown.markdown(
        text,
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
        output_format="html",
    )


def extract_markdown_title(text: str) -> Optional[str]:
    """Return the text of the first top-level heading, or None."""
    match = _MARKDOWN_H1.search(text)
    if not match:
        return None
    title = match.group(1).strip()
    return title or None


def extract_html_title(html: str) -> Optional[str]:
    """Return the contents of the first <title> tag, or None."""
    match = _HTML_TITLE.search(html)
    if not match:
        return None
    title = match.group(1).strip()
    return title or None

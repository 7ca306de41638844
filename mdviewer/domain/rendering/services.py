"""
Document Rendering Service

Turns downloaded file contents into the HTML and title that get stored.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Optional

from ..artifacts.value_objects import DocumentType
from .converter import extract_html_title, extract_markdown_title, render_markdown


@dataclass(frozen=True)
class RenderOutput:
    """HTML body and display title for one document."""

    html: str
    title: str


def title_from_filename(file_name: str) -> str:
    """Strip the extension from a file name, keeping the name if nothing is left."""
    stem = PurePosixPath(file_name).stem
    return stem or file_name


class DocumentRenderer:
    """
    Domain service for rendering shared documents.

    Markdown goes through the converter and is titled by its first top-level
    heading. HTML is passed through unmodified and titled by its <title> tag.
    Both fall back to the file name without its extension.
    """

    def __init__(
        self,
        markdown_renderer: Callable[[str], str] = render_markdown,
    ):
        self.markdown_renderer = markdown_renderer

    def render(self, file_name: str, file_type: DocumentType, raw: str) -> RenderOutput:
        """
        Render raw file contents.

        Args:
            file_name: Original file name, used for the title fallback
            file_type: Detected document type
            raw: Decoded file contents

        Returns:
            RenderOutput with html and title
        """
        title: Optional[str]
        if file_type is DocumentType.MARKDOWN:
            html = self.markdown_renderer(raw)
            title = extract_markdown_title(raw)
        else:
            html = raw
            title = extract_html_title(raw)

        return RenderOutput(html=html, title=title or title_from_filename(file_name))

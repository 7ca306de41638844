"""
Rendering Domain

Markdown-to-HTML conversion and title extraction.
"""

from .converter import extract_html_title, extract_markdown_title, render_markdown
from .services import DocumentRenderer, RenderOutput, title_from_filename

__all__ = [
    'DocumentRenderer',
    'RenderOutput',
    'extract_html_title',
    'extract_markdown_title',
    'render_markdown',
    'title_from_filename',
]

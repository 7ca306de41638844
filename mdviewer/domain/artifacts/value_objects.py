"""
Artifact Value Objects

Immutable value objects for document types and artifact identifiers.
"""

import secrets
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

ARTIFACT_ID_BYTES = 8


class DocumentType(Enum):
    """
    Supported shared-file variants.

    MARKDOWN is markup source that goes through the converter; HTML is a
    prebuilt page stored as-is.
    """

    MARKDOWN = "markdown"
    HTML = "html"

    @property
    def extensions(self) -> tuple[str, ...]:
        return _EXTENSIONS[self]

    @classmethod
    def from_filename(cls, filename: Optional[str]) -> Optional["DocumentType"]:
        """
        Detect the document type from a file name.

        Args:
            filename: Name of the shared file

        Returns:
            Matching DocumentType, or None if the extension is not supported
        """
        if not filename:
            return None

        suffix = PurePosixPath(filename).suffix.lower()
        for doc_type, extensions in _EXTENSIONS.items():
            if suffix in extensions:
                return doc_type
        return None


_EXTENSIONS = {
    DocumentType.MARKDOWN: (".md", ".markdown"),
    DocumentType.HTML: (".html", ".htm"),
}


def generate_artifact_id() -> str:
    """
    Generate a new artifact identifier.

    Returns:
        16 hex characters from 8 cryptographically random bytes
    """
    return secrets.token_hex(ARTIFACT_ID_BYTES)


def is_valid_artifact_id(value: str) -> bool:
    """Check that a value has the shape of a generated artifact id."""
    if not value or len(value) != ARTIFACT_ID_BYTES * 2:
        return False
    return all(c in "0123456789abcdef" for c in value)

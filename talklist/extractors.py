"""Frontmatter extraction for talklist.

Content files may begin with a YAML block between ``---`` markers. The block
is parsed with PyYAML and becomes a record's metadata; the rest of the file is
the body.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)", re.DOTALL | re.MULTILINE
)


class ContentError(ValueError):
    """Raised when a content file cannot be turned into a record.

    Attributes:
        source_path: File that failed to load.
        message: Human-readable description of the problem.
    """

    def __init__(self, source_path: Path | None, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}" if source_path else message)


class FrontmatterError(ContentError):
    """Raised when a frontmatter block is present but cannot be used."""


def extract_frontmatter(
    text: str, source_path: Path | None = None
) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Files without a frontmatter block yield an empty mapping and the
    untouched text. A block that is not valid YAML, or that parses to
    something other than a mapping, raises ``FrontmatterError`` so that
    authoring mistakes are not silently turned into talks without metadata.

    Args:
        text: Raw file content.
        source_path: Optional path used in error messages.

    Returns:
        Tuple of (frontmatter dict, remaining content).

    Raises:
        FrontmatterError: If the frontmatter block is malformed.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(source_path, f"Invalid YAML frontmatter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            source_path,
            f"Frontmatter must be a mapping, got {type(data).__name__}",
        )
    return data, text[match.end() :]

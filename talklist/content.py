"""Content loading for talklist.

This module turns a directory of Markdown and HTML sources into page records.
Each record gets a URL path derived from its location and the metadata parsed
from its YAML frontmatter.

Key classes:
- ContentRecord: Frozen dataclass implementing the PageRecord protocol.
- FileContentLoader: Discovers content files in a site directory.
- UrlDeriver: Derives URL paths for content files.
- FileRecordLoader: Implementation of RecordLoader protocol for file-based content.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .extractors import ContentError, extract_frontmatter
from .utils import content_stem, is_content, slugify


@dataclass(frozen=True)
class ContentRecord:
    """A page loaded from a content file.

    Attributes:
        path: URL path for the page.
        metadata: Read-only view of the page's frontmatter.
        source: Path to the source file, if the record came from disk.
        body: Source text following the frontmatter block.
    """

    path: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    source: Path | None = None
    body: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


class FileContentLoader:
    """Discovers content files in a site directory.

    Files and folders starting with ``_`` are skipped (layouts, partials and
    drafts), unless ``include_drafts`` is set, in which case ``_``-prefixed
    files are returned while ``_``-prefixed folders stay hidden.

    Attributes:
        site_dir: Directory containing site content.
    """

    def __init__(self, site_dir: Path):
        self.site_dir = site_dir

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List every content file, sorted by relative path.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in sorted(self.site_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.site_dir)
            if any(part.startswith("_") for part in rel.parts[:-1]):
                continue
            if rel.name.startswith("_") and not include_drafts:
                continue
            if is_content(path):
                files.append(path)
        return files


class UrlDeriver:
    """Derives URL paths for content files.

    ``talks/2024-05-17-pycon.md`` becomes ``/talks/pycon/`` and
    ``talks/index.md`` becomes ``/talks/``. A ``path`` or ``permalink`` key in
    the frontmatter replaces the derived value.
    """

    def derive(self, rel: Path, metadata: Mapping[str, Any] | None = None) -> str:
        """Derive the URL for a page.

        Args:
            rel: Relative path from site directory.
            metadata: Frontmatter of the page.

        Returns:
            URL path for the page.
        """
        if metadata:
            override = metadata.get("permalink") or metadata.get("path")
            if isinstance(override, str) and override.strip():
                value = override.strip()
                return value if value.startswith("/") else f"/{value}"
        slug = slugify(content_stem(rel))
        segments = [p for p in rel.parent.parts if p]
        url_parts = segments if slug == "index" else segments + [slug]
        path = "/".join(url_parts)
        return f"/{path}/" if path else "/"


class FileRecordLoader:
    """Loads ContentRecords from a site directory.

    Attributes:
        site_dir: Directory containing site content.
        include_drafts: Whether ``_``-prefixed files are loaded.
    """

    def __init__(
        self,
        site_dir: Path,
        include_drafts: bool = False,
        content_loader: FileContentLoader | None = None,
        url_deriver: UrlDeriver | None = None,
    ):
        self.site_dir = site_dir
        self.include_drafts = include_drafts
        self._content_loader = content_loader or FileContentLoader(site_dir)
        self._url_deriver = url_deriver or UrlDeriver()

    def load(self) -> list[ContentRecord]:
        """Load all content files and create ContentRecords.

        Returns:
            List of records in relative-path order.

        Raises:
            FileNotFoundError: If the site directory does not exist.
            ContentError: If a file is not UTF-8 or has malformed frontmatter.
        """
        if not self.site_dir.is_dir():
            raise FileNotFoundError(f"Expected site directory at {self.site_dir}")
        return [
            self.build(path)
            for path in self._content_loader.iter_files(self.include_drafts)
        ]

    def build(self, path: Path) -> ContentRecord:
        rel = path.relative_to(self.site_dir)
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentError(path, f"File is not valid UTF-8: {exc.reason}") from exc
        metadata, body = extract_frontmatter(raw, path)
        return ContentRecord(
            path=self._url_deriver.derive(rel, metadata),
            metadata=metadata,
            source=path,
            body=body,
        )

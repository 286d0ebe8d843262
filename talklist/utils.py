"""Utility functions for talklist.

Key functions:
    slugify: Convert filenames to URL slugs.
    is_markdown: Check if a path is a Markdown file.
    is_html: Check if a path is a plain HTML file.
    is_content: Check if a path is a file the record loader reads.
    ensure_dir: Ensure a directory exists.
"""

from __future__ import annotations

import re
from pathlib import Path

DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("2024-05-17-Scaling Python")
        'scaling-python'
    """
    cleaned = DATE_PREFIX_RE.sub("", name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def content_stem(path: Path) -> str:
    """Return the filename with every suffix removed.

    ``talk.html.md`` becomes ``talk``, matching how layered extensions are
    usually written in site sources.
    """
    return path.name.split(".", 1)[0]


def is_markdown(path: Path) -> bool:
    return path.suffix.lower() in {".md", ".markdown"}


def is_html(path: Path) -> bool:
    return path.suffix.lower() in {".html", ".htm"}


def is_content(path: Path) -> bool:
    return is_markdown(path) or is_html(path)


def ensure_dir(path: Path) -> None:
    """Create ``path`` and its parents if they are missing."""
    path.mkdir(parents=True, exist_ok=True)


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/talks/pycon/')
        'https://example.com/talks/pycon/'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"

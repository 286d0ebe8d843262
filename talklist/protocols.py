"""Protocol definitions for talklist.

Talk filtering works on any page object that carries a URL ``path`` and a
``metadata`` mapping, so the page objects of an existing site pipeline can be
passed in directly. The bundled file loader is one implementation of
``RecordLoader``.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PageRecord(Protocol):
    """A content page produced by a site pipeline.

    Attributes:
        path: Normalized URL path, unique within the site (e.g. ``/talks/pycon/``).
        metadata: Values parsed from the page's frontmatter.
    """

    path: str
    metadata: Mapping[str, Any]


@runtime_checkable
class RecordLoader(Protocol):
    """Protocol for producing the page records of a site."""

    @abstractmethod
    def load(self) -> list[PageRecord]:
        """Load every page record, in a stable order.

        Returns:
            List of page records.
        """
        ...

"""Talk selection and wrapping.

``all_under`` picks the page records whose URL path lies under a prefix and
wraps each in a ``TalkView``. Prefix matching is segment-aware: ``/talks``
matches ``/talks`` and ``/talks/pycon/`` but not ``/talksarchive``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, timezone
from typing import Any

from .protocols import PageRecord


class TalklistError(Exception):
    """Base class for talklist errors."""


class MissingAttributeError(TalklistError, LookupError):
    """A talk accessor was read but the metadata key is absent.

    Not an ``AttributeError``, so Jinja2 propagates it instead of rendering
    an undefined value.

    Attributes:
        path: URL path of the record missing the key.
        key: Metadata key that was requested.
    """

    def __init__(self, path: str, key: str):
        self.path = path
        self.key = key
        super().__init__(f"Talk at {path} has no '{key}' in its metadata")


class InvalidPrefixError(TalklistError, ValueError):
    """The prefix passed to ``all_under`` is empty, relative, or has dot segments."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(
            "Talk prefix must be a non-empty path starting with '/' "
            f"and free of '.' or '..' segments: {prefix!r}"
        )


def validate_prefix(prefix: str) -> str:
    """Return ``prefix`` unchanged, raising ``InvalidPrefixError`` if unusable."""
    if not isinstance(prefix, str) or not prefix.startswith("/"):
        raise InvalidPrefixError(prefix)
    if any(segment in (".", "..") for segment in prefix.split("/")):
        raise InvalidPrefixError(prefix)
    return prefix


def matches_prefix(path: str, prefix: str) -> bool:
    """Check whether ``path`` lies under ``prefix`` on a segment boundary.

    The prefix must be followed by ``/`` or the end of ``path``. A trailing
    slash on the prefix is not significant, and ``/`` matches everything.
    Comparison is case-sensitive.

    Examples:
        >>> matches_prefix("/talks/a", "/talks")
        True
        >>> matches_prefix("/talksxyz", "/talks")
        False
    """
    base = prefix.rstrip("/")
    if not base:
        return path.startswith("/")
    return path == base or path.startswith(base + "/")


def date_sort_key(value: Any) -> Any:
    """Return a comparable key for a ``date`` metadata value.

    ``date`` values become naive midnight datetimes and aware datetimes are
    converted to naive UTC. Anything else is returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value


class TalkView:
    """Read-only view of one talk page.

    Holds a reference to the wrapped record and exposes named accessors over
    its path and metadata. Accessors for metadata keys raise
    ``MissingAttributeError`` when the key is absent.
    """

    __slots__ = ("_record",)

    def __init__(self, record: PageRecord):
        object.__setattr__(self, "_record", record)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def record(self) -> PageRecord:
        return self._record

    @property
    def url(self) -> str:
        return self._record.path

    @property
    def title(self) -> Any:
        return self._require("title")

    @property
    def event(self) -> Any:
        return self._require("event")

    @property
    def date(self) -> Any:
        return self._require("date")

    def get(self, key: str, default: Any = None) -> Any:
        """Return an optional metadata value, or ``default`` when absent."""
        return self._record.metadata.get(key, default)

    def _require(self, key: str) -> Any:
        try:
            return self._record.metadata[key]
        except KeyError:
            raise MissingAttributeError(self._record.path, key) from None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TalkView):
            return NotImplemented
        return self._record is other._record

    def __hash__(self) -> int:
        return id(self._record)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TalkView({self.url!r})"


def all_under(records: Iterable[PageRecord], prefix: str) -> list[TalkView]:
    """Select the records under ``prefix`` and wrap each in a TalkView.

    Input order is preserved and the records are not modified. Records
    without a title are kept; reading ``title`` on their view raises.

    Args:
        records: Page records in site order. May be empty.
        prefix: URL prefix such as ``/talks``.

    Returns:
        One TalkView per matching record, in input order.

    Raises:
        InvalidPrefixError: If ``prefix`` is empty, does not start with ``/``,
            or contains ``.`` or ``..`` segments.
    """
    validate_prefix(prefix)
    return [TalkView(record) for record in records if matches_prefix(record.path, prefix)]


class TalkCollection(Sequence[TalkView]):
    """Sequence of TalkViews with helpers for listing templates."""

    def __init__(self, talks: Iterable[TalkView]):
        self._talks = list(talks)

    @classmethod
    def from_records(cls, records: Iterable[PageRecord], prefix: str) -> TalkCollection:
        return cls(all_under(records, prefix))

    def __iter__(self) -> Iterator[TalkView]:
        return iter(self._talks)

    def __len__(self) -> int:
        return len(self._talks)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return TalkCollection(self._talks[item])
        return self._talks[item]

    def urls(self) -> list[str]:
        return [talk.url for talk in self._talks]

    def with_event(self, name: str) -> TalkCollection:
        return TalkCollection(t for t in self._talks if t.get("event") == name)

    def sorted(self, reverse: bool = True) -> TalkCollection:
        """Sort talks by their ``date`` metadata.

        The sort is stable, so talks sharing a date keep their site order.
        Dates and datetimes are compared on one timeline: a plain date sorts
        as midnight and aware datetimes are compared in UTC.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new TalkCollection.

        Raises:
            MissingAttributeError: If a talk has no date.
            TypeError: If dates of incomparable types are mixed.
        """
        return TalkCollection(
            sorted(self._talks, key=lambda t: date_sort_key(t.date), reverse=reverse)
        )

    def latest(self, count: int = 5) -> TalkCollection:
        return self.sorted()[:count]

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TalkCollection({len(self._talks)} talks)"

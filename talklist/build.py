"""Talks listing build for talklist.

This module loads the project configuration and the site's page records,
selects the talks and renders the listing page into the output directory.

Key functions:
- build_talks: Build the talks listing page.
- load_talks: Load the site's records and select the talks.
- load_config: Load configuration from talklist.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateSyntaxError

from .collections import (
    MissingAttributeError,
    TalkCollection,
    TalklistError,
    date_sort_key,
)
from .content import FileRecordLoader
from .extractors import ContentError
from .protocols import RecordLoader
from .templates import TemplateEngine
from .utils import ensure_dir


class BuildError(TalklistError):
    """Error during the build with file context.

    Attributes:
        source_path: Path to the file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


CONFIG_FILENAME = "talklist.yaml"

DEFAULT_CONFIG = {
    "site_dir": "site",
    "output_dir": "output",
    "prefix": "/talks",
    "layout": "talks",
    "title": "Talks",
    "root_url": "",
    "sort": False,
    "drafts": False,
}


@dataclass
class BuildResult:
    """Result of a listing build.

    Attributes:
        talks: Talks rendered into the listing, in display order.
        output_path: File the listing was written to.
        config: Effective configuration.
    """

    talks: TalkCollection
    output_path: Path
    config: dict[str, Any]


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from talklist.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def load_talks(
    project_root: Path,
    config: dict[str, Any],
    loader: RecordLoader | None = None,
) -> TalkCollection:
    """Load the site's records and select the talks under the configured prefix.

    Args:
        project_root: Root directory of the project.
        config: Effective configuration.
        loader: Optional record source; defaults to the site directory files.

    Returns:
        The selected talks, sorted newest first when ``sort`` is enabled.

    Raises:
        BuildError: If a content file cannot be loaded, or sorting meets a
            talk without a date or with a date that cannot be compared.
        InvalidPrefixError: If the configured prefix is unusable.
    """
    site_dir = project_root / config["site_dir"]
    loader = loader or FileRecordLoader(site_dir, include_drafts=bool(config.get("drafts")))
    try:
        records = loader.load()
    except ContentError as exc:
        raise BuildError(exc.source_path or site_dir, exc.message, exc) from exc
    talks = TalkCollection.from_records(records, config["prefix"])
    if config.get("sort"):
        try:
            talks = talks.sorted()
        except MissingAttributeError as exc:
            raise BuildError(_record_source(talks, exc.path, site_dir), str(exc), exc) from exc
        except TypeError as exc:
            raise BuildError(
                _mismatched_date_source(talks, site_dir),
                f"Cannot sort talks by date: {exc}",
                exc,
            ) from exc
    return talks


def build_talks(
    project_root: Path,
    loader: RecordLoader | None = None,
    **overrides: Any,
) -> BuildResult:
    """Build the talks listing page.

    The page is written to ``<output_dir>/<prefix>/index.html``.

    Args:
        project_root: Root directory of the project.
        loader: Optional record source; defaults to the site directory files.
        **overrides: Configuration values that replace talklist.yaml entries.
            ``None`` values are ignored.

    Returns:
        BuildResult describing what was written.

    Raises:
        BuildError: If a talk cannot be rendered.
        InvalidPrefixError: If the configured prefix is unusable.
    """
    config = load_config(project_root)
    config.update({k: v for k, v in overrides.items() if v is not None})
    talks = load_talks(project_root, config, loader)

    site_dir = project_root / config["site_dir"]
    engine = TemplateEngine(site_dir, {"title": config["title"]}, root_url=config["root_url"])
    try:
        rendered = engine.render_talks(talks, layout=config["layout"], title=config["title"])
    except MissingAttributeError as exc:
        raise BuildError(_record_source(talks, exc.path, site_dir), str(exc), exc) from exc
    except TemplateSyntaxError as exc:
        raise BuildError(
            Path(exc.filename) if exc.filename else site_dir,
            f"Template syntax error on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except Exception as exc:
        raise BuildError(
            _layout_source(engine, config["layout"], site_dir),
            _format_error_message(exc),
            exc,
        ) from exc

    output_dir = project_root / config["output_dir"]
    target_dir = output_dir / config["prefix"].strip("/")
    ensure_dir(target_dir)
    output_path = target_dir / "index.html"
    output_path.write_text(rendered, encoding="utf-8")
    return BuildResult(talks=talks, output_path=output_path, config=config)


def _record_source(talks: TalkCollection, url: str, fallback: Path) -> Path:
    """Return the source file of the talk at ``url``, or ``fallback``."""
    for talk in talks:
        if talk.url == url:
            source = getattr(talk.record, "source", None)
            if source is not None:
                return Path(source)
    return fallback


def _mismatched_date_source(talks: TalkCollection, fallback: Path) -> Path:
    """Return the source of the first talk whose date type differs from the first talk's."""
    keys = [(talk, date_sort_key(talk.date)) for talk in talks]
    if not keys:
        return fallback
    expected = type(keys[0][1])
    for talk, key in keys[1:]:
        if type(key) is not expected:
            return _record_source(talks, talk.url, fallback)
    return fallback


def _layout_source(engine: TemplateEngine, layout: str, fallback: Path) -> Path:
    """Return the file of the site layout named ``layout``, or ``fallback``."""
    for suffix in (".html.jinja", ".jinja", ".html", ""):
        for folder in ("_layouts", "_partials"):
            candidate = engine.site_dir / folder / f"{layout}{suffix}"
            if candidate.is_file():
                return candidate
    return fallback


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"

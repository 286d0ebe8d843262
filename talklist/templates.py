"""Template rendering for talklist.

This module uses Jinja2 to render the talks listing page. The selected talks
are passed in explicitly and placed in the render context as ``talks``; the
environment has no global talk helper.

Key class:
- TemplateEngine: Loads layouts from the site and renders the listing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    select_autoescape,
)

from .collections import TalkCollection
from .utils import join_root_url

DEFAULT_LAYOUT = "talks"

DEFAULT_TALKS_TEMPLATE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>{{ title }}</title></head>
<body>
<h1>{{ title }}</h1>
<ul>
{%- for talk in talks %}
  <li><a href="{{ url_for(talk.url) }}">{{ talk.title }}</a></li>
{%- endfor %}
</ul>
</body>
</html>
"""


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Layouts are looked up in ``<site>/_layouts`` and ``<site>/_partials``
    first; a built-in ``talks.html.jinja`` is used when the site provides
    none.

    Attributes:
        site_dir: Directory containing templates.
        data: Site-wide values available to every template as ``data``.
        root_url: Optional base URL applied by ``url_for``.
        env: Jinja2 environment.
    """

    def __init__(
        self,
        site_dir: Path,
        data: dict[str, Any] | None = None,
        root_url: str | None = None,
    ):
        self.site_dir = site_dir
        self.data = data or {}
        self.root_url = root_url or ""
        self.env = Environment(
            loader=ChoiceLoader(
                [
                    FileSystemLoader([site_dir / "_layouts", site_dir / "_partials"]),
                    DictLoader({f"{DEFAULT_LAYOUT}.html.jinja": DEFAULT_TALKS_TEMPLATE}),
                ]
            ),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.env.globals["url_for"] = self._url_for

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying root_url if configured.

        Args:
            path: Path to generate URL for.

        Returns:
            Full URL with root_url prefix if configured.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        if self.root_url:
            return join_root_url(self.root_url, path)
        return path if path.startswith("/") else f"/{path}"

    def render_talks(
        self,
        talks: TalkCollection,
        layout: str = DEFAULT_LAYOUT,
        **extra: Any,
    ) -> str:
        """Render the talks listing.

        Args:
            talks: Talks to list, in display order.
            layout: Layout name, resolved like ``talks`` -> ``talks.html.jinja``.
            **extra: Additional context values (e.g. ``title``).

        Returns:
            Rendered HTML string.
        """
        context = {
            "data": self.data,
            "title": self.data.get("title", "Talks"),
            **extra,
            "talks": talks,
        }
        return self._resolve_layout_template(layout).render(**context)

    def render_string(self, template: str, context: dict[str, Any]) -> str:
        """Render a template string.

        Args:
            template: Template string to render.
            context: Variables to make available in the template.

        Returns:
            Rendered string.
        """
        return self.env.from_string(template).render(**context)

    def _resolve_layout_template(self, layout: str) -> Template:
        """Resolve and return the layout template.

        Args:
            layout: Layout name to resolve.

        Returns:
            Jinja2 Template object, falling back to the built-in listing.
        """
        candidates = [
            f"{layout}.html.jinja",
            f"{layout}.jinja",
            f"{layout}.html",
            layout,
        ]
        for name in candidates:
            try:
                return self.env.get_template(name)
            except TemplateNotFound:
                continue
        print(f"Layout '{layout}' not found; using the built-in talks listing.")
        return self.env.get_template(f"{DEFAULT_LAYOUT}.html.jinja")

"""Talklist: conference talk listings for static sites.

This package selects the pages of a static site that describe talks (those
living under a URL prefix such as ``/talks``) and wraps each one in a
read-only ``TalkView`` with convenience accessors for templates.

The main entry point is the CLI module, which provides commands for listing
the talks found in a site directory and for building a talks index page.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

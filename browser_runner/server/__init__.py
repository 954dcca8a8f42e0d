"""Server module - static file server and harness page."""

from .harness import render_harness_page
from .static_server import Server, expand_patterns

__all__ = [
    "Server",
    "expand_patterns",
    "render_harness_page",
]

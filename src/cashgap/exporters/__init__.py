"""cashgap exporters — render a cash plan for people."""

from cashgap.exporters.markdown import render_markdown

__all__ = ["render_markdown"]

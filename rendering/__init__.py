"""
Layer 2: Documentation Rendering

Pure model-to-text renderers for the HTML page and its Markdown export.
"""

from rendering.html import render_html, truncate_identifier
from rendering.markdown import render_markdown, field_attributes

__all__ = [
    "render_html",
    "render_markdown",
    "truncate_identifier",
    "field_attributes",
]

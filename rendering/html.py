"""HTML rendering of the entity model list.

The page is produced from a Jinja2 template with autoescaping enabled. Entity
and field identifiers become anchor ids so navigation and target-entity links
can deep-link into the document.
"""

import logging
import os
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from core.docs_config import DEFAULT_MARKDOWN_FILENAME, DEFAULT_TITLE
from extraction.models import EntityRecord
from rendering.markdown import render_markdown

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
HTML_TEMPLATE = "index.html.j2"

MAX_IDENTIFIER_LENGTH = 30
TRUNCATED_LENGTH = 27
ELLIPSIS = "..."


def truncate_identifier(identifier: str) -> str:
    """Shorten identifiers longer than 30 characters to 27 plus an ellipsis."""
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        return identifier[:TRUNCATED_LENGTH] + ELLIPSIS
    return identifier


def create_environment() -> Environment:
    """Create the Jinja2 environment used for HTML rendering."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["truncate_identifier"] = truncate_identifier
    return env


_ENVIRONMENT = create_environment()


def render_html(
    models: Sequence[EntityRecord],
    title: str = DEFAULT_TITLE,
    markdown_filename: str = DEFAULT_MARKDOWN_FILENAME,
) -> str:
    """Render the model list as a standalone HTML page.

    The Markdown export is rendered with ``render_markdown`` and embedded so
    the page's export button downloads exactly the same text.

    Args:
        models: Entity records, already in display order.
        title: Page title and heading.
        markdown_filename: File name offered by the export download.

    Returns:
        The HTML document.
    """
    template = _ENVIRONMENT.get_template(HTML_TEMPLATE)
    html = template.render(
        title=title,
        models=models,
        markdown=render_markdown(models, title=title),
        markdown_filename=markdown_filename,
    )
    logger.debug("Rendered HTML for %d entities (%d chars)", len(models), len(html))
    return html

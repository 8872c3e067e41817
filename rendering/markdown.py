"""Markdown export of the entity model list.

This is the single Markdown implementation: the HTML page embeds its output
for the in-browser "Export as Markdown" action.

The ``Required`` row is driven by ``is_primary`` and ``@unique`` by
``is_unique``, which the extractor never sets. Both match previously
generated exports.
"""

from typing import List, Sequence

from core.docs_config import DEFAULT_TITLE
from extraction.models import EntityRecord, FieldDescriptor


def field_attributes(field: FieldDescriptor) -> List[str]:
    """Attribute tags listed for a field in the Markdown export."""
    attributes = []
    if field.is_primary:
        attributes.append("@primaryGeneratedColumn")
    if field.is_unique:
        attributes.append("@unique")
    if field.relation_type is not None:
        attributes.append(f"@relation({field.relation_type.value})")
    return attributes


def _render_field(model: EntityRecord, field: FieldDescriptor) -> str:
    attributes = field_attributes(field)
    return (
        f"### {field.name}\n"
        f"**Description**: The '{field.name}' field from the {model.name} entity\n\n"
        "| Parameter     | Value        |\n"
        "|---------------|--------------|\n"
        f"| **Type**      | {field.type} |\n"
        f"| **Required**  | {'Yes' if field.is_primary else 'No'} |\n"
        f"| **Attributes**| {', '.join(attributes) if attributes else '-'} |\n\n"
    )


def render_markdown(models: Sequence[EntityRecord], title: str = DEFAULT_TITLE) -> str:
    """Render the model list as a Markdown document.

    Args:
        models: Entity records, already in display order.
        title: Document heading.

    Returns:
        The Markdown text.
    """
    parts = [f"# {title}\n\n"]
    for model in models:
        parts.append(f"## {model.name}\n\n")
        parts.extend(_render_field(model, field) for field in model.fields)
        parts.append("\n")
    return "".join(parts)

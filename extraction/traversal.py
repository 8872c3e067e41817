"""
AST traversal and entity extraction logic.

This module walks a TypeScript AST produced by tree-sitter, locates the class
decorated with ``@Entity()`` and reduces its decorated members into
``FieldDescriptor`` records. Decorator arguments are matched structurally on
node types; nothing is evaluated.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple
from tree_sitter import Node, Tree

from extraction.config import (
    CLASS_DECLARATION_TYPES,
    EXPORT_WRAPPER,
    CONTAINER_TYPES,
    NESTING_TYPES,
    FIELD_MEMBER_NODE,
    DECORATOR_NODE,
    COMMENT_NODE,
    ENTITY_DECORATOR,
    PRIMARY_GENERATED_DECORATOR,
    COLUMN_DECORATORS,
    RELATION_DECORATORS,
    TYPE_OPTION,
    NULLABLE_OPTION,
    UNKNOWN,
    RELATION,
)
from extraction.models import EntityRecord, FieldDescriptor, RelationType

logger = logging.getLogger(__name__)

_FUNCTION_TYPES = ("function_expression", "function")


def node_text(node: Optional[Node]) -> Optional[str]:
    """Return the UTF-8 source text of a node, or None."""
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8")


def _significant_children(node: Node) -> List[Node]:
    """Named children of a node, skipping comments."""
    return [c for c in node.named_children if c.type != COMMENT_NODE]


def _unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = _significant_children(node)
        node = inner[0] if inner else None
    return node


def decorator_call(decorator: Node) -> Tuple[Optional[str], List[Node]]:
    """Split a decorator into its callee name and argument nodes.

    Only call forms with a plain identifier callee are recognized
    (``@Column({...})``). Bare decorators and member callees
    (``@orm.Column()``) yield ``(None, [])``.

    Args:
        decorator: A ``decorator`` node.

    Returns:
        Tuple of (callee name or None, list of argument nodes).
    """
    children = _significant_children(decorator)
    if not children or children[0].type != "call_expression":
        return None, []

    call = children[0]
    callee = call.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return None, []

    arguments = call.child_by_field_name("arguments")
    args = _significant_children(arguments) if arguments is not None else []
    return node_text(callee), args


def literal_value(node: Optional[Node]) -> Any:
    """Read a literal node as a Python value.

    Strings, template strings without substitutions, numbers and booleans
    are recognized. Anything else, ``null`` included, yields None.
    """
    if node is None:
        return None
    text = node_text(node)
    if node.type == "string":
        return text[1:-1]
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        return text[1:-1]
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    if node.type == "number":
        try:
            return int(text, 0)
        except ValueError:
            try:
                return float(text)
            except ValueError:
                return None
    return None


def object_options(node: Optional[Node]) -> Dict[str, Node]:
    """Map option names of an object literal to their value nodes.

    Keys may be identifiers or string literals. The first occurrence of a
    duplicated key wins. A non-object node yields an empty mapping.
    """
    options: Dict[str, Node] = {}
    if node is None or node.type != "object":
        return options

    for pair in node.named_children:
        if pair.type != "pair":
            continue
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            continue
        if key.type == "property_identifier":
            key_name = node_text(key)
        elif key.type == "string":
            key_name = literal_value(key)
        else:
            continue
        options.setdefault(key_name, value)
    return options


def _returned_identifier(body: Node) -> Optional[str]:
    """Identifier returned by a function body, implicitly or explicitly."""
    if body.type == "statement_block":
        for statement in _significant_children(body):
            if statement.type != "return_statement":
                continue
            returned = _significant_children(statement)
            if not returned:
                return None
            body = returned[0]
            break
        else:
            return None

    body = _unwrap_parens(body)
    if body is not None and body.type == "identifier":
        return node_text(body)
    return None


def resolve_target_entity(argument: Optional[Node]) -> str:
    """Resolve the target entity of a relation decorator.

    Recognized shapes for the first decorator argument:

    - ``() => Order``, ``type => Order``, ``() => (Order)``
    - ``() => { return Order; }`` and ``function () { return Order; }``
    - ``Order``

    Args:
        argument: First argument node of the relation decorator, or None.

    Returns:
        The target identifier, or ``"unknown"`` for any other shape.
    """
    argument = _unwrap_parens(argument)
    if argument is None:
        return UNKNOWN

    if argument.type == "arrow_function" or argument.type in _FUNCTION_TYPES:
        body = argument.child_by_field_name("body")
        if body is None:
            return UNKNOWN
        return _returned_identifier(body) or UNKNOWN

    if argument.type == "identifier":
        return node_text(argument) or UNKNOWN

    return UNKNOWN


def _column_attributes(args: List[Node], decorator_names: set) -> Dict[str, Any]:
    options = object_options(args[0] if args else None)

    declared_type = literal_value(options.get(TYPE_OPTION))
    nullable = literal_value(options.get(NULLABLE_OPTION))

    return {
        "type": declared_type if isinstance(declared_type, str) and declared_type else UNKNOWN,
        "is_primary": PRIMARY_GENERATED_DECORATOR in decorator_names,
        # Only an explicit `nullable: false` makes a column required
        "is_required": nullable is False,
    }


def _relation_attributes(relation_name: str, args: List[Node]) -> Dict[str, Any]:
    return {
        "type": RELATION,
        "relation_type": RelationType(relation_name),
        "target_entity": resolve_target_entity(args[0] if args else None),
    }


def reduce_member(member: Node, decorators: List[Node]) -> Optional[FieldDescriptor]:
    """Reduce one decorated class member into a field descriptor.

    Column and relation decorators contribute to the same descriptor in
    decorator order.

    Args:
        member: A ``public_field_definition`` node.
        decorators: All decorator nodes attached to the member.

    Returns:
        The descriptor, or None when no known decorator applies or the member
        name cannot be resolved.
    """
    calls = [decorator_call(d) for d in decorators]
    decorator_names = {name for name, _ in calls if name}

    attributes: Dict[str, Any] = {}
    for name, args in calls:
        if name in COLUMN_DECORATORS:
            attributes.update(_column_attributes(args, decorator_names))
        elif name in RELATION_DECORATORS:
            attributes.update(_relation_attributes(name, args))

    if not attributes:
        return None

    name_node = member.child_by_field_name("name")
    if name_node is None or name_node.type != "property_identifier":
        logger.debug(
            "Skipping member at line %d: unsupported name node", member.start_point.row + 1
        )
        return None

    return FieldDescriptor(name=node_text(name_node), **attributes)


def iter_decorated_members(class_body: Node) -> Iterator[Tuple[Node, List[Node]]]:
    """Yield ``(member, decorators)`` for each field member of a class body.

    Decorators parsed as siblings directly before a member are attached to it
    together with the member's own decorators.
    """
    pending: List[Node] = []
    for child in class_body.named_children:
        if child.type == COMMENT_NODE:
            continue
        if child.type == DECORATOR_NODE:
            pending.append(child)
            continue
        if child.type == FIELD_MEMBER_NODE:
            own = [c for c in child.children if c.type == DECORATOR_NODE]
            yield child, pending + own
        pending = []


def is_entity_class(decorators: List[Node]) -> bool:
    """Check whether any decorator is an ``@Entity(...)`` call."""
    return any(decorator_call(d)[0] == ENTITY_DECORATOR for d in decorators)


def iter_class_declarations(node: Node) -> Iterator[Tuple[Node, List[Node]]]:
    """Yield ``(class_node, decorators)`` in pre-order.

    Decorators placed before ``export`` belong to the wrapping
    ``export_statement`` and are merged with the class's own decorators.
    """
    for child in node.named_children:
        if child.type in CLASS_DECLARATION_TYPES:
            yield child, [c for c in child.children if c.type == DECORATOR_NODE]

        elif child.type == EXPORT_WRAPPER:
            export_decorators = [c for c in child.children if c.type == DECORATOR_NODE]
            declaration = child.child_by_field_name("declaration")
            if declaration is None:
                continue
            if declaration.type in CLASS_DECLARATION_TYPES:
                own = [c for c in declaration.children if c.type == DECORATOR_NODE]
                yield declaration, export_decorators + own
            else:
                yield from iter_class_declarations(_as_container(declaration))

        elif child.type in NESTING_TYPES or child.type in CONTAINER_TYPES:
            yield from iter_class_declarations(_as_container(child))


def _as_container(node: Node) -> Node:
    body = node.child_by_field_name("body")
    return body if body is not None else node


def find_entity_class(tree: Tree) -> Optional[Node]:
    """Find the first ``@Entity()`` class of the tree in pre-order."""
    found: Optional[Node] = None
    for class_node, decorators in iter_class_declarations(tree.root_node):
        if not is_entity_class(decorators):
            continue
        if found is None:
            found = class_node
        else:
            logger.debug(
                "Ignoring additional entity class at line %d",
                class_node.start_point.row + 1,
            )
    return found


def extract_entity_from_tree(
    tree: Tree,
    source_path: Optional[str] = None,
) -> Optional[EntityRecord]:
    """Extract the entity declared in a parsed TypeScript AST.

    This is the main entry point for entity extraction. When several classes
    carry ``@Entity()``, the first one in pre-order traversal is used.

    Args:
        tree: The parsed AST tree.
        source_path: Path of the source file, recorded on the result.

    Returns:
        The entity record, or None if the tree has no entity class.
    """
    class_node = find_entity_class(tree)
    if class_node is None:
        return None

    name = node_text(class_node.child_by_field_name("name"))
    if not name:
        return None

    fields: List[FieldDescriptor] = []
    body = class_node.child_by_field_name("body")
    if body is not None:
        for member, decorators in iter_decorated_members(body):
            descriptor = reduce_member(member, decorators)
            if descriptor is not None:
                fields.append(descriptor)

    logger.debug("Extracted entity %s with %d fields", name, len(fields))
    return EntityRecord(name=name, fields=tuple(fields), source_path=source_path)

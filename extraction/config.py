"""
Configuration constants for TypeORM entity extraction.

Defines the tree-sitter node type strings and decorator names used when
reducing a TypeScript AST into entity records.
"""

from typing import Set

# Class declaration node types that may carry the entity decorator
CLASS_DECLARATION_TYPES: Set[str] = {
    "class_declaration",
    "abstract_class_declaration",
}

# Wrapper whose decorators belong to the declaration it exports
EXPORT_WRAPPER: str = "export_statement"

# Container types whose children we scan for class declarations
CONTAINER_TYPES: Set[str] = {
    "program",          # File root
    "statement_block",  # namespace/module body
}

# Wrappers around namespace-like declarations
# (namespace Foo { ... }, declare module "x" { ... })
NESTING_TYPES: Set[str] = {
    "internal_module",
    "module",
    "ambient_declaration",
    "expression_statement",
}

# Class body member node type for property declarations
FIELD_MEMBER_NODE: str = "public_field_definition"

DECORATOR_NODE: str = "decorator"
COMMENT_NODE: str = "comment"

# Decorator names
ENTITY_DECORATOR: str = "Entity"
PRIMARY_GENERATED_DECORATOR: str = "PrimaryGeneratedColumn"

COLUMN_DECORATORS: Set[str] = {
    "Column",
    "PrimaryGeneratedColumn",
    "PrimaryColumn",
    "CreateDateColumn",
    "UpdateDateColumn",
    "DeleteDateColumn",
    "VersionColumn",
}

RELATION_DECORATORS: tuple = (
    "ManyToOne",
    "OneToOne",
    "OneToMany",
    "ManyToMany",
)

# Column option keys read from the first decorator argument
TYPE_OPTION: str = "type"
NULLABLE_OPTION: str = "nullable"

# Sentinel values
UNKNOWN: str = "unknown"
RELATION: str = "relation"

# File extensions parsed with the TSX grammar
TSX_EXTENSIONS: Set[str] = {".tsx"}

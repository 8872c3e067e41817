"""
Layer 1: Extraction Engine

Tree-sitter-based TypeScript parser and TypeORM entity extractor.
Reduces @Entity() classes and their decorated members into entity records.
"""

from extraction.models import EntityRecord, FieldDescriptor, RelationType
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.traversal import extract_entity_from_tree
from extraction.extractor import (
    EntityDocsError,
    NoEntityFilesError,
    NoEntitiesFoundError,
    ExtractionStats,
    collect_from_config,
    collect_models,
    discover_entity_files,
    extract_file,
    models_to_dict_list,
    sort_models,
)

__all__ = [
    # Data models
    "EntityRecord",
    "FieldDescriptor",
    "RelationType",
    "ExtractionStats",
    # Errors
    "EntityDocsError",
    "NoEntityFilesError",
    "NoEntitiesFoundError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Mid-level extraction
    "extract_entity_from_tree",
    # High-level orchestration
    "extract_file",
    "collect_models",
    "collect_from_config",
    "discover_entity_files",
    "models_to_dict_list",
    "sort_models",
]

"""
High-level orchestrator for TypeORM entity extraction.

This module provides the main entry points for discovering entity files,
extracting one entity record per file and assembling the sorted model list
consumed by the renderers.
"""

import logging
import unicodedata
from pathlib import Path
from typing import Iterable, List, Optional, Dict, Any, Tuple

from core.docs_config import DocsConfig
from extraction.models import EntityRecord
from extraction.parser import parse_file, count_error_nodes
from extraction.traversal import extract_entity_from_tree

logger = logging.getLogger(__name__)


class EntityDocsError(RuntimeError):
    """Base class for reported documentation run failures."""


class NoEntityFilesError(EntityDocsError):
    """Raised when discovery matches no source files."""


class NoEntitiesFoundError(EntityDocsError):
    """Raised when no file yields an entity record."""

    def __init__(self, message: str = "No valid entities found. Ensure your files are properly decorated."):
        super().__init__(message)


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_without_entity = 0
        self.entities_extracted = 0
        self.fields_extracted = 0
        self.parse_errors = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_without_entity": self.files_without_entity,
            "entities_extracted": self.entities_extracted,
            "fields_extracted": self.fields_extracted,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"without_entity={self.files_without_entity}, "
            f"entities={self.entities_extracted}, fields={self.fields_extracted}, "
            f"parse_errors={self.parse_errors})"
        )


def entity_sort_key(name: str) -> Tuple[str, str, str]:
    """Locale-style collation key for entity names.

    Orders accent- and case-insensitively first, then lowercase before
    uppercase, then by raw code points. Independent of the process locale.
    """
    folded = name.casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(ch)
    )
    return base, name.swapcase(), name


def sort_models(models: Iterable[EntityRecord]) -> List[EntityRecord]:
    """Sort entity records by name using ``entity_sort_key``."""
    return sorted(models, key=lambda model: entity_sort_key(model.name))


def discover_entity_files(directory: str, pattern: str = "**/*.ts") -> List[str]:
    """Recursively discover entity source files matching a glob pattern.

    Args:
        directory: Root directory to search. A missing directory yields no files.
        pattern: Glob pattern relative to ``directory``.

    Returns:
        Sorted list of absolute file paths.
    """
    root = Path(directory).resolve()
    logger.info("Discovering entity files in %s (%s)", root, pattern)

    if not root.is_dir():
        logger.warning("Entities directory not found: %s", root)
        return []

    files = sorted(
        str(path) for path in root.glob(pattern)
        if path.is_file() and not any(part.startswith(".") for part in path.relative_to(root).parts)
    )
    logger.info("Found %d entity files", len(files))
    return files


def extract_file(file_path: str, stats: Optional[ExtractionStats] = None) -> Optional[EntityRecord]:
    """Parse one source file and extract its entity record.

    Read errors propagate to the caller. Syntax errors are logged and the
    tree is reduced best-effort.

    Args:
        file_path: Path to a TypeScript source file.
        stats: Optional stats object updated in place.

    Returns:
        The entity record, or None if the file declares no entity.
    """
    tree, _ = parse_file(file_path)
    error_count = count_error_nodes(tree)
    if error_count:
        logger.warning(
            "File %s contains syntax errors (%d error nodes)", file_path, error_count
        )

    entity = extract_entity_from_tree(tree, source_path=file_path)

    if stats is not None:
        stats.files_processed += 1
        stats.parse_errors += error_count
        if entity is None:
            stats.files_without_entity += 1
        else:
            stats.entities_extracted += 1
            stats.fields_extracted += len(entity.fields)

    if entity is None:
        logger.debug("No entity class in %s", file_path)
    else:
        logger.info("Extracted entity %s (%d fields) from %s", entity.name, len(entity.fields), file_path)
    return entity


def collect_models(
    file_paths: List[str],
    stats: Optional[ExtractionStats] = None,
    source_label: Optional[str] = None,
) -> List[EntityRecord]:
    """Extract entities from every file and return them sorted by name.

    Args:
        file_paths: Files to process, in any order.
        stats: Optional stats object updated in place.
        source_label: Directory name used in the discovery failure message.

    Returns:
        Entity records sorted with ``entity_sort_key``.

    Raises:
        NoEntityFilesError: If ``file_paths`` is empty.
        NoEntitiesFoundError: If no file declares an entity.
    """
    if not file_paths:
        raise NoEntityFilesError(f"No entity files found in '{source_label or '.'}'.")

    models = []
    for file_path in file_paths:
        entity = extract_file(file_path, stats=stats)
        if entity is not None:
            models.append(entity)

    if not models:
        raise NoEntitiesFoundError()

    return sort_models(models)


def collect_from_config(config: DocsConfig) -> Tuple[List[EntityRecord], ExtractionStats]:
    """Discover and extract all entities described by a run configuration.

    Returns:
        A tuple of (sorted entity records, extraction stats).
    """
    stats = ExtractionStats()
    file_paths = discover_entity_files(config.entities_path, config.file_pattern)
    models = collect_models(file_paths, stats=stats, source_label=config.entities_dir)
    logger.info("Extraction complete: %s", stats)
    return models, stats


def models_to_dict_list(models: List[EntityRecord]) -> List[Dict[str, Any]]:
    """Convert entity records to a list of JSON-serializable dicts."""
    return [model.to_dict() for model in models]

"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the TypeScript parser and parse
entity source files.
"""

import logging
import os
from typing import Tuple
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from extraction.config import TSX_EXTENSIONS

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constants
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())


def create_parser(tsx: bool = False) -> Parser:
    """Create and configure a tree-sitter parser for TypeScript.

    Args:
        tsx: Use the TSX grammar instead of plain TypeScript.

    Returns:
        A Parser instance configured with the TypeScript (or TSX) language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class User {}")
    """
    parser = Parser(TSX_LANGUAGE if tsx else TYPESCRIPT_LANGUAGE)
    logger.debug("Created tree-sitter %s parser", "TSX" if tsx else "TypeScript")
    return parser


def parse_bytes(source: bytes, tsx: bool = False) -> Tree:
    """Parse raw bytes of TypeScript source code.

    Args:
        source: UTF-8 encoded bytes of TypeScript source code.
        tsx: Use the TSX grammar.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"@Entity() class User {}")
        >>> tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser(tsx=tsx)
    tree = parser.parse(source)

    logger.debug("Parsed %d bytes of TypeScript code", len(source))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a TypeScript source file from disk.

    Args:
        file_path: Path to the .ts or .tsx file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    tsx = os.path.splitext(file_path)[1].lower() in TSX_EXTENSIONS
    tree = parse_bytes(source_bytes, tsx=tsx)

    logger.debug("Successfully parsed file: %s", file_path)
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    count = 0
    stack: list[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        stack.extend(node.children)
    return count

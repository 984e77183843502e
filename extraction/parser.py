"""
Tree-sitter parser initialization and Go file parsing utilities.

This module provides functions to initialize the Go parser, parse source
files, and turn trees containing syntax errors into ``ParseError``.
"""

import logging
from typing import List, Optional, Tuple

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

from extraction.config import COMMENT_NODE, ERROR_NODE, PACKAGE_CLAUSE_NODE

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
GO_LANGUAGE = Language(tsgo.language())


class ParseError(Exception):
    """Raised when a Go source file does not parse cleanly.

    Attributes:
        file_path: Path of the offending file
        line: 1-indexed line of the first syntax error
        column: 1-indexed column of the first syntax error
        detail: Description of the underlying syntax error
    """

    def __init__(self, file_path: str, line: int, column: int, detail: str):
        self.file_path = file_path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{file_path}:{line}:{column}: {detail}")


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Go.

    Returns:
        A Parser instance configured with the Go language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"package main")
    """
    parser = Parser(GO_LANGUAGE)
    logger.debug("Created tree-sitter Go parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of Go source code.

    Args:
        source: UTF-8 encoded bytes of Go source code.

    Returns:
        A Tree object representing the parsed syntax tree. Syntax errors
        are left in the tree as ERROR/MISSING nodes.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"package main\\nfunc foo() {}")
        >>> tree.root_node.type
        'source_file'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)

    if tree.root_node.has_error:
        logger.debug("Parsed tree contains syntax errors")

    logger.debug("Parsed %d bytes of Go code", len(source))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a Go source file from disk.

    Args:
        file_path: Path to the .go file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except IOError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    tree = parse_bytes(source_bytes)
    logger.debug("Parsed file: %s", file_path)
    return tree, source_bytes


def _error_nodes(node: Node) -> List[Node]:
    found = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == ERROR_NODE or current.is_missing:
            found.append(current)
            continue
        if current.has_error:
            stack.extend(reversed(current.children))
    return found


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    if not tree.root_node.has_error:
        return 0
    return len(_error_nodes(tree.root_node))


def first_error_node(tree: Tree) -> Optional[Node]:
    """Return the first ERROR or MISSING node in source order, if any."""
    if not tree.root_node.has_error:
        return None
    errors = _error_nodes(tree.root_node)
    if not errors:
        return None
    return min(errors, key=lambda n: (n.start_point[0], n.start_point[1]))


def ensure_valid_encoding(source: bytes, file_path: str) -> None:
    """Raise ``ParseError`` at the first byte that is not valid UTF-8."""
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        line_start = source.rfind(b"\n", 0, e.start) + 1
        line = source.count(b"\n", 0, e.start) + 1
        column = e.start - line_start + 1
        logger.error("Illegal UTF-8 in %s at %d:%d", file_path, line, column)
        raise ParseError(file_path, line, column, "illegal UTF-8 encoding") from e


def _first_declaration(tree: Tree) -> Optional[Node]:
    for child in tree.root_node.named_children:
        if child.type != COMMENT_NODE:
            return child
    return None


def ensure_well_formed(tree: Tree, file_path: str) -> None:
    """Raise ``ParseError`` if ``tree`` contains any syntax error.

    A file whose first declaration is not a package clause is rejected too.

    Args:
        tree: Parsed tree of ``file_path``.
        file_path: Path reported in the error.

    Raises:
        ParseError: Describing the first syntax error in the file.
    """
    error = first_error_node(tree)
    if error is None:
        if tree.root_node.has_error:
            raise ParseError(file_path, 1, 1, "syntax error")
        first = _first_declaration(tree)
        if first is None or first.type != PACKAGE_CLAUSE_NODE:
            row, column = first.start_point if first is not None else (0, 0)
            logger.error("Missing package clause in %s", file_path)
            raise ParseError(file_path, row + 1, column + 1, "expected 'package'")
        return

    row, column = error.start_point[0], error.start_point[1]
    if error.is_missing:
        detail = f"missing {error.type}"
    else:
        snippet = (error.text or b"").decode("utf-8", errors="replace").strip()
        snippet = snippet.splitlines()[0] if snippet else ""
        detail = f"unexpected {snippet!r}" if snippet else "syntax error"

    logger.error("Syntax error in %s at %d:%d: %s", file_path, row + 1, column + 1, detail)
    raise ParseError(file_path, row + 1, column + 1, detail)


def dump_tree(tree: Tree, named_only: bool = True) -> str:
    """Render a parsed tree as an indented outline, one node per line.

    Args:
        tree: The tree to render.
        named_only: Skip anonymous punctuation/keyword nodes.

    Returns:
        The outline text, e.g. ``source_file [0:0]`` followed by indented
        children with their field names.
    """
    lines = []

    def _visit(node: Node, depth: int, field_name: Optional[str]) -> None:
        label = f"{field_name}: " if field_name else ""
        row, column = node.start_point[0], node.start_point[1]
        text = ""
        if node.child_count == 0:
            text = " " + repr((node.text or b"").decode("utf-8", errors="replace"))
        lines.append(f"{'  ' * depth}{label}{node.type} [{row}:{column}]{text}")
        for index, child in enumerate(node.children):
            if named_only and not child.is_named:
                continue
            _visit(child, depth + 1, node.field_name_for_child(index))

    _visit(tree.root_node, 0, None)
    return "\n".join(lines)

"""
Go source harvesting engine.

Tree-sitter-based Go parser and model extractor. Harvests structs,
interfaces, and functions/methods along with their doc comments and
annotations, then links methods to the structs they operate on.
"""

from extraction.models import (
    DeclarationShape,
    Field,
    Harvest,
    Interface,
    Operation,
    Struct,
    TypeResolution,
)
from extraction.parser import (
    ParseError,
    count_error_nodes,
    create_parser,
    dump_tree,
    ensure_valid_encoding,
    ensure_well_formed,
    parse_bytes,
    parse_file,
)
from extraction.fields import extract_field_list, extract_fields, resolve_type_expression
from extraction.traversal import (
    SourceWalker,
    classify_node,
    extract_interface,
    extract_operation,
    extract_struct,
    walk_tree,
)
from extraction.extractor import (
    HarvestStats,
    cross_link,
    discover_go_files,
    dump_directory,
    dump_file,
    harvest_directory,
    harvest_directory_with_stats,
    harvest_file,
)

__all__ = [
    # Data models
    "DeclarationShape",
    "Field",
    "Harvest",
    "Interface",
    "Operation",
    "Struct",
    "TypeResolution",
    # Low-level parsing
    "ParseError",
    "count_error_nodes",
    "create_parser",
    "dump_tree",
    "ensure_valid_encoding",
    "ensure_well_formed",
    "parse_bytes",
    "parse_file",
    # Mid-level extraction
    "extract_field_list",
    "extract_fields",
    "resolve_type_expression",
    "SourceWalker",
    "classify_node",
    "extract_interface",
    "extract_operation",
    "extract_struct",
    "walk_tree",
    # High-level orchestration
    "HarvestStats",
    "cross_link",
    "discover_go_files",
    "dump_directory",
    "dump_file",
    "harvest_directory",
    "harvest_directory_with_stats",
    "harvest_file",
]

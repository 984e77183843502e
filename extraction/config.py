"""
Configuration constants for Go source harvesting.

Defines the tree-sitter-go node type strings used by the walker and the
field extractor, plus aggregation defaults.
"""

from typing import Set

# File root and package clause
SOURCE_FILE_NODE: str = "source_file"
PACKAGE_CLAUSE_NODE: str = "package_clause"
PACKAGE_IDENTIFIER_NODE: str = "package_identifier"

# Type declarations: `type X struct {...}` / `type ( ... )`
TYPE_SPEC_NODES: Set[str] = {
    "type_spec",
    "type_alias",
}
STRUCT_TYPE_NODE: str = "struct_type"
INTERFACE_TYPE_NODE: str = "interface_type"

# Function-like declarations
OPERATION_NODES: Set[str] = {
    "function_declaration",
    "method_declaration",
}

# Interface members carrying a method signature (method_spec in older grammars)
INTERFACE_METHOD_NODES: Set[str] = {
    "method_elem",
    "method_spec",
}

# Field-group containers and their members
FIELD_LIST_NODES: Set[str] = {
    "parameter_list",
    "field_declaration_list",
}
FIELD_NODES: Set[str] = {
    "field_declaration",
    "parameter_declaration",
    "variadic_parameter_declaration",
}
VARIADIC_PARAMETER_NODE: str = "variadic_parameter_declaration"

# Type expression shapes the field extractor resolves
TYPE_IDENTIFIER_NODE: str = "type_identifier"
POINTER_TYPE_NODE: str = "pointer_type"
PARENTHESIZED_TYPE_NODE: str = "parenthesized_type"
SEQUENCE_TYPE_NODES: Set[str] = {
    "slice_type",
    "array_type",
    "implicit_length_array_type",
}

# Comment node type (covers // and /* */)
COMMENT_NODE: str = "comment"

# Nodes that mark a failed parse
ERROR_NODE: str = "ERROR"

# Go file extension
GO_EXTENSION: str = ".go"

# Aggregation defaults
DEFAULT_FILENAME_REGEX: str = ".*"
DEFAULT_MAX_WORKERS: int = 1

"""
Field extraction.

Turns field-like syntax nodes (struct members, parameters, results, receivers)
into ``Field`` values and resolves their declared type expressions into a
(type name, is-pointer, is-slice) triple.
"""

import logging
from typing import List, Optional

from tree_sitter import Node

from extraction.comments import leading_comment_lines, trailing_comment_lines
from extraction.config import (
    COMMENT_NODE,
    FIELD_LIST_NODES,
    FIELD_NODES,
    PARENTHESIZED_TYPE_NODE,
    POINTER_TYPE_NODE,
    SEQUENCE_TYPE_NODES,
    TYPE_IDENTIFIER_NODE,
    VARIADIC_PARAMETER_NODE,
)
from extraction.models import Field, TypeResolution

logger = logging.getLogger(__name__)


def _unwrap(node: Optional[Node]) -> Optional[Node]:
    """Strip redundant parentheses: ``(*T)`` is ``*T``."""
    while node is not None and node.type == PARENTHESIZED_TYPE_NODE:
        inner = [c for c in node.named_children if c.type != COMMENT_NODE]
        node = inner[0] if inner else None
    return node


def _pointee(pointer: Node) -> Optional[Node]:
    inner = [c for c in pointer.named_children if c.type != COMMENT_NODE]
    return _unwrap(inner[0]) if inner else None


def _type_identifier(node: Optional[Node]) -> str:
    if node is not None and node.type == TYPE_IDENTIFIER_NODE:
        return node.text.decode("utf-8")
    return ""


def _resolve_element(element: Optional[Node]) -> TypeResolution:
    """Resolve the element type of a slice, array, or variadic parameter."""
    element = _unwrap(element)
    if element is not None and element.type == POINTER_TYPE_NODE:
        name = _type_identifier(_pointee(element))
        if name:
            return TypeResolution(type_name=name, is_pointer=True, is_slice=True)
        return TypeResolution(is_slice=True)
    return TypeResolution(type_name=_type_identifier(element), is_slice=True)


def resolve_type_expression(node: Optional[Node]) -> TypeResolution:
    """Resolve a declared type expression.

    Precedence:
        1. ``[]X`` / ``[N]X``: slice of X, where X may be ``*Y``
        2. ``*Y``: pointer to Y
        3. ``T``: plain named type
        4. anything else: ``TypeResolution.UNRESOLVED``

    Only plain named element and pointee types are resolved; ``[]pkg.T``
    keeps ``is_slice`` but has an empty type name.

    Args:
        node: The type expression node, or None.

    Returns:
        The resolution outcome. Never raises for unknown shapes.
    """
    node = _unwrap(node)
    if node is None:
        return TypeResolution.UNRESOLVED

    if node.type in SEQUENCE_TYPE_NODES:
        return _resolve_element(node.child_by_field_name("element"))

    if node.type == POINTER_TYPE_NODE:
        name = _type_identifier(_pointee(node))
        if name:
            return TypeResolution(type_name=name, is_pointer=True)
        return TypeResolution.UNRESOLVED

    name = _type_identifier(node)
    if name:
        return TypeResolution(type_name=name)

    logger.debug(
        "Unresolved type shape %s at line %d", node.type, node.start_point[0] + 1
    )
    return TypeResolution.UNRESOLVED


def _is_embedded_pointer(node: Node) -> bool:
    # Embedded struct members spell the pointer as a bare "*" token
    return any(child.type == "*" for child in node.children)


def extract_fields(node: Optional[Node]) -> List[Field]:
    """Extract one ``Field`` per declared name of a field-like node.

    ``x, y int`` yields two fields sharing the type; a node without names
    (embedded member, unnamed parameter or result) yields one anonymous field.

    Args:
        node: A field_declaration, parameter_declaration, or
            variadic_parameter_declaration node.

    Returns:
        The extracted fields in declaration order.
    """
    if node is None:
        return []

    names = [n.text.decode("utf-8") for n in node.children_by_field_name("name")]
    type_node = node.child_by_field_name("type")

    if node.type == VARIADIC_PARAMETER_NODE:
        resolution = _resolve_element(type_node)
    else:
        resolution = resolve_type_expression(type_node)
        if not names and _is_embedded_pointer(node) and resolution.resolved:
            resolution = TypeResolution(type_name=resolution.type_name, is_pointer=True)

    tag_node = node.child_by_field_name("tag")
    tag = tag_node.text.decode("utf-8") if tag_node is not None else None

    doc_lines = leading_comment_lines(node)
    comment_lines = trailing_comment_lines(node)

    def _make(name: str) -> Field:
        return Field(
            name=name,
            type_name=resolution.type_name,
            is_pointer=resolution.is_pointer,
            is_slice=resolution.is_slice,
            tag=tag,
            doc_lines=list(doc_lines),
            comment_lines=list(comment_lines),
        )

    if not names:
        return [_make("")]
    return [_make(name) for name in names]


def extract_field_list(node: Optional[Node]) -> List[Field]:
    """Flatten a parameter list, struct body, or bare result type into fields.

    Args:
        node: A parameter_list or field_declaration_list node, or the type
            node of a single unparenthesized result (``func f() error``).

    Returns:
        All fields in declaration order; empty for None or an empty list.
    """
    if node is None:
        return []

    if node.type in FIELD_LIST_NODES:
        fields: List[Field] = []
        for child in node.named_children:
            if child.type in FIELD_NODES:
                fields.extend(extract_fields(child))
        return fields

    resolution = resolve_type_expression(node)
    return [
        Field(
            type_name=resolution.type_name,
            is_pointer=resolution.is_pointer,
            is_slice=resolution.is_slice,
        )
    ]

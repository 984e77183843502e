"""
Syntax tree traversal and declaration extraction.

This module walks a parsed Go syntax tree and builds ``Struct``, ``Interface``
and ``Operation`` entities, together with their doc comments and the
annotations found in them.
"""

import logging
from typing import List, Optional, Union

from tree_sitter import Node, Tree

from annotation.parser import parse_annotations
from extraction.comments import leading_comment_lines
from extraction.config import (
    INTERFACE_METHOD_NODES,
    INTERFACE_TYPE_NODE,
    OPERATION_NODES,
    PACKAGE_CLAUSE_NODE,
    PACKAGE_IDENTIFIER_NODE,
    STRUCT_TYPE_NODE,
    TYPE_SPEC_NODES,
)
from extraction.fields import extract_field_list
from extraction.models import DeclarationShape, Interface, Operation, Struct

logger = logging.getLogger(__name__)


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def classify_node(node: Node) -> DeclarationShape:
    """Map a syntax node to the declaration shape it represents."""
    if node.type == PACKAGE_CLAUSE_NODE:
        return DeclarationShape.PACKAGE_CLAUSE

    if node.type in OPERATION_NODES:
        return DeclarationShape.OPERATION

    if node.type in TYPE_SPEC_NODES:
        type_node = node.child_by_field_name("type")
        if type_node is not None and type_node.type == STRUCT_TYPE_NODE:
            return DeclarationShape.STRUCT_TYPE
        if type_node is not None and type_node.type == INTERFACE_TYPE_NODE:
            return DeclarationShape.INTERFACE_TYPE

    return DeclarationShape.OTHER


def extract_package_name(node: Node) -> Optional[str]:
    """Extract the package name from a package_clause node."""
    if node.type != PACKAGE_CLAUSE_NODE:
        return None
    for child in node.named_children:
        if child.type == PACKAGE_IDENTIFIER_NODE:
            return _text(child)
    return None


def _type_spec_doc_lines(spec: Node) -> List[str]:
    """Doc lines of a type spec.

    ``type X struct{...}`` is documented above the ``type`` keyword. Inside
    ``type ( ... )`` a spec with its own doc comment uses it; the others
    fall back to the comment above ``type (``.
    """
    declaration = spec.parent
    if declaration is None:
        return leading_comment_lines(spec)
    grouped = any(child.type == "(" for child in declaration.children)
    if grouped:
        own = leading_comment_lines(spec)
        if own:
            return own
    return leading_comment_lines(declaration)


def extract_struct(node: Node) -> Optional[Struct]:
    """Build a ``Struct`` from a type spec whose type is a struct.

    Returns:
        The struct, or None if ``node`` is not a struct type spec.
    """
    if classify_node(node) is not DeclarationShape.STRUCT_TYPE:
        return None

    struct_type = node.child_by_field_name("type")
    body = next(
        (c for c in struct_type.named_children if c.type == "field_declaration_list"),
        None,
    )
    doc_lines = _type_spec_doc_lines(node)

    return Struct(
        name=_text(node.child_by_field_name("name")),
        fields=extract_field_list(body),
        doc_lines=doc_lines,
        annotations=parse_annotations(doc_lines),
    )


def _extract_interface_method(node: Node) -> Optional[Operation]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    doc_lines = leading_comment_lines(node)
    return Operation(
        name=_text(name_node),
        doc_lines=doc_lines,
        input_args=extract_field_list(node.child_by_field_name("parameters")),
        output_args=extract_field_list(node.child_by_field_name("result")),
        annotations=parse_annotations(doc_lines),
    )


def extract_interface(node: Node) -> Optional[Interface]:
    """Build an ``Interface`` from a type spec whose type is an interface.

    Embedded interfaces and type-set constraints are not methods and are
    skipped.

    Returns:
        The interface, or None if ``node`` is not an interface type spec.
    """
    if classify_node(node) is not DeclarationShape.INTERFACE_TYPE:
        return None

    interface_type = node.child_by_field_name("type")
    methods = []
    for child in interface_type.named_children:
        if child.type in INTERFACE_METHOD_NODES:
            method = _extract_interface_method(child)
            if method is not None:
                methods.append(method)

    doc_lines = _type_spec_doc_lines(node)
    return Interface(
        name=_text(node.child_by_field_name("name")),
        methods=methods,
        doc_lines=doc_lines,
        annotations=parse_annotations(doc_lines),
    )


def extract_operation(node: Node) -> Optional[Operation]:
    """Build an ``Operation`` from a function or method declaration.

    For methods the first receiver field becomes ``related_struct``.

    Returns:
        The operation, or None if ``node`` is not function-like.
    """
    if classify_node(node) is not DeclarationShape.OPERATION:
        return None

    related_struct = None
    receiver = node.child_by_field_name("receiver")
    if receiver is not None:
        receiver_fields = extract_field_list(receiver)
        if receiver_fields:
            related_struct = receiver_fields[0]

    doc_lines = leading_comment_lines(node)
    return Operation(
        name=_text(node.child_by_field_name("name")),
        doc_lines=doc_lines,
        related_struct=related_struct,
        input_args=extract_field_list(node.child_by_field_name("parameters")),
        output_args=extract_field_list(node.child_by_field_name("result")),
        annotations=parse_annotations(doc_lines),
    )


class SourceWalker:
    """Accumulates the entities declared in one Go file.

    Not reentrant: one walker per file, walked from a single thread.
    """

    def __init__(self, file_path: str = ""):
        self.file_path = file_path
        self.package_name = ""
        self.structs: List[Struct] = []
        self.operations: List[Operation] = []
        self.interfaces: List[Interface] = []

    def visit(self, node: Node) -> None:
        """Dispatch one node on its declaration shape."""
        shape = classify_node(node)

        if shape is DeclarationShape.OTHER:
            return

        if shape is DeclarationShape.PACKAGE_CLAUSE:
            if not self.package_name:
                self.package_name = extract_package_name(node) or ""

        elif shape is DeclarationShape.STRUCT_TYPE:
            struct = extract_struct(node)
            struct.package_name = self.package_name
            self.structs.append(struct)
            logger.debug(f"Extracted struct {struct.name} at {self.file_path}:{node.start_point[0] + 1}")

        elif shape is DeclarationShape.INTERFACE_TYPE:
            interface = extract_interface(node)
            interface.package_name = self.package_name
            for method in interface.methods:
                method.package_name = self.package_name
            self.interfaces.append(interface)
            logger.debug(f"Extracted interface {interface.name} at {self.file_path}:{node.start_point[0] + 1}")

        elif shape is DeclarationShape.OPERATION:
            operation = extract_operation(node)
            operation.package_name = self.package_name
            self.operations.append(operation)
            logger.debug(f"Extracted operation {operation.name} at {self.file_path}:{node.start_point[0] + 1}")

        else:
            raise ValueError(f"Unhandled declaration shape: {shape}")

    def walk(self, root: Union[Tree, Node]) -> "SourceWalker":
        """Visit every named node under ``root`` in pre-order."""
        if isinstance(root, Tree):
            root = root.root_node

        stack = [root]
        while stack:
            node = stack.pop()
            self.visit(node)
            stack.extend(reversed(node.named_children))
        return self


def walk_tree(tree: Tree, file_path: str = "") -> SourceWalker:
    """Walk a parsed file and return the populated walker.

    This is the main per-file entry point for extraction.
    """
    walker = SourceWalker(file_path).walk(tree)
    logger.debug(
        "Walked %s: package=%s structs=%d operations=%d interfaces=%d",
        file_path or "<source>",
        walker.package_name,
        len(walker.structs),
        len(walker.operations),
        len(walker.interfaces),
    )
    return walker

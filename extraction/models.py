"""
Data models for the structural model harvested from Go sources.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any, ClassVar

from annotation.models import Annotation


class DeclarationShape(Enum):
    """Declaration shapes the source walker recognizes.

    Every syntax node maps to exactly one shape; the walker dispatches on it.
    """

    PACKAGE_CLAUSE = "package_clause"
    STRUCT_TYPE = "struct_type"
    INTERFACE_TYPE = "interface_type"
    OPERATION = "operation"
    OTHER = "other"


@dataclass(frozen=True)
class TypeResolution:
    """Outcome of resolving a declared type expression.

    An unrecognized shape (map, channel, func, qualified or generic type)
    resolves to an empty ``type_name`` with both flags false.
    """

    type_name: str = ""
    is_pointer: bool = False
    is_slice: bool = False

    UNRESOLVED: ClassVar["TypeResolution"]

    @property
    def resolved(self) -> bool:
        return self.type_name != ""


TypeResolution.UNRESOLVED = TypeResolution()


@dataclass
class Field:
    """One struct member, argument, or return value.

    Attributes:
        name: Declared name; empty for embedded members and unnamed results
        type_name: Bare declared type name (element name for slices, pointee
            name for pointers); empty when the shape is not resolved
        is_pointer: Type is ``*T`` or ``[]*T``
        is_slice: Type is ``[]T``, ``[N]T`` or ``[]*T``
        tag: Raw struct tag literal including its quotes, or None
        doc_lines: Comment lines directly above the field
        comment_lines: Comment lines trailing the field on its own line
    """

    name: str = ""
    type_name: str = ""
    is_pointer: bool = False
    is_slice: bool = False
    tag: Optional[str] = None
    doc_lines: List[str] = field(default_factory=list)
    comment_lines: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Operation:
    """A free function, a method, or an interface method declaration.

    ``related_struct`` describes the receiver of a method and is None for free
    functions and interface methods. It is a descriptive link by type name,
    never rewritten by cross-linking.
    """

    name: str
    package_name: str = ""
    doc_lines: List[str] = field(default_factory=list)
    related_struct: Optional[Field] = None
    input_args: List[Field] = field(default_factory=list)
    output_args: List[Field] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    @property
    def is_method(self) -> bool:
        return self.related_struct is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "package_name": self.package_name,
            "doc_lines": list(self.doc_lines),
            "related_struct": self.related_struct.to_dict() if self.related_struct else None,
            "input_args": [arg.to_dict() for arg in self.input_args],
            "output_args": [arg.to_dict() for arg in self.output_args],
            "annotations": [a.to_dict() for a in self.annotations],
        }


@dataclass
class Struct:
    """A declared type made of named fields, plus the methods linked to it."""

    name: str
    package_name: str = ""
    fields: List[Field] = field(default_factory=list)
    doc_lines: List[str] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "package_name": self.package_name,
            "fields": [f.to_dict() for f in self.fields],
            "doc_lines": list(self.doc_lines),
            # Operations are listed by name only; the full entries live in
            # Harvest.operations.
            "operations": [o.name for o in self.operations],
            "annotations": [a.to_dict() for a in self.annotations],
        }


@dataclass
class Interface:
    """A declared method set."""

    name: str
    package_name: str = ""
    methods: List[Operation] = field(default_factory=list)
    doc_lines: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "package_name": self.package_name,
            "methods": [m.to_dict() for m in self.methods],
            "doc_lines": list(self.doc_lines),
            "annotations": [a.to_dict() for a in self.annotations],
        }


@dataclass
class Harvest:
    """Structural model of every file scanned in one aggregation call.

    Lists are ordered by file, then by position within the file.
    """

    structs: List[Struct] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)
    interfaces: List[Interface] = field(default_factory=list)

    def find_struct(self, name: str, package_name: Optional[str] = None) -> Optional[Struct]:
        for struct in self.structs:
            if struct.name == name and (package_name is None or struct.package_name == package_name):
                return struct
        return None

    def find_operation(self, name: str) -> Optional[Operation]:
        for operation in self.operations:
            if operation.name == name:
                return operation
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the harvest to a dictionary suitable for JSON serialization."""
        return {
            "structs": [s.to_dict() for s in self.structs],
            "operations": [o.to_dict() for o in self.operations],
            "interfaces": [i.to_dict() for i in self.interfaces],
        }

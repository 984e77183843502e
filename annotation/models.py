"""
Data models for doc-comment annotations and their schemas.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Tuple, Any


@dataclass(frozen=True)
class Annotation:
    """A declarative annotation parsed from one doc-comment line.

    Attributes:
        name: Annotation name, e.g. ``RestOperation`` for ``// @RestOperation(...)``
        attributes: Raw string attribute values keyed by attribute name
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict, hash=False)

    def get(self, key: str, default: str = "") -> str:
        return self.attributes.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "attributes": dict(self.attributes)}


@dataclass(frozen=True)
class AnnotationSchema:
    """Registered description of one annotation kind."""

    name: str
    required_attributes: Tuple[str, ...]
    validator: Callable[[Annotation], bool]

    def missing_attributes(self, annotation: Annotation) -> Tuple[str, ...]:
        """Required attributes that are absent or empty on ``annotation``."""
        return tuple(
            key for key in self.required_attributes
            if not annotation.attributes.get(key)
        )


class ValidationOutcome(str, Enum):
    """Result of validating an annotation against a registry."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"

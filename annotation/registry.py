"""
Annotation registry.

Generators register the annotation kinds they understand together with the
attributes those annotations require, then ask the registry whether an
annotation found in a doc comment authorizes them to act. The registry only
judges annotations it knows about: an unregistered name is reported as
``ValidationOutcome.UNKNOWN``, which is distinct from ``INVALID``.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from annotation.models import Annotation, AnnotationSchema, ValidationOutcome
from annotation.parser import parse_annotations

logger = logging.getLogger(__name__)

Validator = Callable[[Annotation], bool]


def required_attributes_validator(name: str, required_attributes: Sequence[str]) -> Validator:
    """Build the default validator for a schema.

    The validator accepts an annotation when its name equals ``name`` and every
    required attribute is present with a non-empty value.
    """
    required = tuple(required_attributes)

    def _validate(annotation: Annotation) -> bool:
        if annotation.name != name:
            return False
        return all(annotation.attributes.get(key) for key in required)

    return _validate


class AnnotationRegistry:
    """Table of annotation schemas keyed by annotation name.

    Registration normally happens once at startup; afterwards the registry is
    read-mostly. A lock serializes writers so registration from several
    threads cannot interleave with lookups.
    """

    def __init__(self) -> None:
        self._schemas: Dict[str, AnnotationSchema] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        required_attributes: Iterable[str] = (),
        validator: Optional[Validator] = None,
    ) -> AnnotationSchema:
        """Register (or replace) the schema for ``name``.

        Args:
            name: Annotation name the schema applies to.
            required_attributes: Attribute names that must be present and
                non-empty. Duplicates are collapsed, order is kept.
            validator: Predicate over an annotation. Defaults to
                ``required_attributes_validator(name, required_attributes)``.

        Returns:
            The stored schema.
        """
        if not name:
            raise ValueError("Annotation name must not be empty")

        required = tuple(dict.fromkeys(required_attributes))
        if validator is None:
            validator = required_attributes_validator(name, required)

        schema = AnnotationSchema(
            name=name,
            required_attributes=required,
            validator=validator,
        )
        with self._lock:
            replaced = name in self._schemas
            self._schemas[name] = schema

        if replaced:
            logger.debug("Replaced annotation schema %s", name)
        else:
            logger.debug("Registered annotation schema %s (required=%s)", name, list(required))
        return schema

    def schema_for(self, name: str) -> Optional[AnnotationSchema]:
        with self._lock:
            return self._schemas.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._schemas)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)

    def validate(self, annotation: Annotation) -> ValidationOutcome:
        """Validate an annotation against its registered schema.

        Returns:
            ``UNKNOWN`` when no schema is registered under the annotation's
            name, otherwise ``VALID`` or ``INVALID`` as decided by the
            schema's validator.
        """
        schema = self.schema_for(annotation.name)
        if schema is None:
            return ValidationOutcome.UNKNOWN

        if schema.validator(annotation):
            return ValidationOutcome.VALID

        logger.debug(
            "Annotation %s rejected (missing=%s)",
            annotation.name,
            list(schema.missing_attributes(annotation)),
        )
        return ValidationOutcome.INVALID

    def resolve_annotations(self, doc_lines: Iterable[str]) -> List[Annotation]:
        """Parse ``doc_lines`` and keep only annotations that validate."""
        return [
            annotation
            for annotation in parse_annotations(doc_lines)
            if self.validate(annotation) is ValidationOutcome.VALID
        ]

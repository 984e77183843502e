"""
Doc-comment annotations.

Parses declarative ``@Name(key = "value")`` annotations out of Go doc comments
and validates them against schemas registered by code generators.
"""

from annotation.models import Annotation, AnnotationSchema, ValidationOutcome
from annotation.parser import parse_annotation, parse_annotations, strip_comment_markers
from annotation.registry import AnnotationRegistry, required_attributes_validator

__all__ = [
    # Data models
    "Annotation",
    "AnnotationSchema",
    "ValidationOutcome",
    # Parsing
    "parse_annotation",
    "parse_annotations",
    "strip_comment_markers",
    # Registry
    "AnnotationRegistry",
    "required_attributes_validator",
]

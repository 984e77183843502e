"""
Doc-comment annotation parser.

Turns raw comment lines into ``Annotation`` values. Recognized lines look like::

    // @RestOperation( method = "GET", path = "/person/:uid" )
    // @Event aggregate=gambler

Lines without the ``@`` marker carry plain documentation and yield nothing.
Lines with the marker that do not follow the grammar are treated the same way:
extraction of the surrounding declaration must never fail on a comment.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from annotation.models import Annotation

logger = logging.getLogger(__name__)

ANNOTATION_MARKER = "@"

_NAME_RE = re.compile(r"@(?P<name>[A-Za-z_][A-Za-z0-9_.\-]*)")
_ATTRIBUTE_RE = re.compile(
    r"\s*(?P<key>[A-Za-z_][A-Za-z0-9_.\-]*)\s*=\s*"
    r"(?:\"(?P<quoted>(?:[^\"\\]|\\.)*)\"|(?P<bare>[^\s,()\"=]+))\s*"
)
_ESCAPE_RE = re.compile(r"\\(.)")


def strip_comment_markers(line: str) -> str:
    """Remove ``//`` or ``/* */`` delimiters and surrounding whitespace."""
    text = line.strip()
    if text.startswith("//"):
        text = text[2:]
    else:
        if text.startswith("/*"):
            text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
        # Continuation stars inside block comments
        text = text.strip().lstrip("*")
    return text.strip()


def _parse_attributes(body: str, parenthesized: bool) -> Optional[Dict[str, str]]:
    attributes: Dict[str, str] = {}
    pos = 0
    expect_attribute = False
    while pos < len(body):
        match = _ATTRIBUTE_RE.match(body, pos)
        if match is None:
            return None

        key = match.group("key")
        if key in attributes:
            return None

        quoted = match.group("quoted")
        if quoted is not None:
            attributes[key] = _ESCAPE_RE.sub(r"\1", quoted)
        else:
            attributes[key] = match.group("bare")

        pos = match.end()
        expect_attribute = False
        if pos < len(body):
            if body[pos] == ",":
                pos += 1
                expect_attribute = True
                # A trailing comma before the closing paren is fine
                if not body[pos:].strip():
                    break
            elif parenthesized:
                return None

    if expect_attribute and not parenthesized:
        return None
    return attributes


def parse_annotation(line: str) -> Optional[Annotation]:
    """Parse a single comment line into an annotation.

    Args:
        line: Raw comment text, delimiters included.

    Returns:
        The parsed annotation, or None when the line is plain documentation
        or a malformed annotation.
    """
    text = strip_comment_markers(line)
    if not text.startswith(ANNOTATION_MARKER):
        return None

    match = _NAME_RE.match(text)
    if match is None:
        logger.debug("Ignoring malformed annotation line: %r", line)
        return None

    name = match.group("name")
    rest = text[match.end():].strip()

    if rest.startswith("("):
        if not rest.endswith(")"):
            logger.debug("Unbalanced parentheses in annotation line: %r", line)
            return None
        attributes = _parse_attributes(rest[1:-1].strip(), parenthesized=True)
    elif rest and not text[match.end()].isspace():
        # "@Name" must be followed by whitespace or "(" before attributes
        attributes = None
    else:
        attributes = _parse_attributes(rest, parenthesized=False)

    if attributes is None:
        logger.debug("Ignoring malformed annotation attributes: %r", line)
        return None

    return Annotation(name=name, attributes=attributes)


def parse_annotations(doc_lines: Iterable[str]) -> List[Annotation]:
    """Parse every annotation found in an ordered sequence of comment lines."""
    annotations = []
    for line in doc_lines:
        # A block comment can span several physical lines
        for physical_line in line.splitlines() or [line]:
            annotation = parse_annotation(physical_line)
            if annotation is not None:
                annotations.append(annotation)
    return annotations

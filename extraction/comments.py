"""
Comment association for Go declarations.

A declaration's doc comment is the group of comments that ends on the line
directly above it with no blank line in between. A comment that shares its
line with a preceding token belongs to that token and never to the next
declaration.
"""

from typing import List, Optional

from tree_sitter import Node

from extraction.config import COMMENT_NODE


def comment_text(node: Node) -> str:
    """Raw text of a comment node, delimiters included."""
    return (node.text or b"").decode("utf-8").rstrip("\r")


def _is_blank_token(node: Node) -> bool:
    # Statement terminators ("\n") show up as anonymous siblings
    return not node.is_named and not (node.text or b"").strip()


def _previous_token(node: Node) -> Optional[Node]:
    sibling = node.prev_sibling
    while sibling is not None and _is_blank_token(sibling):
        sibling = sibling.prev_sibling
    return sibling


def is_trailing_comment(comment: Node) -> bool:
    """Check whether a comment sits on the same line as the token before it."""
    previous = _previous_token(comment)
    if previous is None or previous.end_point[0] != comment.start_point[0]:
        return False
    if previous.type == COMMENT_NODE:
        return is_trailing_comment(previous)
    return True


def leading_comment_lines(node: Node) -> List[str]:
    """Collect the doc comment lines directly preceding ``node``.

    Args:
        node: A declaration, type spec, field, or interface method node.

    Returns:
        Raw comment texts in source order; empty if there is no doc comment.
    """
    lines = []
    expected_row = node.start_point[0]
    sibling = node.prev_sibling

    while sibling is not None:
        if _is_blank_token(sibling):
            sibling = sibling.prev_sibling
            continue
        if sibling.type != COMMENT_NODE:
            break
        # A blank line ends the comment group
        if expected_row - sibling.end_point[0] > 1:
            break
        if is_trailing_comment(sibling):
            break
        lines.append(comment_text(sibling))
        expected_row = sibling.start_point[0]
        sibling = sibling.prev_sibling

    lines.reverse()
    return lines


def trailing_comment_lines(node: Node) -> List[str]:
    """Collect comments that start on the last line of ``node``."""
    lines = []
    end_row = node.end_point[0]
    sibling = node.next_sibling

    while sibling is not None and sibling.start_point[0] == end_row:
        if sibling.type == COMMENT_NODE:
            lines.append(comment_text(sibling))
        elif not (_is_blank_token(sibling) or sibling.type == ","):
            break
        sibling = sibling.next_sibling

    return lines

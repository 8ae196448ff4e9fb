"""
Column formatter for LC-2K source.

Lays each line out as fixed columns:

    label   opcode  regA    regB            offset # comment
    ^0      ^8      ^16     ^24             ^40      (default tab stops)

Field i (label, opcode, operand 0..2) is padded out to tab_stops[i], or by
a single space when the field already runs past that stop. An indented line
has an empty label field, so its opcode lands on the first stop. The trailing
comment is re-attached after exactly one space.

The layout is a fixed point: fields start exactly on their stops, nothing is
padded after the last field, and comment-only lines carry no indentation. A
line this module produced therefore comes back unchanged, and formatting a
whole document twice yields no edits the second time.

Stateless and per-line; nothing here knows about the validator.
"""

from __future__ import annotations
import logging
from typing import List, Sequence, Tuple

from .config import DEFAULT_COMMENT_TOKEN, DEFAULT_TAB_STOPS
from .document import Document
from .preprocess import split_comment

__all__ = ['MAX_ALIGNED_FIELDS', 'align_line', 'format_document', 'apply_edits']

logger = logging.getLogger(__name__)

# label, opcode, three operands
MAX_ALIGNED_FIELDS = 5

Edit = Tuple[int, str]


def _fields(code: str) -> List[str]:
    fields = code.split()
    if code[:1].isspace():
        fields.insert(0, "")  # no label
    return fields


def align_line(line: str, tab_stops: Sequence[int] = DEFAULT_TAB_STOPS,
               comment_token: str = DEFAULT_COMMENT_TOKEN) -> str:
    """Return *line* laid out on *tab_stops*. Aligned input comes back unchanged."""
    code, comment = split_comment(line, comment_token)
    code = code.rstrip()

    if not code.strip():
        if not comment:
            return line  # blank line
        return comment  # comment-only: drop the indentation

    fields = _fields(code)
    out = fields[0]
    for i, text in enumerate(fields[1:]):
        if i < MAX_ALIGNED_FIELDS and i < len(tab_stops):
            pad = tab_stops[i] - len(out)
            out += " " * max(pad, 1)
        else:
            out += " "
        out += text

    if comment:
        out += " " + comment
    return out


def format_document(document: Document, tab_stops: Sequence[int] = DEFAULT_TAB_STOPS,
                    comment_token: str = DEFAULT_COMMENT_TOKEN) -> List[Edit]:
    """Return (line index, replacement) for every line whose layout changes.

    The caller applies the whole list as one edit.
    """
    edits = []
    for i, line in enumerate(document.lines):
        aligned = align_line(line, tab_stops, comment_token)
        if aligned != line:
            edits.append((i, aligned))
    logger.debug("Formatted %s: %d of %d line(s) changed",
                 document.uri, len(edits), document.line_count)
    return edits


def apply_edits(lines: Sequence[str], edits: Sequence[Edit]) -> List[str]:
    """Apply a batch of line replacements, returning the new line list."""
    result = list(lines)
    for index, text in edits:
        if not 0 <= index < len(result):
            raise IndexError(f"edit for line {index} outside document ({len(result)} lines)")
        result[index] = text
    return result

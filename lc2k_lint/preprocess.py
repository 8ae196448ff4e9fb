"""
Line preprocessor for LC-2K source.

Splits off end-of-line comments and cuts the remaining text into tokens that
remember their column in the raw line. The code part is always a prefix of
the raw line (nothing is stripped from the left), so a token's column in the
code text is also its column in the raw text.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .classify import is_label_name, is_mnemonic
from .config import DEFAULT_COMMENT_TOKEN

__all__ = ['DEFAULT_COMMENT_TOKEN', 'SourceLine', 'Token',
           'split_comment', 'read_lines', 'tokenize', 'label_skip']

TOKEN_RE = re.compile(r'\S+')


@dataclass(frozen=True)
class Token:
    text: str
    col: int

    @property
    def end(self) -> int:
        return self.col + len(self.text)

    def __repr__(self):
        return f"Token({self.text!r}, C{self.col})"


@dataclass(frozen=True)
class SourceLine:
    """One raw document line plus its comment-stripped code text."""
    index: int
    raw: str
    code: str = ""
    comment: str = ""
    tokens: Tuple[Token, ...] = field(default=(), repr=False)

    @property
    def is_blank(self) -> bool:
        return not self.tokens


def split_comment(line: str, comment_token: str = DEFAULT_COMMENT_TOKEN) -> Tuple[str, str]:
    """Return (code, comment) for *line*.

    ``comment`` starts with the comment token itself and is empty when the
    token does not occur. ``code + comment == line`` always holds.
    """
    if not comment_token:
        raise ValueError("comment token must be a non-empty string")
    pos = line.find(comment_token)
    if pos < 0:
        return line, ""
    return line[:pos], line[pos:]


def tokenize(code: str) -> Tuple[Token, ...]:
    """Split *code* on whitespace runs, keeping each token's column."""
    return tuple(Token(m.group(0), m.start()) for m in TOKEN_RE.finditer(code))


def read_lines(lines: Iterable[str],
               comment_token: str = DEFAULT_COMMENT_TOKEN) -> List[SourceLine]:
    """Preprocess every line of a document."""
    result = []
    for i, raw in enumerate(lines):
        code, comment = split_comment(raw, comment_token)
        result.append(SourceLine(index=i, raw=raw, code=code,
                                 comment=comment, tokens=tokenize(code)))
    return result


def label_skip(tokens: Tuple[Token, ...]) -> Optional[Token]:
    """Return the leading label token, or None if the line has no label.

    The first token is a label only when it is label-shaped AND the token
    after it is a known opcode or directive; otherwise ``lw 0 1 five`` would
    read ``lw`` as a label.
    """
    if len(tokens) < 2:
        return None
    first, second = tokens[0], tokens[1]
    if is_label_name(first.text) and is_mnemonic(second.text):
        return first
    return None

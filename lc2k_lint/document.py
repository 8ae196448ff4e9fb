"""
Source document: an identity plus its ordered lines.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

__all__ = ['Document', 'LANGUAGE_ID', 'SOURCE_SUFFIXES']

LANGUAGE_ID = "lc2k"
SOURCE_SUFFIXES = ('.as', '.lc2k', '.asm')


@dataclass(frozen=True)
class Document:
    uri: str
    lines: Tuple[str, ...]
    language_id: str = LANGUAGE_ID

    def __post_init__(self):
        object.__setattr__(self, 'lines', tuple(self.lines))

    @classmethod
    def from_text(cls, uri: str, text: str, language_id: str = LANGUAGE_ID) -> "Document":
        # splitlines() would also split on form feeds etc.; editors only split on newlines
        lines = text.split('\n')
        lines = [line[:-1] if line.endswith('\r') else line for line in lines]
        if len(lines) > 1 and lines[-1] == '':
            lines.pop()
        return cls(uri, lines, language_id)

    @classmethod
    def from_path(cls, path) -> "Document":
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        language_id = LANGUAGE_ID if path.suffix.lower() in SOURCE_SUFFIXES else "plaintext"
        return cls.from_text(str(path), text, language_id)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def with_lines(self, lines) -> "Document":
        return Document(self.uri, tuple(lines), self.language_id)

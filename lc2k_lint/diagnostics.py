"""
Diagnostic records and sinks.

A Diagnostic is one positioned warning over a column range of one line.
Analysis results are handed to a sink as a complete set per document; the
sink replaces whatever it held for that document. DiagnosticCollection is
the in-memory sink used by the session layer and the CLI.
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Protocol, Sequence

__all__ = ['Severity', 'Diagnostic', 'DiagnosticSink', 'DiagnosticCollection',
           'make_diagnostic', 'SOURCE_TAG']

logger = logging.getLogger(__name__)

SOURCE_TAG = 'lc2k'


class Severity(enum.Enum):
    # Same levels as the editor's DiagnosticSeverity, so a sink can map them
    # one to one. The checker itself only reports WARNING.
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class Diagnostic:
    line: int
    start: int
    end: int
    message: str
    severity: Severity = Severity.WARNING
    source: str = SOURCE_TAG

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "start": self.start,
            "end": self.end,
            "message": self.message,
            "severity": self.severity.value,
            "source": self.source,
        }

    def format(self, path: str = "") -> str:
        """Render as ``path:line:col: warning: message`` (1-based line/col)."""
        where = f"{path}:" if path else ""
        return f"{where}{self.line + 1}:{self.start + 1}: {self.severity.value}: {self.message}"

    def __str__(self):
        return self.format()


def make_diagnostic(raw: str, line: int, start: int, end: int, message: str) -> Diagnostic:
    """Build a warning for columns [start, end) of the raw line *raw*.

    A range outside the raw text means a column was computed against the
    wrong string. That is a bug in the caller: fail under ``__debug__``,
    otherwise log it and fall back to the whole line.
    """
    if not (0 <= start <= end <= len(raw)):
        if __debug__:
            raise AssertionError(
                f"diagnostic range {start}..{end} outside line {line} (len {len(raw)})")
        logger.warning("Line %d: range %d..%d out of bounds, using whole line",
                       line, start, end)
        start, end = 0, len(raw)
    return Diagnostic(line=line, start=start, end=end, message=message)


class DiagnosticSink(Protocol):
    """Receiver of per-document diagnostic sets."""

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        ...

    def delete(self, uri: str) -> None:
        ...


class DiagnosticCollection:
    """Latest diagnostic set per document identity.

    ``set`` replaces, never appends.
    """

    def __init__(self, name: str = SOURCE_TAG):
        self.name = name
        self._entries: Dict[str, List[Diagnostic]] = {}

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self._entries[uri] = list(diagnostics)
        logger.debug("%s: %d diagnostic(s) for %s", self.name, len(diagnostics), uri)

    def delete(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def get(self, uri: str) -> Optional[List[Diagnostic]]:
        entry = self._entries.get(uri)
        return list(entry) if entry is not None else None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

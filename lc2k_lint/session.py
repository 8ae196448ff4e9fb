"""
Editor-facing event layer.

Maps host events onto the engine:
    opened / changed  → full re-analysis, replacing the document's set
    closed            → delete the document's set
    format command    → one batch of line edits

Only documents whose language id is "lc2k" are analysed. Every trigger
re-scans the whole document; a newer event simply supersedes the older
result.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from .config import LintConfig
from .diagnostics import DiagnosticCollection, DiagnosticSink
from .document import Document, LANGUAGE_ID
from .formatter import Edit, format_document
from .validator import analyze

__all__ = ['LintSession']

logger = logging.getLogger(__name__)


class LintSession:
    """Owns the per-document diagnostic store for one editor session."""

    def __init__(self, config: Optional[LintConfig] = None,
                 sink: Optional[DiagnosticSink] = None):
        self.config = config or LintConfig()
        self.sink = sink if sink is not None else DiagnosticCollection()

    def _refresh(self, document: Document) -> bool:
        if document.language_id != LANGUAGE_ID:
            logger.debug("Skipping %s (language %s)", document.uri, document.language_id)
            return False
        analyze(document, self.sink, self.config)
        return True

    def open(self, document: Document) -> bool:
        """Document opened. Returns True if it was analysed."""
        return self._refresh(document)

    def change(self, document: Document) -> bool:
        """Document edited. Returns True if it was analysed."""
        return self._refresh(document)

    def close(self, document: Document) -> None:
        self.sink.delete(document.uri)

    def open_all(self, documents: Iterable[Document]) -> int:
        """Analyse every already-open document (session start)."""
        return sum(1 for doc in documents if self._refresh(doc))

    def format(self, document: Document) -> List[Edit]:
        """Alignment edits for *document* using the session's config."""
        return format_document(document, self.config.tab_stops, self.config.comment_token)

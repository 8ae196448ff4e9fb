"""
lc2k_lint: diagnostics and column formatting for LC-2K assembly
================================================================
A static checker for the LC-2K educational ISA (add, nor, lw, sw, beq,
jalr, halt, noop, .fill). It reports position-tagged warnings and never
rejects a file outright. A separate formatter aligns lines on tab stops.

Architecture:
    ┌──────────┐    ┌────────────┐    ┌──────────┐    ┌──────────┐    ┌─────────────┐
    │  Lines   │───>│ Preprocess │───>│  Pass 1  │───>│  Pass 2  │───>│ Diagnostics │
    │ (text)   │    │ (tokens)   │    │ (labels) │    │ (checks) │    │   (sink)    │
    └──────────┘    └────────────┘    └──────────┘    └──────────┘    └─────────────┘

    - preprocess.py:  comment splitting, tokens with raw columns
    - classify.py:    register / number / label / opcode predicates
    - labels.py:      label table + duplicate detection
    - validator.py:   operand checks, .fill ordering, two-pass driver
    - diagnostics.py: Diagnostic records, sinks
    - formatter.py:   tab-stop column alignment
    - session.py:     open / change / close / format events
    - config.py:      tabStops / commentToken settings
"""

__version__ = "0.3.0"

from typing import Optional

from .classify import OPCODES, DIRECTIVES, is_register, is_number, is_label_name
from .config import LintConfig, ConfigError, load_config, find_config
from .diagnostics import Diagnostic, DiagnosticCollection, Severity
from .document import Document
from .formatter import align_line, format_document, apply_edits
from .labels import collect_labels
from .preprocess import split_comment
from .session import LintSession
from .validator import Analyzer, analyze, check_lines


def lint_source(source: str, config: Optional[LintConfig] = None) -> list:
    """Check LC-2K source text and return its diagnostics."""
    return check_lines(Document.from_text("<string>", source).lines, config)


def format_source(source: str, config: Optional[LintConfig] = None) -> str:
    """Return LC-2K source text with every line column-aligned."""
    config = config or LintConfig()
    doc = Document.from_text("<string>", source)
    edits = format_document(doc, config.tab_stops, config.comment_token)
    text = '\n'.join(apply_edits(doc.lines, edits))
    if source.endswith('\n'):
        text += '\n'
    return text

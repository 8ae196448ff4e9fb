"""
Pass 2: instruction validation, plus the two-pass driver.

How a run works:
  Pass 1 (labels.py): collect label definitions, flag duplicates.
  Pass 2 (here):      per line, skip an optional label, classify the
                      operative token, check operand count and operand kinds,
                      and remember instructions that follow a .fill.
  Ordering:           once pass 2 is done, every instruction line recorded
                      after the first .fill gets a whole-line warning. Data
                      words must sit after all code in the address space.

Pass 2 decides whether to skip a leading label on its own, from the shape of
the tokens. It never reads pass 1's table: pass 1 answers "is this a unique
label definition", pass 2 only needs "is this token a label to step over".

Nothing here raises on bad input. Every problem becomes a warning on the
offending token or line and the scan carries on.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .classify import (OPERAND_COUNTS, R_TYPE, I_TYPE, J_TYPE,
                       is_register, is_number, is_label_name, is_opcode, is_directive)
from .config import LintConfig
from .diagnostics import Diagnostic, DiagnosticSink, make_diagnostic
from .document import Document
from .labels import LabelTable, collect_labels
from .preprocess import SourceLine, Token, label_skip, read_lines

__all__ = ['OrderingState', 'Analyzer', 'AnalysisResult', 'check_lines', 'analyze',
           'MSG_UNKNOWN', 'MSG_FILL_NO_ARG', 'MSG_FILL_BAD_ARG', 'MSG_MISSING',
           'MSG_REGISTERS', 'MSG_REG_AB', 'MSG_OFFSET', 'MSG_ORDER']

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Messages
# ──────────────────────────────────────────────

MSG_UNKNOWN = "Unknown opcode or directive: {}"
MSG_FILL_NO_ARG = ".fill requires an argument"
MSG_FILL_BAD_ARG = "Invalid .fill argument. Use number or defined label"
MSG_MISSING = "Missing operands for {}"
MSG_REGISTERS = "Registers must be 0-7"
MSG_REG_AB = "regA and regB must be 0-7"
MSG_OFFSET = "offset must be number or label"
MSG_ORDER = "Instructions appear after .fill. Place all instructions before any .fill"


@dataclass
class OrderingState:
    """Where the first .fill was, and which instructions came after it."""
    first_fill: Optional[int] = None
    after_fill: List[int] = field(default_factory=list)

    @property
    def seen_fill(self) -> bool:
        return self.first_fill is not None


@dataclass
class AnalysisResult:
    labels: LabelTable
    diagnostics: List[Diagnostic]
    ordering: OrderingState


def _is_value(token: str) -> bool:
    """Numeric literal or label-shaped name (defined or not)."""
    return is_number(token) or is_label_name(token)


class Analyzer:
    """Two-pass LC-2K checker.

    Usage:
        result = Analyzer(config).run(lines)
        for d in result.diagnostics: ...

    An Analyzer holds no state between runs; every run starts from scratch.
    """

    def __init__(self, config: Optional[LintConfig] = None):
        self.config = config or LintConfig()
        self._diags: List[Diagnostic] = []
        self._ordering = OrderingState()

    def run(self, lines: Sequence[str]) -> AnalysisResult:
        source = read_lines(lines, self.config.comment_token)
        self._diags = []
        self._ordering = OrderingState()

        # Pass 1: label table + duplicates
        labels, dup_diags = collect_labels(source)
        self._diags.extend(dup_diags)

        # Pass 2: per-line validation
        for line in source:
            if line.is_blank:
                continue
            self._pass2_line(line)

        # Deferred ordering check
        if self._ordering.seen_fill:
            for index in self._ordering.after_fill:
                raw = source[index].raw
                self._diags.append(make_diagnostic(raw, index, 0, len(raw), MSG_ORDER))

        logger.debug("Checked %d line(s): %d label(s), %d diagnostic(s)",
                     len(source), len(labels), len(self._diags))
        return AnalysisResult(labels=labels, diagnostics=self._diags,
                              ordering=self._ordering)

    # ── per-line checks ──

    def _warn(self, line: SourceLine, tok: Token, message: str):
        self._diags.append(make_diagnostic(line.raw, line.index, tok.col, tok.end, message))

    def _pass2_line(self, line: SourceLine):
        tokens = line.tokens
        idx = 1 if label_skip(tokens) is not None else 0
        if idx >= len(tokens):
            return

        op_tok = tokens[idx]
        operands = tokens[idx + 1:]
        op = op_tok.text.lower()

        if not (is_opcode(op) or is_directive(op)):
            self._warn(line, op_tok, MSG_UNKNOWN.format(op_tok.text))
            return

        if is_directive(op):
            self._check_fill(line, op_tok, operands)
            return

        if self._ordering.seen_fill:
            self._ordering.after_fill.append(line.index)

        need = OPERAND_COUNTS[op]
        if len(operands) < need:
            self._warn(line, op_tok, MSG_MISSING.format(op))
            return

        if op in R_TYPE:
            for operand in operands[:3]:
                if not is_register(operand.text):
                    self._warn(line, operand, MSG_REGISTERS)

        elif op in I_TYPE:
            reg_a, reg_b, offset = operands[:3]
            if not (is_register(reg_a.text) and is_register(reg_b.text)):
                self._warn(line, reg_a, MSG_REG_AB)
            if not _is_value(offset.text):
                self._warn(line, offset, MSG_OFFSET)

        elif op in J_TYPE:
            reg_a, reg_b = operands[:2]
            if not (is_register(reg_a.text) and is_register(reg_b.text)):
                self._warn(line, reg_a, MSG_REG_AB)

        # halt / noop: nothing to check

    def _check_fill(self, line: SourceLine, op_tok: Token, operands: Sequence[Token]):
        if self._ordering.first_fill is None:
            self._ordering.first_fill = line.index

        if not operands:
            self._warn(line, op_tok, MSG_FILL_NO_ARG)
        elif not _is_value(operands[0].text):
            self._warn(line, operands[0], MSG_FILL_BAD_ARG)


# ──────────────────────────────────────────────
# Convenience functions
# ──────────────────────────────────────────────

def check_lines(lines: Sequence[str], config: Optional[LintConfig] = None) -> List[Diagnostic]:
    """Check raw document lines, return all diagnostics."""
    return Analyzer(config).run(lines).diagnostics


def analyze(document: Document, sink: DiagnosticSink,
            config: Optional[LintConfig] = None) -> None:
    """Check *document* and publish the full result set to *sink*.

    Replaces any earlier set for the same document. Same text in, same set out.
    """
    diagnostics = check_lines(document.lines, config)
    sink.set(document.uri, diagnostics)

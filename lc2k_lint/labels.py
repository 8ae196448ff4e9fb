"""
Pass 1: label collection.

Builds the label table for a whole document and reports every redefinition
of a name. Runs to completion before pass 2 so the duplicate check sees the
entire file. Labels that are never referenced, or references to labels that
are never defined, are not checked.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Sequence, Tuple

from .diagnostics import Diagnostic, make_diagnostic
from .preprocess import SourceLine, label_skip

__all__ = ['LabelTable', 'collect_labels']

logger = logging.getLogger(__name__)

LabelTable = Dict[str, int]


def collect_labels(lines: Sequence[SourceLine]) -> Tuple[LabelTable, List[Diagnostic]]:
    """Return (label -> defining line index, duplicate-label diagnostics).

    Names are case-sensitive; the first definition wins.
    """
    labels: LabelTable = {}
    diags: List[Diagnostic] = []

    for line in lines:
        if line.is_blank:
            continue
        label = label_skip(line.tokens)
        if label is None:
            continue
        if label.text in labels:
            diags.append(make_diagnostic(line.raw, line.index, label.col, label.end,
                                         f"Duplicate label: {label.text}"))
        else:
            labels[label.text] = line.index

    logger.debug("Pass 1: %d label(s), %d duplicate(s)", len(labels), len(diags))
    return labels, diags

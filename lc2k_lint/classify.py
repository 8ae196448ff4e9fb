"""
Token classifiers for LC-2K assembly.

Pure predicates over single whitespace-delimited tokens. Nothing here looks
at surrounding lines; the passes in labels.py and validator.py combine them.

Instruction formats (LC-2K, 8 registers, 16-bit offset field):
  R-type  add/nor        regA regB destReg
  I-type  lw/sw/beq      regA regB offset     (offset = number or label)
  J-type  jalr           regA regB
  O-type  halt/noop      (no operands)
  data    .fill          number or label
"""

from __future__ import annotations
import re
from typing import Dict, FrozenSet

__all__ = [
    'OPCODES', 'DIRECTIVES', 'OPERAND_COUNTS',
    'R_TYPE', 'I_TYPE', 'J_TYPE', 'O_TYPE',
    'is_register', 'is_number', 'is_label_name',
    'is_opcode', 'is_directive', 'is_mnemonic',
]


# ──────────────────────────────────────────────
# Opcode / directive tables
# ──────────────────────────────────────────────

R_TYPE: FrozenSet[str] = frozenset({'add', 'nor'})
I_TYPE: FrozenSet[str] = frozenset({'lw', 'sw', 'beq'})
J_TYPE: FrozenSet[str] = frozenset({'jalr'})
O_TYPE: FrozenSet[str] = frozenset({'halt', 'noop'})

OPCODES: FrozenSet[str] = R_TYPE | I_TYPE | J_TYPE | O_TYPE
DIRECTIVES: FrozenSet[str] = frozenset({'.fill'})

# Minimum operand count per opcode. Anything past these is comment text.
OPERAND_COUNTS: Dict[str, int] = {}
for _op in R_TYPE | I_TYPE:
    OPERAND_COUNTS[_op] = 3
for _op in J_TYPE:
    OPERAND_COUNTS[_op] = 2
for _op in O_TYPE:
    OPERAND_COUNTS[_op] = 0
del _op


# ──────────────────────────────────────────────
# Patterns
# ──────────────────────────────────────────────

REGISTER_RE = re.compile(r'^[0-7]$')
NUMBER_RE = re.compile(r'^-?(0[xX][0-9A-Fa-f]+|[0-9]+)$')
# 6 chars max: labels have to fit the assembler's symbol field
LABEL_RE = re.compile(r'^[A-Za-z][A-Za-z0-9]{0,5}$')


def is_register(token: str) -> bool:
    """True for a single digit 0-7."""
    return REGISTER_RE.match(token) is not None


def is_number(token: str) -> bool:
    """Decimal or 0x-hex literal, optionally negative. No range check."""
    return NUMBER_RE.match(token) is not None


def is_label_name(token: str) -> bool:
    return LABEL_RE.match(token) is not None


def is_opcode(token: str) -> bool:
    return token.lower() in OPCODES


def is_directive(token: str) -> bool:
    return token.lower() in DIRECTIVES


def is_mnemonic(token: str) -> bool:
    """Known opcode or directive, case-insensitive."""
    return is_opcode(token) or is_directive(token)

# src/contexp/runtime/runner_api.py
from __future__ import annotations
from enum import IntEnum

__all__ = [
    "Termination",
    # int constants (jit-friendly)
    "NON_FINITE", "EXHAUSTED", "NEAR_ZERO",
    "Classification",
    "DIVERGENT_CODE", "UNDETERMINED_CODE",
]

class Termination(IntEnum):
    """How the sequence evaluator stopped for one point."""
    NON_FINITE = -1     # NaN in either component
    EXHAUSTED = 0       # all steps written, hand over to the cycle detector
    NEAR_ZERO = 1       # |F(n)| < safe_zero; payload is n

# Plain int constants for JIT friendliness in kernels
NON_FINITE: int = int(Termination.NON_FINITE)
EXHAUSTED: int = int(Termination.EXHAUSTED)
NEAR_ZERO: int = int(Termination.NEAR_ZERO)


class Classification(IntEnum):
    """
    Tagged meaning of a cell's result code.

    The integer code itself stays overloaded (a positive value is either a
    near-zero step index or a cycle length); this tag is carried next to it.
    """
    DIVERGENT = -1
    UNDETERMINED = 0
    NEAR_ZERO = 1
    CYCLE = 2


DIVERGENT_CODE: int = -1
UNDETERMINED_CODE: int = 0

# src/contexp/__init__.py
from __future__ import annotations

# Re-export frozen constants/types for stable imports
from contexp.runtime.runner_api import (
    Termination, Classification, NON_FINITE, EXHAUSTED, NEAR_ZERO,
    DIVERGENT_CODE, UNDETERMINED_CODE,
)
from .config import (
    SAFE_ZERO, DEFAULT_EPS, DEFAULT_MAX_LOOKBACK, DEFAULT_MAX_ITERATIONS,
    ScanConfig, load_config,
)
from .precision import WorkingPrecision, EXTENDED, DOUBLE, select_precision
from .runtime.buffers import SequenceBuffer, allocate_sequence
from .runtime.evaluator import EvalResult, evaluate, result_code, probe
from .analysis.cycles import detect_cycle
from .analysis.scan import GridDescriptor, GridScanner, ScanCell, classify_point, scan


__all__ = [
    # Core entry points
    "evaluate", "detect_cycle", "scan", "GridScanner", "GridDescriptor", "field",
    # Status codes
    "Termination", "Classification", "NON_FINITE", "EXHAUSTED", "NEAR_ZERO",
    "DIVERGENT_CODE", "UNDETERMINED_CODE",
    # Configuration and precision
    "SAFE_ZERO", "DEFAULT_EPS", "DEFAULT_MAX_LOOKBACK", "DEFAULT_MAX_ITERATIONS",
    "ScanConfig", "load_config",
    "WorkingPrecision", "EXTENDED", "DOUBLE", "select_precision",
    # Building blocks
    "SequenceBuffer", "allocate_sequence", "EvalResult", "result_code", "probe",
    "ScanCell", "classify_point",
]


def field(
    min_re, max_re, min_im, max_im,
    num_re: int = 20,
    num_im: int = 20,
    *,
    eps=DEFAULT_EPS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    precision: str | WorkingPrecision = "auto",
    jit: bool = False,
) -> GridScanner:
    """Build a scanner for a region in one call.

    This combines precision selection, `GridDescriptor.from_values()` and
    `GridScanner()`. Real-valued bounds may be given as decimal strings to
    keep every digit in extended precision.

    Example:
        Collect the code grid of a small region::

            from contexp import field

            scanner = field("-0.5", "0.5", "1.0", "2.0", 3, 3, eps="1e-15", max_iterations=100)
            codes = scanner.codes()      # shape (3, 4)
            scanner.step_re              # 0.25
    """
    prec = precision if isinstance(precision, WorkingPrecision) else select_precision(precision)
    desc = GridDescriptor.from_values(
        min_re, max_re, min_im, max_im,
        num_re=num_re, num_im=num_im, eps=eps, max_iterations=max_iterations, prec=prec,
    )
    return GridScanner(desc, jit=jit)

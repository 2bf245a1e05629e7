# src/contexp/runtime/evaluator.py
"""
Sequence evaluator for the continued exponential F(n) = exp(z * F(n-1)).

F(0) = 1 is not stored; the n-th computed term (n >= 2 in the step count)
lands in 1-based slot n-1, i.e. ``values[n-2]``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict
import warnings
import numpy as np

from contexp.config import SAFE_ZERO, PROBE_LENGTH
from contexp.errors import PrecisionFallbackWarning
from contexp.jit import jit_compile
from contexp.precision import WorkingPrecision, make_complex
from contexp.runtime.buffers import SequenceBuffer, allocate_sequence
from contexp.runtime.guards import get_guards
from contexp.runtime.runner_api import (
    Termination, NON_FINITE, EXHAUSTED, NEAR_ZERO,
    DIVERGENT_CODE, UNDETERMINED_CODE,
)

__all__ = [
    "EvalResult", "ProbeResult",
    "evaluate", "result_code", "probe", "get_evaluate_kernel", "use_jit",
]


@dataclass(frozen=True)
class EvalResult:
    termination: Termination
    step: int      # n for NEAR_ZERO, 0 otherwise
    length: int    # slots written (logical write length)


@dataclass(frozen=True)
class ProbeResult:
    code: int
    termination: Termination
    sequence: np.ndarray   # copy of the written prefix


# ---- Kernel ------------------------------------------------------------------

def _make_evaluate_kernel(isnan_complex: Callable, below_threshold: Callable) -> Callable:
    def _evaluate_kernel(z, start, buf, max_len, safe_zero):
        func = start
        n = 1
        for i in range(max_len):
            n += 1
            func = np.exp(z * func)
            buf[i] = func
            if isnan_complex(func):
                return NON_FINITE, 0, i + 1
            if below_threshold(func, safe_zero):
                return NEAR_ZERO, n, i + 1
        return EXHAUSTED, 0, max_len

    return _evaluate_kernel


_KERNELS: Dict[bool, Callable] = {}


def get_evaluate_kernel(jit: bool) -> Callable:
    kernel = _KERNELS.get(jit)
    if kernel is None:
        isnan_complex, below_threshold = get_guards(jit)
        kernel = jit_compile(_make_evaluate_kernel(isnan_complex, below_threshold), jit=jit).fn
        _KERNELS[jit] = kernel
    return kernel


def use_jit(jit: bool, dtype: np.dtype) -> bool:
    """Resolve a jit request against the buffer dtype (numba lacks long double)."""
    if jit and np.dtype(dtype) != np.dtype(np.complex128):
        warnings.warn(
            f"jit requested for {np.dtype(dtype).name}; numba supports complex128 only, "
            "running the Python kernel",
            PrecisionFallbackWarning,
            stacklevel=3,
        )
        return False
    return bool(jit)


# ---- Public API --------------------------------------------------------------

def evaluate(
    z,
    buffer: SequenceBuffer,
    max_len: int | None = None,
    *,
    safe_zero: float = SAFE_ZERO,
    jit: bool = False,
) -> EvalResult:
    """
    Fill ``buffer`` with F(1)..F(max_len) for parameter z, stopping early.

    Returns NON_FINITE on the first NaN component, NEAR_ZERO(n) on the first
    |F| < safe_zero, EXHAUSTED otherwise. ``buffer.length`` is set to the
    number of slots written, including the terminating one.
    """
    if max_len is None:
        max_len = buffer.capacity
    max_len = int(max_len)
    if max_len <= 0 or max_len > buffer.capacity:
        raise ValueError(f"max_len must be in 1..{buffer.capacity}; got {max_len}")

    ctype = buffer.dtype.type
    z = ctype(z)
    kernel = get_evaluate_kernel(use_jit(jit, buffer.dtype))

    buffer.reset()
    # Overflow and NaN are ordinary outcomes here.
    with np.errstate(over="ignore", invalid="ignore"):
        status, step, length = kernel(z, ctype(1), buffer.values, max_len, safe_zero)
    buffer.length = int(length)
    return EvalResult(Termination(int(status)), int(step), int(length))


def result_code(result: EvalResult) -> int:
    """Integer code for an evaluator result (0 means: ask the cycle detector)."""
    if result.termination == Termination.NON_FINITE:
        return DIVERGENT_CODE
    if result.termination == Termination.NEAR_ZERO:
        return result.step
    return UNDETERMINED_CODE


def probe(
    re,
    im,
    length: int = PROBE_LENGTH,
    *,
    prec: WorkingPrecision,
    safe_zero: float = SAFE_ZERO,
    jit: bool = False,
) -> ProbeResult:
    """Evaluate a single point on a private buffer and return its sequence."""
    buf = allocate_sequence(length, prec)
    res = evaluate(make_complex(re, im, prec), buf, length, safe_zero=safe_zero, jit=jit)
    return ProbeResult(result_code(res), res.termination, buf.prefix().copy())

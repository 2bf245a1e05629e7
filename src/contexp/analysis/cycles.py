# src/contexp/analysis/cycles.py
from __future__ import annotations

from typing import Callable, Dict
import numpy as np

from contexp.config import DEFAULT_EPS, DEFAULT_MAX_LOOKBACK
from contexp.jit import jit_compile
from contexp.runtime.buffers import SequenceBuffer
from contexp.runtime.evaluator import use_jit

__all__ = ["detect_cycle", "get_cycle_kernel"]


def _detect_cycle_kernel(seq, length, eps, max_lookback):
    # Walk back from the last written slot; the nearest match wins.
    if length < 2:
        return 0
    last = seq[length - 1]
    stop = max(0, length - 1 - max_lookback)
    k = 0
    for i in range(length - 2, stop - 1, -1):
        k += 1
        if abs(seq[i] - last) < eps:
            return k
    return 0


_KERNELS: Dict[bool, Callable] = {}


def get_cycle_kernel(jit: bool) -> Callable:
    kernel = _KERNELS.get(jit)
    if kernel is None:
        kernel = jit_compile(_detect_cycle_kernel, jit=jit).fn
        _KERNELS[jit] = kernel
    return kernel


def detect_cycle(
    seq: SequenceBuffer | np.ndarray,
    length: int | None = None,
    eps: float = DEFAULT_EPS,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
    *,
    jit: bool = False,
) -> int:
    """
    Backward distance from the last element to the nearest earlier element
    within ``eps``, searching at most ``max_lookback`` slots; 0 if none.

    ``length`` defaults to the buffer's logical length (or the array size)
    and never reaches beyond it, so stale slots are not read.
    """
    values = seq.values if isinstance(seq, SequenceBuffer) else np.asarray(seq)
    if length is None:
        length = seq.length if isinstance(seq, SequenceBuffer) else values.shape[0]
    length = int(length)
    if length > values.shape[0]:
        raise ValueError(f"length {length} exceeds sequence size {values.shape[0]}")
    if not eps > 0:
        raise ValueError(f"eps must be positive; got {eps}")
    max_lookback = int(max_lookback)
    if max_lookback < 1:
        raise ValueError(f"max_lookback must be >= 1; got {max_lookback}")

    eps = np.finfo(values.dtype).dtype.type(eps)

    kernel = get_cycle_kernel(use_jit(jit, values.dtype))
    return int(kernel(values, length, eps, max_lookback))

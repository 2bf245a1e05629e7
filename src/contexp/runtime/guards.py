from __future__ import annotations

from typing import Callable

from contexp.jit import jit_compile

__all__ = ["get_guards"]


def _isnan_complex_impl(v) -> bool:
    # NaN is the only value not equal to itself
    return v.real != v.real or v.imag != v.imag


def _below_threshold_impl(v, threshold) -> bool:
    return abs(v) < threshold


_JIT_GUARDS: tuple[Callable, Callable] | None = None


def get_guards(jit: bool) -> tuple[Callable, Callable]:
    """Return (isnan_complex, below_threshold), numba-compiled when jit=True."""
    global _JIT_GUARDS
    if not jit:
        return _isnan_complex_impl, _below_threshold_impl
    if _JIT_GUARDS is None:
        _JIT_GUARDS = (
            jit_compile(_isnan_complex_impl, jit=True).fn,
            jit_compile(_below_threshold_impl, jit=True).fn,
        )
    return _JIT_GUARDS

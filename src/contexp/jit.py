# src/contexp/jit.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from numba import njit

# JIT toggle applied *only here*.
# Kernels are plain Python functions; jit=False returns them untouched.

__all__ = ["JittedCallable", "jit_compile"]


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool


def jit_compile(fn: Callable, *, jit: bool = True) -> JittedCallable:
    """
    Wrap ``fn`` for the requested execution mode.

    jit=False returns the Python function untouched. jit=True returns a
    numba nopython dispatcher; a failure to build the dispatcher raises
    RuntimeError. Compilation itself is lazy, so typing errors surface as
    numba errors on the first call, specialized on that call's dtypes.
    Only complex128 kernels are ever jitted.
    """
    if not jit:
        return JittedCallable(fn=fn, jitted=False)

    try:
        compiled = njit(cache=False)(fn)
    except Exception as e:
        raise RuntimeError(
            f"JIT compilation with numba failed: {type(e).__name__}: {e}"
        ) from e
    return JittedCallable(fn=compiled, jitted=True)

# tests/unit/test_jit.py
"""jit_compile toggle: plain function passthrough and lazy numba dispatch."""
import numpy as np
import pytest
from numba.core.errors import TypingError

from contexp.jit import jit_compile


def _double(x):
    return x * 2


def _untypable(x):
    return x + "a"


def test_passthrough_without_jit():
    wrapped = jit_compile(_double, jit=False)
    assert wrapped.fn is _double
    assert not wrapped.jitted


def test_jit_dispatcher_runs_complex128():
    wrapped = jit_compile(_double, jit=True)
    assert wrapped.jitted
    assert wrapped.fn(np.complex128(1 + 2j)) == np.complex128(2 + 4j)


def test_typing_errors_surface_on_first_call():
    # building the dispatcher succeeds; numba types the body lazily
    wrapped = jit_compile(_untypable, jit=True)
    with pytest.raises(TypingError):
        wrapped.fn(1.0)

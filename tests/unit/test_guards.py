# tests/unit/test_guards.py
"""NaN and near-zero guards in pure Python and numba mode."""
import numpy as np
import pytest

from contexp.runtime.guards import get_guards


@pytest.mark.parametrize("jit", [False, True])
def test_guards(jit):
    isnan_complex, below_threshold = get_guards(jit)

    assert not isnan_complex(np.complex128(1 + 2j))
    assert isnan_complex(np.complex128(complex(np.nan, 0.0)))
    assert isnan_complex(np.complex128(complex(0.0, np.nan)))
    # infinities are not NaN; they surface as NaN one step later
    assert not isnan_complex(np.complex128(complex(np.inf, 0.0)))

    assert below_threshold(np.complex128(1e-19 + 0j), 1e-18)
    assert not below_threshold(np.complex128(1e-18 + 0j), 1e-18)


def test_jit_guards_are_cached():
    assert get_guards(True) is get_guards(True)

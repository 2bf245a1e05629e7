# tests/unit/test_precision.py
from __future__ import annotations

import numpy as np
import pytest

from contexp import precision as precision_mod
from contexp.errors import ConfigError, PrecisionFallbackWarning
from contexp.precision import (
    DOUBLE, EXTENDED, extended_available, make_complex, precision_report, select_precision, to_real,
)


def test_double_is_complex128():
    assert select_precision("double") is DOUBLE
    assert DOUBLE.complex_dtype == np.complex128
    assert DOUBLE.jit_capable


def test_auto_prefers_widest():
    if extended_available():
        assert select_precision("auto") is EXTENDED
        assert select_precision("EXTENDED") is EXTENDED
        assert not EXTENDED.jit_capable
    else:
        with pytest.warns(PrecisionFallbackWarning):
            assert select_precision("auto") is DOUBLE


def test_fallback_when_long_double_is_narrow(monkeypatch):
    monkeypatch.setattr(precision_mod, "extended_available", lambda: False)
    with pytest.warns(PrecisionFallbackWarning):
        assert precision_mod.select_precision("extended") is DOUBLE


def test_unknown_name():
    with pytest.raises(ConfigError):
        select_precision("quad")


@pytest.mark.skipif(not extended_available(), reason="long double is not wider than float64")
def test_strings_parse_at_working_precision():
    x = to_real("0.1", EXTENDED)
    assert x.dtype == np.longdouble
    assert x != np.longdouble(0.1)   # float64 0.1 carries a different rounding error
    z = make_complex("-2.475409836065573771", "4.175609756097561132", EXTENDED)
    assert z.dtype == np.clongdouble
    assert z.real == np.longdouble("-2.475409836065573771")
    assert z.imag == np.longdouble("4.175609756097561132")


def test_make_complex_double():
    z = make_complex(1.5, -2, DOUBLE)
    assert z == 1.5 - 2j
    assert z.dtype == np.complex128


def test_bad_string():
    with pytest.raises(ConfigError):
        to_real("abc", DOUBLE)


def test_report_lines():
    lines = precision_report(DOUBLE)
    text = "\n".join(lines)
    assert "'float64' precision:          3.141592653589793" in text
    assert "epsilon for float64" in text
    assert "Non-sign bits in float64: 53" in text
    assert not any(line.startswith("radix") for line in lines)

# src/contexp/precision.py
"""
Working-precision selection.

A single ``WorkingPrecision`` is chosen once at process start and passed
explicitly into every buffer, kernel and scanner call. The widest available
floating type (``numpy.longdouble``) is preferred; when it is not wider than
float64 the selection falls back to double precision with a warning.
"""
from __future__ import annotations

from dataclasses import dataclass
import warnings
import numpy as np

from contexp.errors import ConfigError, PrecisionFallbackWarning

__all__ = [
    "WorkingPrecision", "EXTENDED", "DOUBLE",
    "select_precision", "extended_available",
    "make_complex", "to_real", "precision_report",
]


@dataclass(frozen=True)
class WorkingPrecision:
    name: str
    real_dtype: np.dtype
    complex_dtype: np.dtype

    @property
    def finfo(self) -> np.finfo:
        return np.finfo(self.real_dtype)

    @property
    def one(self):
        """F(0) in the working complex type."""
        return self.complex_dtype.type(1)

    @property
    def jit_capable(self) -> bool:
        # numba has no long double support
        return self.complex_dtype == np.dtype(np.complex128)

    def __str__(self) -> str:
        return f"{self.name} ({self.real_dtype.name}, {self.finfo.nmant + 1}-bit mantissa)"


EXTENDED = WorkingPrecision("extended", np.dtype(np.longdouble), np.dtype(np.clongdouble))
DOUBLE = WorkingPrecision("double", np.dtype(np.float64), np.dtype(np.complex128))


def extended_available() -> bool:
    """True if long double carries more mantissa bits than float64."""
    return np.finfo(np.longdouble).nmant > np.finfo(np.float64).nmant


def select_precision(name: str = "auto") -> WorkingPrecision:
    """
    Resolve a precision name to a WorkingPrecision.

    - "auto"/"extended": widest type, falling back to double with a
      PrecisionFallbackWarning when long double is no wider than float64.
    - "double": float64/complex128.
    """
    key = str(name).strip().lower()
    if key == "double":
        return DOUBLE
    if key not in ("auto", "extended"):
        raise ConfigError(f"Unknown precision '{name}'; expected 'auto', 'extended' or 'double'")
    if extended_available():
        return EXTENDED
    warnings.warn(
        "long double is not wider than float64 on this platform; "
        "falling back to double precision",
        PrecisionFallbackWarning,
        stacklevel=2,
    )
    return DOUBLE


def to_real(value, prec: WorkingPrecision):
    """Convert int/float/str to a working-precision real without a float64 detour for strings."""
    if isinstance(value, str):
        try:
            return prec.real_dtype.type(value.strip())
        except ValueError as exc:
            raise ConfigError(f"Cannot parse '{value}' as a real number") from exc
    return prec.real_dtype.type(value)


def make_complex(re, im, prec: WorkingPrecision):
    """Build a working-precision complex scalar from separate real parts."""
    out = np.zeros((1,), dtype=prec.complex_dtype)
    out.real[0] = to_real(re, prec)
    out.imag[0] = to_real(im, prec)
    return out[0]


def _fmt_sig(x, digits: int) -> str:
    return np.format_float_positional(x, precision=digits, unique=False, fractional=False)


def precision_report(prec: WorkingPrecision) -> list[str]:
    """Printable description of the working type next to float64."""
    fi = prec.finfo
    pi_double = np.arccos(np.float64(-1.0))
    pi_work = np.arccos(prec.real_dtype.type(-1))
    name = prec.real_dtype.name
    return [
        f"'float64' precision:          {_fmt_sig(pi_double, np.finfo(np.float64).precision + 1)}",
        f"'{name}' precision:{' ' * max(1, 18 - len(name))}{_fmt_sig(pi_work, fi.precision + 1)}",
        f"size of {name}: {prec.real_dtype.itemsize}",
        f"size of float64: {np.dtype(np.float64).itemsize}",
        f"Minimum value for {name}: {fi.tiny}",
        f"Maximum value for {name}: {fi.max}",
        f"epsilon for {name}: {fi.eps}",
        f"precision for {name}: {fi.precision}",
        f"Non-sign bits in {name}: {fi.nmant + 1}",
        f"max exponent for {name}: {fi.maxexp}",
    ]

# src/contexp/analysis/scan.py
"""
Grid scanner over a rectangular lattice of the complex plane.

Output follows normal reading direction::

    maxIm   minRe ... maxRe     first row
     |
    minIm   minRe ... maxRe     last row

Rows start at ``maxIm - row*stepIm`` and walk right by repeated ``+stepRe``
from ``minRe``; each row holds ``num_re + 1`` samples and there are
``num_im`` rows. Steps are ``(max - min) / (num + 1)`` so the far bounds
are never sampled exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Literal, NamedTuple
import warnings
import numpy as np

from contexp.config import SAFE_ZERO, DEFAULT_MAX_LOOKBACK, DEFAULT_EPS, DEFAULT_MAX_ITERATIONS
from contexp.errors import ConfigError, InvalidRegionError, InvalidRegionWarning
from contexp.precision import WorkingPrecision, make_complex, to_real
from contexp.runtime.buffers import SequenceBuffer, allocate_sequence
from contexp.runtime.evaluator import evaluate, result_code, use_jit
from contexp.runtime.runner_api import Classification, Termination
from contexp.analysis.cycles import detect_cycle

__all__ = [
    "GridDescriptor", "ScanCell", "GridScanner",
    "classify_point", "scan",
]

ScanState = Literal["validating", "rejected", "scanning", "done"]


@dataclass(frozen=True)
class GridDescriptor:
    """Read-only scan region and numerics, reals in the working precision."""
    min_re: np.floating
    max_re: np.floating
    min_im: np.floating
    max_im: np.floating
    num_re: int
    num_im: int
    eps: np.floating
    max_iterations: int
    prec: WorkingPrecision

    @classmethod
    def from_values(
        cls,
        min_re, max_re, min_im, max_im,
        *,
        num_re: int,
        num_im: int,
        eps=DEFAULT_EPS,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        prec: WorkingPrecision,
    ) -> "GridDescriptor":
        num_re, num_im, max_iterations = int(num_re), int(num_im), int(max_iterations)
        if num_re < 0 or num_im < 0:
            raise ConfigError(f"tick counts must be non-negative; got ({num_re}, {num_im})")
        if max_iterations <= 0:
            raise ConfigError(f"max_iterations must be positive; got {max_iterations}")
        eps_w = to_real(eps, prec)
        if not eps_w > 0:
            raise ConfigError(f"eps must be positive; got {eps}")
        return cls(
            min_re=to_real(min_re, prec),
            max_re=to_real(max_re, prec),
            min_im=to_real(min_im, prec),
            max_im=to_real(max_im, prec),
            num_re=num_re,
            num_im=num_im,
            eps=eps_w,
            max_iterations=max_iterations,
            prec=prec,
        )

    @property
    def is_valid(self) -> bool:
        return not (self.min_re > self.max_re or self.min_im > self.max_im)

    def validate(self) -> None:
        if not self.is_valid:
            raise InvalidRegionError(self.min_re, self.max_re, self.min_im, self.max_im)

    @property
    def step_re(self) -> np.floating:
        return (self.max_re - self.min_re) / self.prec.real_dtype.type(1 + self.num_re)

    @property
    def step_im(self) -> np.floating:
        return (self.max_im - self.min_im) / self.prec.real_dtype.type(1 + self.num_im)

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, columns) of the emitted grid."""
        return (self.num_im, self.num_re + 1)


class ScanCell(NamedTuple):
    row: int
    col: int
    z: np.complexfloating
    code: int
    kind: Classification


def classify_point(
    z,
    buffer: SequenceBuffer,
    desc: GridDescriptor,
    *,
    safe_zero: float = SAFE_ZERO,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
    jit: bool = False,
) -> tuple[int, Classification]:
    """Evaluator, then the cycle detector if the evaluator ran out of steps."""
    res = evaluate(z, buffer, desc.max_iterations, safe_zero=safe_zero, jit=jit)
    if res.termination == Termination.NON_FINITE:
        return result_code(res), Classification.DIVERGENT
    if res.termination == Termination.NEAR_ZERO:
        return result_code(res), Classification.NEAR_ZERO
    # length re-derived from this evaluation only
    k = detect_cycle(buffer, res.length, desc.eps, max_lookback, jit=jit)
    if k > 0:
        return k, Classification.CYCLE
    return 0, Classification.UNDETERMINED


class GridScanner:
    """
    Sequential lattice scan sharing one sequence buffer across all cells.

    States: validating -> rejected (invalid region, no cells)
                       -> scanning -> done
    """

    def __init__(
        self,
        desc: GridDescriptor,
        *,
        safe_zero: float = SAFE_ZERO,
        max_lookback: int = DEFAULT_MAX_LOOKBACK,
        jit: bool = False,
    ):
        self.desc = desc
        self.safe_zero = safe_zero
        self.max_lookback = int(max_lookback)
        self.jit = use_jit(jit, desc.prec.complex_dtype)
        self.state: ScanState = "validating"
        # One buffer for the whole scan, obtained before any cell is emitted.
        # A rejected region never allocates.
        self._buffer: SequenceBuffer | None = (
            allocate_sequence(desc.max_iterations, desc.prec) if desc.is_valid else None
        )

    @property
    def prec(self) -> WorkingPrecision:
        return self.desc.prec

    @property
    def step_re(self) -> np.floating:
        return self.desc.step_re

    @property
    def step_im(self) -> np.floating:
        return self.desc.step_im

    def _accept(self) -> bool:
        self.state = "validating"
        try:
            self.desc.validate()
        except InvalidRegionError as exc:
            self.state = "rejected"
            warnings.warn(str(exc), InvalidRegionWarning, stacklevel=3)
            return False
        self.state = "scanning"
        return True

    def _classify(self, z) -> tuple[int, Classification]:
        return classify_point(
            z, self._buffer, self.desc,
            safe_zero=self.safe_zero,
            max_lookback=self.max_lookback,
            jit=self.jit,
        )

    def rows(self) -> Iterator[list[ScanCell]]:
        """Yield one list of cells per lattice row, top to bottom."""
        if not self._accept():
            return
        d = self.desc
        step_re = d.step_re
        step_im = d.step_im
        real_t = self.prec.real_dtype.type
        for row in range(d.num_im):
            z = make_complex(d.min_re, d.max_im - real_t(row) * step_im, self.prec)
            code, kind = self._classify(z)
            cells = [ScanCell(row, 0, z, code, kind)]
            for col in range(1, d.num_re + 1):
                z = z + step_re
                code, kind = self._classify(z)
                cells.append(ScanCell(row, col, z, code, kind))
            yield cells
        self.state = "done"

    def cells(self) -> Iterator[ScanCell]:
        """Yield every cell in row-major order."""
        for row in self.rows():
            yield from row

    def codes(self) -> np.ndarray:
        """Collect the full code grid; shape (0, 0) when the region is rejected."""
        out = np.zeros(self.desc.shape, dtype=np.int32)
        for row in self.rows():
            out[row[0].row, :] = [c.code for c in row]
        if self.state == "rejected":
            return np.zeros((0, 0), dtype=np.int32)
        return out


def scan(
    desc: GridDescriptor,
    *,
    safe_zero: float = SAFE_ZERO,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
    jit: bool = False,
) -> Iterator[tuple[np.complexfloating, int]]:
    """Lazily yield (z, code) pairs in row-major lattice order."""
    scanner = GridScanner(desc, safe_zero=safe_zero, max_lookback=max_lookback, jit=jit)
    for cell in scanner.cells():
        yield cell.z, cell.code

# src/contexp/report.py
"""Plain-text sink for scan results: one line per lattice row."""
from __future__ import annotations

import sys
from typing import Iterable, TextIO, TYPE_CHECKING
import numpy as np

from contexp.config import ScanConfig

if TYPE_CHECKING:
    from contexp.analysis.scan import GridDescriptor, GridScanner, ScanCell
    from contexp.runtime.evaluator import ProbeResult

__all__ = ["FieldWriter", "write_field", "format_z"]


def _fixed(x, digits: int = 3) -> str:
    return f"{float(x):.{digits}f}"


def _sci(x) -> str:
    return np.format_float_scientific(x, precision=8, unique=False)


def _pos(x) -> str:
    return np.format_float_positional(x, precision=15, unique=False)


def format_z(z) -> str:
    """re+imi (or re-imi) with 15 decimals in the value's own precision."""
    sign = "-" if z.imag < 0 else "+"
    return f"{_pos(z.real)}{sign}{_pos(abs(z.imag))}i"


class FieldWriter:
    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdout

    def line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def banner(self, prec_label: str) -> None:
        self.line("-------- Continued exponential --------")
        self.line("F(n) = exp(z * F(n-1)), F(0) = 1")
        self.line(f"with dtype: {prec_label}")

    def usage(self, cfg: ScanConfig, reason: str | None = None) -> None:
        if reason:
            self.line(reason)
        self.line("Input of parameters via arguments:")
        self.line(
            f"arg: [min Real={_fixed(cfg.min_re)}, maxReal={_fixed(cfg.max_re)}, "
            f"minImaginary={_fixed(cfg.min_im)}, maxImaginary={_fixed(cfg.max_im)}], "
            f"[ticks on real-axis={cfg.num_re}, ticks on imag-axis={cfg.num_im}], "
            f"[epsilon for cycle detection={float(cfg.eps):.5e}], "
            f"[maximum steps for computation at every point={cfg.max_iterations}]"
        )

    def settings(self, desc: "GridDescriptor") -> None:
        self.line(
            f"using eps= {float(desc.eps):.5e}, ticks on real/imag axis: "
            f"({desc.num_re}, {desc.num_im}), using vector of length {desc.max_iterations}"
        )

    def invalid(self, desc: "GridDescriptor") -> None:
        self.line(
            f"Invalid area [{_fixed(desc.min_re)},{_fixed(desc.max_re)}] ; "
            f"[{_fixed(desc.min_im)},{_fixed(desc.max_im)}]"
        )

    def header(self, desc: "GridDescriptor") -> None:
        self.line(
            f"field [{_fixed(desc.min_re)}, {_fixed(desc.max_re)}]"
            f"[{_fixed(desc.min_im)}, {_fixed(desc.max_im)}]"
        )

    def steps(self, desc: "GridDescriptor") -> None:
        self.line(f"d(Re)={_sci(desc.step_re)} d(Im)={_sci(desc.step_im)}")

    def row(self, cells: Iterable["ScanCell"], *, show_z: bool = False) -> None:
        if show_z:
            for c in cells:
                self.line(f"{c.code} at z={format_z(c.z)}")
            return
        self.line(" ".join(str(c.code) for c in cells))

    def probe(self, z, result: "ProbeResult") -> None:
        self.line(f"probe at z={format_z(z)}: {result.code}")
        self.line(" ".join(
            f"{i}: ({_pos(v.real)},{_pos(v.imag)})"
            for i, v in enumerate(result.sequence, start=1)
        ))


def write_field(scanner: "GridScanner", writer: FieldWriter, *, show_z: bool = False) -> int:
    """
    Stream header, step sizes and every row of ``scanner`` to ``writer``.

    Returns the number of cells written; an invalid region writes only the
    diagnostic line and returns 0.
    """
    desc = scanner.desc
    if not desc.is_valid:
        writer.invalid(desc)
        return 0
    writer.header(desc)
    writer.steps(desc)
    written = 0
    for cells in scanner.rows():
        writer.row(cells, show_z=show_z)
        written += len(cells)
    return written

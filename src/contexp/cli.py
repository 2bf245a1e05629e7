# src/contexp/cli.py
from __future__ import annotations

import argparse
import sys
import warnings
from typing import Sequence

from contexp.analysis.scan import GridScanner
from contexp.config import PROBE_LENGTH, PROBE_POINT, ScanConfig, load_config
from contexp.errors import ConfigError, ContexpError, ContexpWarning
from contexp.precision import make_complex, precision_report, select_precision
from contexp.report import FieldWriter, write_field
from contexp.runtime.evaluator import probe

__all__ = ["main", "apply_positionals"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contexp",
        description=(
            "Classify points z of a rectangle by the long-run behaviour of "
            "F(n) = exp(z * F(n-1)), F(0) = 1. Codes: -1 non-finite, 0 undetermined, "
            "n > 0 near-zero step or cycle length."
        ),
    )
    parser.add_argument(
        "values", nargs="*", metavar="ARG",
        help="minRe maxRe minIm maxIm [numRe numIm [eps [maxIterations]]] plus one trailing value",
    )
    parser.add_argument("--config", metavar="PATH", help="TOML file with [scan]/[numerics] defaults")
    parser.add_argument("--precision", choices=("auto", "extended", "double"), default=None)
    parser.add_argument("--jit", action="store_true", help="numba kernels (double precision only)")
    parser.add_argument("--show-z", action="store_true", help="print 'code at z=...' per cell")
    parser.add_argument("--info", action="store_true", help="print banner and precision report")
    parser.add_argument(
        "--probe", nargs="*", metavar="RE IM", default=None,
        help="print the sequence at one point (default point if no values given)",
    )
    parser.add_argument("--probe-length", type=int, default=PROBE_LENGTH)
    return parser


def _as_int(text: str, name: str) -> int:
    try:
        return int(float(text))
    except (ValueError, OverflowError) as exc:
        raise ConfigError(f"Cannot parse {name}='{text}' as an integer") from exc


def apply_positionals(cfg: ScanConfig, values: Sequence[str], out: FieldWriter) -> tuple[ScanConfig, bool]:
    """
    Overlay positional arguments onto ``cfg``.

    Up to four arguments keep every default and print the usage text, with
    an error line for two or more. Bounds are read from five arguments on,
    the tick pair from seven, eps from eight and the sequence length from
    nine; the last argument of a run of five to eight is never consumed.

    Returns (config, explicit) where explicit tells whether the bounds
    came from the command line.
    """
    n = len(values)
    if n <= 4:
        reason = "Error parsing parameters: using default parameters" if n > 1 else None
        out.usage(cfg, reason)
        return cfg, False

    changes: dict = dict(min_re=values[0], max_re=values[1], min_im=values[2], max_im=values[3])
    used = 4
    if n > 6:
        changes["num_re"] = _as_int(values[4], "numRe")
        changes["num_im"] = _as_int(values[5], "numIm")
        used = 6
        if n > 7:
            changes["eps"] = values[6]
            used = 7
        if n > 8:
            changes["max_iterations"] = _as_int(values[7], "maxIterations")
            used = 8
    if n - used > 1:
        warnings.warn(
            f"ignoring unused argument(s): {' '.join(values[used:])}",
            ContexpWarning, stacklevel=2,
        )
    return cfg.replace(**changes), True


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.probe is not None and len(args.probe) not in (0, 2):
        parser.error("--probe takes either no values or RE IM")

    out = FieldWriter(sys.stdout)
    try:
        cfg = load_config(args.config) if args.config else ScanConfig()
        if args.precision is not None:
            cfg = cfg.replace(precision=args.precision)
        if args.jit:
            cfg = cfg.replace(jit=True)
        prec = select_precision(cfg.precision)

        if args.info:
            out.banner(str(prec))
            for line in precision_report(prec):
                out.line(line)

        if args.probe is not None:
            re, im = args.probe if args.probe else PROBE_POINT
            result = probe(re, im, args.probe_length, prec=prec, safe_zero=cfg.safe_zero, jit=cfg.jit)
            out.probe(make_complex(re, im, prec), result)

        cfg, explicit = apply_positionals(cfg, args.values, out)
        desc = cfg.descriptor(prec)
        if explicit:
            out.settings(desc)
        scanner = GridScanner(desc, safe_zero=cfg.safe_zero, max_lookback=cfg.max_lookback, jit=cfg.jit)
        write_field(scanner, out, show_z=args.show_z)
    except ContexpError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

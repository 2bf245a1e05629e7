# src/contexp/config.py
from __future__ import annotations

from dataclasses import dataclass, replace as _dc_replace
from pathlib import Path
from typing import Any, TYPE_CHECKING

try:
    import tomllib  # type: ignore
except Exception:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from contexp.errors import ConfigError

if TYPE_CHECKING:
    from contexp.precision import WorkingPrecision
    from contexp.analysis.scan import GridDescriptor

__all__ = [
    "SAFE_ZERO", "DEFAULT_EPS", "DEFAULT_MAX_LOOKBACK", "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_REGION", "DEFAULT_TICKS", "PROBE_POINT", "PROBE_LENGTH",
    "ScanConfig", "load_config",
]

# ---- Named constants ---------------------------------------------------------

SAFE_ZERO: float = 1e-18            # |F(n)| below this terminates as near-zero
DEFAULT_EPS: float = 1e-16          # cycle tolerance
DEFAULT_MAX_LOOKBACK: int = 255     # cycle detector backward window
DEFAULT_MAX_ITERATIONS: int = 1900  # sequence length per lattice point

DEFAULT_REGION: tuple[float, float, float, float] = (-1.0, 0.5, 2.0, 3.0)
DEFAULT_TICKS: tuple[int, int] = (20, 20)

# Kept as strings so extended precision parses every digit.
PROBE_POINT: tuple[str, str] = ("-2.475409836065573771", "4.175609756097561132")
PROBE_LENGTH: int = 10


@dataclass(frozen=True)
class ScanConfig:
    """
    User-facing scan parameters.

    Real-valued fields may be floats or decimal strings; they are converted
    into the working precision only by ``descriptor()``.
    """
    min_re: float | str = DEFAULT_REGION[0]
    max_re: float | str = DEFAULT_REGION[1]
    min_im: float | str = DEFAULT_REGION[2]
    max_im: float | str = DEFAULT_REGION[3]
    num_re: int = DEFAULT_TICKS[0]
    num_im: int = DEFAULT_TICKS[1]
    eps: float | str = DEFAULT_EPS
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    safe_zero: float = SAFE_ZERO
    max_lookback: int = DEFAULT_MAX_LOOKBACK
    precision: str = "auto"
    jit: bool = False

    def replace(self, **changes: Any) -> "ScanConfig":
        return _dc_replace(self, **changes)

    def descriptor(self, prec: "WorkingPrecision") -> "GridDescriptor":
        from contexp.analysis.scan import GridDescriptor

        return GridDescriptor.from_values(
            self.min_re, self.max_re, self.min_im, self.max_im,
            num_re=self.num_re,
            num_im=self.num_im,
            eps=self.eps,
            max_iterations=self.max_iterations,
            prec=prec,
        )


# ---- TOML loading ------------------------------------------------------------

_SCAN_KEYS: dict[str, tuple[type, ...]] = {
    "min_re": (int, float, str),
    "max_re": (int, float, str),
    "min_im": (int, float, str),
    "max_im": (int, float, str),
    "num_re": (int,),
    "num_im": (int,),
    "eps": (int, float, str),
    "max_iterations": (int,),
}

_NUMERICS_KEYS: dict[str, tuple[type, ...]] = {
    "safe_zero": (int, float),
    "max_lookback": (int,),
    "precision": (str,),
    "jit": (bool,),
}


def _take_table(data: dict, table: str, allowed: dict[str, tuple[type, ...]], where: str) -> dict[str, Any]:
    raw = data.get(table, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: [{table}] must be a table")
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in allowed:
            raise ConfigError(f"{where}: unknown key '{table}.{key}'; allowed: {sorted(allowed)}")
        types = allowed[key]
        # bool is an int subclass; only accept it where bool is explicitly allowed
        if isinstance(value, bool) and bool not in types:
            raise ConfigError(f"{where}: '{table}.{key}' must not be a boolean")
        if not isinstance(value, types):
            names = "/".join(t.__name__ for t in types)
            raise ConfigError(f"{where}: '{table}.{key}' must be {names}, got {type(value).__name__}")
        out[key] = value
    return out


def load_config(path: str | Path, *, base: ScanConfig | None = None) -> ScanConfig:
    """
    Read a TOML file with optional [scan] and [numerics] tables.

    Missing keys keep the values of ``base`` (defaults when omitted).
    """
    p = Path(path)
    try:
        with open(p, "rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {p}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {p}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed TOML in {p}: {exc}") from exc

    unknown = set(data) - {"scan", "numerics"}
    if unknown:
        raise ConfigError(f"{p}: unknown table(s) {sorted(unknown)}; allowed: ['numerics', 'scan']")

    changes = _take_table(data, "scan", _SCAN_KEYS, str(p))
    changes.update(_take_table(data, "numerics", _NUMERICS_KEYS, str(p)))
    cfg = base if base is not None else ScanConfig()
    return cfg.replace(**changes)

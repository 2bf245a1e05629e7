# src/contexp/runtime/buffers.py
from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from contexp.errors import AllocationError
from contexp.precision import WorkingPrecision

__all__ = ["SequenceBuffer", "allocate_sequence"]


@dataclass
class SequenceBuffer:
    """
    Reusable scratch for one point's sequence.

    - values: (capacity,) working complex dtype; slot k holds F(k+1)
    - length: logical write length of the current point (0..capacity)

    Only values[:length] is meaningful. Anything beyond is stale from an
    earlier point and must not be read.
    """
    values: np.ndarray
    capacity: int
    length: int = 0

    @property
    def dtype(self) -> np.dtype:
        return self.values.dtype

    def prefix(self) -> np.ndarray:
        """View of the slots written for the current point."""
        return self.values[: self.length]

    def reset(self) -> None:
        """Logical reset; memory is left as is."""
        self.length = 0


def allocate_sequence(capacity: int, prec: WorkingPrecision) -> SequenceBuffer:
    """
    Allocate one sequence buffer in the working complex dtype.

    Raises AllocationError for capacity <= 0 or when memory is exhausted.
    """
    capacity = int(capacity)
    if capacity <= 0:
        raise AllocationError(capacity, "capacity must be positive")
    try:
        values = np.zeros((capacity,), dtype=prec.complex_dtype)
    except MemoryError as exc:
        raise AllocationError(capacity, "out of memory") from exc
    except ValueError as exc:
        # numpy rejects sizes beyond the addressable maximum before allocating
        raise AllocationError(capacity, str(exc)) from exc
    # Kernels index the array directly; keep it C-contiguous.
    if not values.flags.c_contiguous:
        values = np.ascontiguousarray(values)
    return SequenceBuffer(values=values, capacity=capacity)

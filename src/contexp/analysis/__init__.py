"""Cycle detection and lattice scanning."""

from contexp.analysis.cycles import detect_cycle
from contexp.analysis.scan import GridDescriptor, GridScanner, ScanCell, classify_point, scan

__all__ = ["detect_cycle", "GridDescriptor", "GridScanner", "ScanCell", "classify_point", "scan"]

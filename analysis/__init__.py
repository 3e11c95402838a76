"""Pure analysis package for Team Trials stats.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
database I/O.
"""

from .engine import build_run_records
from .neighbors import predict
from .regression import analyze, impact_analysis

__all__ = ["analyze", "build_run_records", "impact_analysis", "predict"]

"""Internal application services (pure helpers, no I/O)."""

from .validation import ValidationError, normalize_hole_data, validate_roster
from .rounds import (
    ACTIVE,
    ENDED,
    compute_live_results,
    end_round,
    input_fingerprint,
    round_results,
    start_round,
)

__all__ = [
    "ACTIVE",
    "ENDED",
    "ValidationError",
    "compute_live_results",
    "end_round",
    "input_fingerprint",
    "normalize_hole_data",
    "round_results",
    "start_round",
    "validate_roster",
]

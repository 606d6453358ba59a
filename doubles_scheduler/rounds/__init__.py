"""
Per-round passes: rest, pairing, matching and court assignment.
"""

from .rest import build_rest_schedule
from .pairing import create_pairs, roster_mid_skill
from .matching import match_pairs
from .courts import assign_courts

__all__ = [
    "build_rest_schedule",
    "create_pairs",
    "roster_mid_skill",
    "match_pairs",
    "assign_courts"
]

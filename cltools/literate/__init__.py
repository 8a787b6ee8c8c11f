"""Literate source handling: classification, transform and batch driver."""

from .classifier import CONVENTIONS, DOUBLE, SINGLE, PrefixTable, classify
from .driver import UnliterateError, Unliterator, UnlitReport
from .freshness import needs_regeneration
from .transform import unliterate, unliterate_pairs

__all__ = [
    "CONVENTIONS",
    "DOUBLE",
    "SINGLE",
    "PrefixTable",
    "UnliterateError",
    "UnlitReport",
    "Unliterator",
    "classify",
    "needs_regeneration",
    "unliterate",
    "unliterate_pairs",
]

"""Utilities for building a tiny S&P 500 membership lake.

This package scrapes the current constituents and the changes log,
reconstructs a point-in-time monthly membership table, and caches the
daily prices used by the analysis notebooks.
"""

from .membership import (
    build_membership,
    load_membership,
    members_on_date,
    reconstruct_membership,
)
from .storage import Storage

__all__ = [
    "Storage",
    "build_membership",
    "load_membership",
    "members_on_date",
    "reconstruct_membership",
]

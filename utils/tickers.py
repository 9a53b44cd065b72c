"""Ticker and label cleaning helpers shared across modules."""
from __future__ import annotations

import re

import pandas as pd

# Wikipedia footnote markers such as "[1]" or "[note 3]"
_FOOTNOTE_RE = re.compile(r"\[[^\]]*\]")


def clean_text(inp) -> str:
    """Strip footnote markers and odd HTML whitespace; NaN/None -> ""."""
    if inp is None:
        return ""
    try:
        if pd.isna(inp):
            return ""
    except (TypeError, ValueError):
        pass
    s = str(inp)
    s = s.replace("\u200b", "").replace("\xa0", " ")
    s = _FOOTNOTE_RE.sub("", s)
    return " ".join(s.split())


def normalize_symbol(inp) -> str:
    """Yahoo-style ticker: upper-case, ``.``/``_`` -> ``-``, no whitespace.

    Returns an empty string for blank input so callers can test truthiness.
    """
    s = clean_text(inp)
    if not s:
        return ""
    s = s.replace(" ", "")
    return s.upper().replace("_", "-").replace(".", "-")


def normalize_symbols(values: pd.Series) -> pd.Series:
    """Vectorised :func:`normalize_symbol` keeping the original index."""
    return values.map(normalize_symbol).astype(str)

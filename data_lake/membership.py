"""Rebuild historical S&P 500 membership from Wikipedia's changes log.

The page only lists today's members plus a log of additions and removals,
so history is reconstructed by walking backward one month at a time:
starting from the current snapshot, every ticker *added* in a month is
taken out again and every ticker *removed* in that month is put back.
Each monthly snapshot is dated to the first day of its month.
"""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from utils.io import PREVIEW_DIR, write_csv
from utils.tickers import clean_text, normalize_symbol

from . import wikipedia
from .schemas import (
    CHANGE_COLUMNS,
    CONSTITUENT_COLUMNS,
    INTERVAL_COLUMNS,
    MEMBER_COLUMNS,
)
from .storage import Storage

log = logging.getLogger(__name__)

DEFAULT_START = "2000-01-01"
MEMBERS_KEY = "membership/sp500_members.parquet"
MEMBERS_CSV_KEY = "membership/sp500_members.csv"
CURRENT_CSV_KEY = "membership/sp500_current.csv"
CHANGES_CSV_KEY = "membership/sp500_changes.csv"


def _as_naive(ts):
    ts = pd.to_datetime(ts, errors="raise")
    if isinstance(ts, pd.Series):
        if getattr(ts.dt, "tz", None) is not None:
            ts = ts.dt.tz_localize(None)
    else:
        if getattr(ts, "tz", None) is not None:
            ts = ts.tz_localize(None)
    return ts


def _month(value) -> pd.Period:
    return _as_naive(value).to_period("M")


def _require_columns(df: pd.DataFrame, required: list[str], what: str) -> None:
    if df is None:
        raise ValueError(f"{what} frame is None")
    missing = sorted(set(required) - set(df.columns))
    if missing:
        raise ValueError(f"Missing required {what} columns: {', '.join(missing)}")


def validate_constituents_schema(df: pd.DataFrame) -> None:
    _require_columns(df, CONSTITUENT_COLUMNS, "constituents")


def validate_changes_schema(df: pd.DataFrame) -> pd.DataFrame:
    """Check columns and return a copy with ``date`` parsed to naive timestamps."""
    _require_columns(df, CHANGE_COLUMNS, "changes")
    out = df.copy()
    out["date"] = _as_naive(out["date"])
    if out["date"].isna().any():
        bad = int(out["date"].isna().sum())
        raise ValueError(f"{bad} change rows have no effective date")
    return out


def changes_by_month(changes: pd.DataFrame) -> dict[pd.Period, pd.DataFrame]:
    """Group change rows by calendar month, keeping log order inside a month."""
    changes = validate_changes_schema(changes)
    months = changes["date"].dt.to_period("M")
    return {month: grp for month, grp in changes.groupby(months, sort=False)}


def _undo_month(members: dict[str, str], step: pd.DataFrame) -> dict[str, str]:
    prior = dict(members)
    for ticker in step["added_ticker"]:
        sym = normalize_symbol(ticker)
        if sym:
            prior.pop(sym, None)
    for ticker, name in zip(step["removed_ticker"], step["removed_name"]):
        sym = normalize_symbol(ticker)
        if sym:
            prior[sym] = clean_text(name)
    return prior


def _snapshot_frame(month: pd.Period, members: dict[str, str]) -> pd.DataFrame:
    tickers = sorted(members)
    return pd.DataFrame(
        {
            "date": pd.Series([month.to_timestamp()] * len(tickers), dtype="datetime64[ns]"),
            "ticker": tickers,
            "name": [members[t] for t in tickers],
        }
    )


def reconstruct_membership(
    current: pd.DataFrame,
    changes: pd.DataFrame,
    start,
    end=None,
    as_of=None,
) -> pd.DataFrame:
    """Monthly snapshots from ``end`` back to ``start``.

    ``current`` is the membership in the ``as_of`` month (default: this
    month). The walk always begins there, so changes dated after ``end`` are
    undone before the first emitted month. ``end`` defaults to ``as_of``.
    Months are emitted newest first; rows inside a month are sorted by ticker.
    """
    validate_constituents_schema(current)
    by_month = changes_by_month(changes)

    as_of_m = _month(as_of) if as_of is not None else pd.Timestamp.today().to_period("M")
    start_m = _month(start)
    end_m = _month(end) if end is not None else as_of_m
    if end_m > as_of_m:
        raise ValueError(f"end {end_m} is after the current snapshot month {as_of_m}")
    if start_m > end_m:
        raise ValueError(f"start {start_m} is after end {end_m}")

    members: dict[str, str] = {}
    for ticker, name in zip(current["ticker"], current["name"]):
        sym = normalize_symbol(ticker)
        if sym:
            members[sym] = clean_text(name)

    frames = [_snapshot_frame(as_of_m, members)] if end_m == as_of_m else []
    month = as_of_m
    while month > start_m:
        month = month - 1
        step = by_month.get(month)
        if step is not None:
            members = _undo_month(members, step)
            log.debug("%s: %d changes -> %d members", month, len(step), len(members))
        if month <= end_m:
            frames.append(_snapshot_frame(month, members))

    out = pd.concat(frames, ignore_index=True)
    log.info(
        "reconstructed %d months (%s..%s), %d rows",
        len(frames),
        start_m,
        end_m,
        len(out),
    )
    return out[MEMBER_COLUMNS]


def snapshot_to_intervals(members: pd.DataFrame) -> pd.DataFrame:
    """Collapse monthly snapshots into contiguous ``start_date``/``end_date`` spans.

    ``end_date`` is the last calendar day of the final month present, or
    ``None`` when the ticker is in the most recent snapshot.
    """
    _require_columns(members, MEMBER_COLUMNS, "membership")
    if members.empty:
        return pd.DataFrame(columns=INTERVAL_COLUMNS)

    m = members.copy()
    m["date"] = _as_naive(m["date"])
    m["ordinal"] = m["date"].dt.year * 12 + m["date"].dt.month
    m = m.sort_values(["ticker", "ordinal"]).reset_index(drop=True)
    latest = m["ordinal"].max()

    new_run = (m["ticker"] != m["ticker"].shift()) | (m["ordinal"].diff() != 1)
    m["run"] = new_run.cumsum()
    grouped = m.groupby("run", sort=True).agg(
        ticker=("ticker", "first"),
        name=("name", "last"),
        start=("date", "min"),
        end=("date", "max"),
        last_ordinal=("ordinal", "max"),
    )

    out = pd.DataFrame(
        {
            "ticker": grouped["ticker"],
            "name": grouped["name"],
            "start_date": grouped["start"].dt.strftime("%Y-%m-%d"),
            "end_date": (grouped["end"] + pd.offsets.MonthEnd(0)).dt.strftime("%Y-%m-%d"),
        }
    )
    out["end_date"] = out["end_date"].astype(object)
    out.loc[grouped["last_ordinal"] == latest, "end_date"] = None
    return out[INTERVAL_COLUMNS].sort_values(["ticker", "start_date"]).reset_index(drop=True)


def members_on_date(members: pd.DataFrame, date) -> pd.DataFrame:
    """Members active on ``date``.

    Accepts monthly snapshots (``date`` column: the latest snapshot on or
    before ``date`` is returned) or intervals (``start_date``/``end_date``,
    inclusive bounds).
    """
    d = _as_naive(date)

    if "start_date" in members.columns:
        m = members.copy()
        m["start_date"] = _as_naive(m["start_date"])
        if "end_date" in m.columns:
            m["end_date"] = _as_naive(m["end_date"])
        else:
            m["end_date"] = pd.NaT
        return m[(m["start_date"] <= d) & (m["end_date"].isna() | (d <= m["end_date"]))]

    _require_columns(members, MEMBER_COLUMNS, "membership")
    dates = _as_naive(members["date"])
    eligible = dates[dates <= d]
    if eligible.empty:
        return members.iloc[0:0]
    return members[dates == eligible.max()]


def historical_tickers(
    members: pd.DataFrame | None = None,
    storage: Storage | None = None,
    limit: int | None = None,
) -> list[str]:
    """
    Return normalized unique tickers ever present, in first-seen order.
    Loads the persisted table when ``members`` is not given.
    """

    if members is None:
        if storage is None:
            storage = Storage()
        members = load_membership(storage, cache_salt=storage.cache_salt())
    if members is None or members.empty:
        return []
    tickers = (
        members["ticker"]
        .dropna()
        .astype(str)
        .str.upper()
        .str.strip()
        .unique()
        .tolist()
    )
    return tickers[:limit] if limit is not None else tickers


@st.cache_data(show_spinner=False, hash_funcs={Storage: lambda _: 0})
def load_membership(
    storage: Storage | None = None, cache_salt: str = ""
) -> pd.DataFrame:
    if storage is None:
        storage = Storage()
    if storage.exists(MEMBERS_KEY):
        return storage.read_parquet_df(MEMBERS_KEY)
    if storage.exists(MEMBERS_CSV_KEY):
        return storage.read_csv_df(MEMBERS_CSV_KEY, parse_dates=["date"])
    raise FileNotFoundError(f"No membership table in {storage.info()}; run build_membership first")


def build_membership(
    storage: Storage,
    html: str | None = None,
    start=DEFAULT_START,
    end=None,
    as_of=None,
) -> str:
    """Full rebuild: scrape, reconstruct, persist. Returns a one-line summary.

    ``as_of`` is the month the page was captured in; leave it unset for a
    live fetch.
    """
    if html is None:
        html = wikipedia.fetch_html()
    current = wikipedia.parse_constituents(html)
    changes = wikipedia.parse_changes(html)

    df = reconstruct_membership(current, changes, start=start, end=end, as_of=as_of)

    storage.write_parquet_df(MEMBERS_KEY, df)
    storage.write_csv_df(MEMBERS_CSV_KEY, df)
    storage.write_csv_df(CURRENT_CSV_KEY, current)
    storage.write_csv_df(CHANGES_CSV_KEY, changes)
    write_csv(PREVIEW_DIR / "sp500_members_preview.csv", df.head(100))
    load_membership.clear()

    months = df["date"].nunique()
    summary = (
        f"{len(df)} rows over {months} months, "
        f"{df['ticker'].nunique()} distinct tickers (source: wikipedia, {start}→{as_of or 'present'})"
    )
    log.info("build_membership: %s", summary)
    return summary

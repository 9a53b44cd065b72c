# data_lake/prices.py
"""Download and cache daily prices for the rolling-correlation notebook."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Iterable

import pandas as pd
from pandas.api.types import is_numeric_dtype

from utils.tickers import normalize_symbol

from .storage import Storage

log = logging.getLogger(__name__)

PRICE_COLUMNS = ["date", "ticker", "close", "adj_close", "volume"]


def _normalize_key(name) -> str:
    return str(name).strip().lower().replace(" ", "_").replace("-", "_")


def validate_prices_schema(df: pd.DataFrame) -> None:
    if df is None or df.empty:
        return
    missing = sorted(set(PRICE_COLUMNS) - set(df.columns))
    if missing:
        raise ValueError(f"Missing required price columns: {', '.join(missing)}")

    dates = pd.to_datetime(df["date"], errors="coerce")
    if dates.isna().any() and df["date"].notna().any():
        raise ValueError("Non-datetime values in 'date' column")

    tick = df["ticker"].dropna().astype(str).str.strip()
    if not tick.empty and not (tick == tick.str.upper()).all():
        raise ValueError("ticker column must be uppercase")

    for col in ("close", "adj_close", "volume"):
        series = df[col].dropna()
        if not series.empty and not is_numeric_dtype(series):
            pd.to_numeric(series, errors="raise")


def tidy_prices(raw: pd.DataFrame, ticker: str) -> pd.DataFrame:
    """Normalize a yfinance frame into the long ``PRICE_COLUMNS`` layout."""
    ticker = normalize_symbol(ticker)
    if raw is None or raw.empty:
        return pd.DataFrame(columns=PRICE_COLUMNS)

    working = raw.copy()
    if isinstance(working.columns, pd.MultiIndex):
        working = working.droplevel(1, axis=1)
    if isinstance(working.index, pd.DatetimeIndex):
        working = working.reset_index()

    working = working.rename(columns={c: _normalize_key(c) for c in working.columns})
    if "date" not in working.columns and "datetime" in working.columns:
        working = working.rename(columns={"datetime": "date"})
    if "adj_close" not in working.columns:
        working["adj_close"] = working.get("close")

    out = pd.DataFrame(
        {
            "date": pd.to_datetime(working["date"]),
            "ticker": ticker,
            "close": pd.to_numeric(working.get("close"), errors="coerce"),
            "adj_close": pd.to_numeric(working["adj_close"], errors="coerce"),
            "volume": pd.to_numeric(working.get("volume", pd.NA), errors="coerce"),
        }
    )
    if out["date"].dt.tz is not None:
        out["date"] = out["date"].dt.tz_localize(None)
    out = (
        out.sort_values("date", kind="stable")
        .drop_duplicates(["ticker", "date"], keep="last")
        .reset_index(drop=True)
    )
    return out[PRICE_COLUMNS]


def _download_one(ticker: str, start, end) -> pd.DataFrame:
    import yfinance as yf

    raw = yf.download(
        ticker,
        start=str(pd.Timestamp(start).date()),
        end=str(pd.Timestamp(end).date()) if end is not None else None,
        auto_adjust=False,
        actions=False,
        progress=False,
        threads=False,
    )
    return tidy_prices(raw, ticker)


def download_prices(
    tickers: Iterable[str],
    start: date | str,
    end: date | str | None = None,
    pause_s: float = 0.0,
) -> pd.DataFrame:
    frames = []
    for tkr in tickers:
        sym = normalize_symbol(tkr)
        if not sym:
            continue
        df = _download_one(sym, start, end)
        if df.empty:
            log.warning("download_prices: no rows for %s", sym)
        frames.append(df)
        if pause_s:
            time.sleep(pause_s)
    if not frames:
        return pd.DataFrame(columns=PRICE_COLUMNS)
    out = pd.concat(frames, ignore_index=True)
    validate_prices_schema(out)
    return out.sort_values(["ticker", "date"]).reset_index(drop=True)


def load_prices(
    storage: Storage,
    tickers: Iterable[str],
    start: date | str,
    end: date | str | None = None,
    refresh: bool = False,
) -> pd.DataFrame:
    """Per-ticker parquet cache under ``prices/``; downloads only what is missing."""
    start_ts = pd.Timestamp(start)
    end_ts = pd.Timestamp(end) if end is not None else None
    frames = []
    for tkr in tickers:
        sym = normalize_symbol(tkr)
        if not sym:
            continue
        key = f"prices/{sym}.parquet"
        if refresh or not storage.exists(key):
            df = download_prices([sym], start, end)
            storage.write_parquet_df(key, df)
        else:
            df = storage.read_parquet_df(key)
            log.debug("load_prices: cache hit %s (%d rows)", key, len(df))
        frames.append(df)

    if not frames:
        return pd.DataFrame(columns=PRICE_COLUMNS)
    out = pd.concat(frames, ignore_index=True)
    out["date"] = pd.to_datetime(out["date"])
    out = out[out["date"] >= start_ts]
    if end_ts is not None:
        out = out[out["date"] <= end_ts]
    return out.sort_values(["ticker", "date"]).reset_index(drop=True)

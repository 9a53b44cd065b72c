"""Rolling-window correlation on wide return panels (date index, ticker columns)."""
from __future__ import annotations

import numpy as np
import pandas as pd


def log_returns(wide: pd.DataFrame) -> pd.DataFrame:
    return np.log(wide / wide.shift(1)).iloc[1:]


def simple_returns(wide: pd.DataFrame) -> pd.DataFrame:
    return wide.pct_change(fill_method=None).iloc[1:]


def _check_window(window: int) -> int:
    window = int(window)
    if window < 2:
        raise ValueError("correlation window must be at least 2 observations")
    return window


def _require(returns: pd.DataFrame, *cols: str) -> None:
    missing = [c for c in cols if c not in returns.columns]
    if missing:
        raise KeyError(f"Unknown return columns: {', '.join(missing)}")


def rolling_correlation(
    returns: pd.DataFrame,
    a: str,
    b: str,
    window: int,
    min_periods: int | None = None,
) -> pd.Series:
    """Correlation of ``a`` with ``b`` over each trailing ``window``."""
    window = _check_window(window)
    _require(returns, a, b)
    out = returns[a].rolling(window, min_periods=min_periods).corr(returns[b])
    return out.rename(f"{a}~{b}")


def rolling_correlation_to(
    returns: pd.DataFrame,
    benchmark: str,
    window: int,
    min_periods: int | None = None,
) -> pd.DataFrame:
    """Every other column's rolling correlation with ``benchmark``."""
    window = _check_window(window)
    _require(returns, benchmark)
    others = returns.drop(columns=[benchmark])
    return others.rolling(window, min_periods=min_periods).corr(returns[benchmark])


def rolling_pairwise_mean(
    returns: pd.DataFrame,
    window: int,
    min_periods: int | None = None,
) -> pd.Series:
    """Average off-diagonal correlation per window end.

    A rough gauge of how much the constituents move together.
    """
    window = _check_window(window)
    n = returns.shape[1]
    if n < 2:
        raise ValueError("need at least two columns for pairwise correlation")

    corr = returns.rolling(window, min_periods=min_periods).corr()
    cube = corr.to_numpy().reshape(len(returns), n, n)
    off_diag = ~np.eye(n, dtype=bool)
    pairs = cube[:, off_diag]
    with np.errstate(invalid="ignore"):
        counts = np.sum(~np.isnan(pairs), axis=1)
        sums = np.nansum(pairs, axis=1)
        mean = np.where(counts > 0, sums / np.maximum(counts, 1), np.nan)
    return pd.Series(mean, index=returns.index, name="mean_corr")


def correlation_long(
    returns: pd.DataFrame,
    benchmark: str,
    window: int,
) -> pd.DataFrame:
    """``date, ticker, correlation`` rows for plotting; warm-up rows dropped."""
    wide = rolling_correlation_to(returns, benchmark, window)
    long = (
        wide.rename_axis("date")
        .reset_index()
        .melt(id_vars="date", var_name="ticker", value_name="correlation")
        .dropna(subset=["correlation"])
    )
    return long.sort_values(["ticker", "date"]).reset_index(drop=True)

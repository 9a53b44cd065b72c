from __future__ import annotations

from typing import Sequence

import pandas as pd

from .verbs import Selector, select_columns


def pivot_longer(
    df: pd.DataFrame,
    cols: Selector,
    names_to: str = "name",
    values_to: str = "value",
    id_cols: Sequence[str] | None = None,
    dropna: bool = False,
) -> pd.DataFrame:
    """Wide -> long: one row per (id columns, selected column) pair.

    Without ``id_cols`` every column not selected is carried along as an id
    column; with it, only those columns are kept and the rest are dropped.
    """
    value_cols = select_columns(df, cols)
    if id_cols is None:
        id_cols = [c for c in df.columns if c not in set(value_cols)]
    else:
        id_cols = select_columns(df, list(id_cols), exclude=value_cols)
    long = df.melt(
        id_vars=id_cols,
        value_vars=value_cols,
        var_name=names_to,
        value_name=values_to,
    )
    if dropna:
        long = long.dropna(subset=[values_to])
    return long.reset_index(drop=True)


def pivot_wider(
    df: pd.DataFrame,
    names_from: str,
    values_from: str,
    id_cols: Sequence[str] | None = None,
    aggfunc: str = "last",
) -> pd.DataFrame:
    """Long -> wide; duplicate (id, name) pairs resolve via ``aggfunc``."""
    if id_cols is None:
        id_cols = [c for c in df.columns if c not in {names_from, values_from}]
    id_cols = list(id_cols)
    if not id_cols:
        raise ValueError("pivot_wider needs at least one id column")
    wide = df.pivot_table(
        index=id_cols,
        columns=names_from,
        values=values_from,
        aggfunc=aggfunc,
    )
    wide = wide.loc[:, ~wide.columns.duplicated()]
    wide = wide.reindex(sorted(wide.columns), axis=1)
    wide.columns.name = None
    return wide.reset_index()


def to_wide_prices(prices: pd.DataFrame, value: str = "adj_close") -> pd.DataFrame:
    """Date-indexed panel with one column per ticker; last duplicate wins."""
    tidy = prices.sort_values(["ticker", "date"]).drop_duplicates(["ticker", "date"], keep="last")
    wide = tidy.pivot_table(index="date", columns="ticker", values=value, aggfunc="last")
    wide = wide.loc[:, ~wide.columns.duplicated()].sort_index()
    wide.columns.name = None
    return wide


def to_long_prices(wide: pd.DataFrame, value: str = "adj_close") -> pd.DataFrame:
    long = (
        wide.rename_axis("date")
        .reset_index()
        .melt(id_vars="date", var_name="ticker", value_name=value)
        .dropna(subset=[value])
    )
    return long.sort_values(["ticker", "date"]).reset_index(drop=True)

"""Scoped data-masking verbs over pandas frames.

Every verb picks columns with a *selector* and applies one or more
function-likes (see :func:`analysis.functions.as_function`) to them:

* selector: a column name, a list of names, a predicate on the column
  Series (``is_numeric``) or :func:`everything`.
* fns: one function-like (transforms the column in place), a list
  (``{col}_{fn name}`` columns), or a dict ``{suffix: fn}``
  (``{col}_{suffix}`` columns).

Input frames are never modified.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Sequence

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype, is_string_dtype

from .functions import FunctionLike, as_function, function_name

Selector = Any


def everything() -> Callable[[pd.Series], bool]:
    return lambda s: True


def is_numeric(s: pd.Series) -> bool:
    return is_numeric_dtype(s) and not is_bool_dtype(s)


def is_text(s: pd.Series) -> bool:
    return is_string_dtype(s) and not is_numeric_dtype(s)


def select_columns(df: pd.DataFrame, cols: Selector, exclude: Sequence[str] = ()) -> list[str]:
    if cols is None:
        picked = list(df.columns)
    elif callable(cols):
        picked = [c for c in df.columns if cols(df[c])]
    else:
        names = [cols] if isinstance(cols, str) else list(cols)
        unknown = [c for c in names if c not in df.columns]
        if unknown:
            raise KeyError(f"Unknown columns: {', '.join(map(str, unknown))}")
        picked = names
    return [c for c in picked if c not in set(exclude)]


def _fn_specs(fns: Any) -> list[tuple[str | None, Callable[[Any], Any]]]:
    if isinstance(fns, Mapping):
        return [(str(k), as_function(v)) for k, v in fns.items()]
    if isinstance(fns, list):
        return [(function_name(f, default=f"fn{i + 1}"), as_function(f)) for i, f in enumerate(fns)]
    return [(None, as_function(fns))]


def _apply(df: pd.DataFrame, cols: list[str], fns: Any) -> dict[str, Any]:
    values: dict[str, Any] = {}
    specs = _fn_specs(fns)
    for col in cols:
        for suffix, fn in specs:
            name = col if suffix is None else f"{col}_{suffix}"
            values[name] = fn(df[col])
    return values


def across(df: pd.DataFrame, cols: Selector, fns: Any) -> pd.DataFrame:
    """Frame of transformed columns, aligned to ``df.index``."""
    values = _apply(df, select_columns(df, cols), fns)
    for name, value in values.items():
        # positional when already aligned; duplicate index labels can't reindex
        if isinstance(value, pd.Series) and value.index.equals(df.index):
            values[name] = value.to_numpy()
    return pd.DataFrame(values, index=df.index)


def mutate_at(df: pd.DataFrame, cols: Selector, fns: Any) -> pd.DataFrame:
    new = across(df, cols, fns)
    out = df.copy()
    for col in new.columns:
        out[col] = new[col].to_numpy()
    return out


def mutate_if(df: pd.DataFrame, pred: Callable[[pd.Series], bool], fns: Any) -> pd.DataFrame:
    return mutate_at(df, pred, fns)


def mutate_all(df: pd.DataFrame, fns: Any) -> pd.DataFrame:
    return mutate_at(df, everything(), fns)


def summarise_at(
    df: pd.DataFrame,
    cols: Selector,
    fns: Any,
    by: str | Sequence[str] | None = None,
) -> pd.DataFrame:
    """One summary row, or one row per group of ``by``."""
    if by is None:
        return pd.DataFrame([_apply(df, select_columns(df, cols), fns)])

    keys = [by] if isinstance(by, str) else list(by)
    picked = select_columns(df, cols, exclude=keys)
    rows = []
    for key, grp in df.groupby(keys, sort=True):
        key = key if isinstance(key, tuple) else (key,)
        row = dict(zip(keys, key))
        row.update(_apply(grp, picked, fns))
        rows.append(row)
    return pd.DataFrame(rows, columns=None if rows else keys)


def summarise_if(
    df: pd.DataFrame,
    pred: Callable[[pd.Series], bool],
    fns: Any,
    by: str | Sequence[str] | None = None,
) -> pd.DataFrame:
    return summarise_at(df, pred, fns, by=by)


def summarise_all(
    df: pd.DataFrame,
    fns: Any,
    by: str | Sequence[str] | None = None,
) -> pd.DataFrame:
    return summarise_at(df, everything(), fns, by=by)


def _row_masks(df: pd.DataFrame, pred: FunctionLike, cols: Selector) -> pd.DataFrame:
    fn = as_function(pred)
    picked = select_columns(df, cols)
    return pd.DataFrame({c: fn(df[c]) for c in picked}, index=df.index).astype(bool)


def filter_all(df: pd.DataFrame, pred: FunctionLike, cols: Selector = None) -> pd.DataFrame:
    """Rows where ``pred`` holds for every selected column."""
    return df[_row_masks(df, pred, cols).all(axis=1)]


def filter_any(df: pd.DataFrame, pred: FunctionLike, cols: Selector = None) -> pd.DataFrame:
    """Rows where ``pred`` holds for at least one selected column."""
    return df[_row_masks(df, pred, cols).any(axis=1)]


def rename_with(df: pd.DataFrame, f: Callable[[str], str], cols: Selector = None) -> pd.DataFrame:
    picked = set(select_columns(df, cols))
    return df.rename(columns={c: f(c) for c in df.columns if c in picked})

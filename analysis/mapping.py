"""Map/apply-style iteration helpers.

Each helper takes the data first and a function-like second, so calls read
left to right the way the notebooks chain them::

    frames = map_dfr(["AAPL", "MSFT"], fetch, id_col="ticker")
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Sequence

import pandas as pd

from .functions import FunctionLike, as_function

log = logging.getLogger(__name__)


def map_list(items: Iterable[Any], f: FunctionLike) -> list[Any]:
    fn = as_function(f)
    return [fn(x) for x in items]


def map_dict(mapping: Mapping[Any, Any], f: FunctionLike) -> dict[Any, Any]:
    fn = as_function(f)
    return {k: fn(v) for k, v in mapping.items()}


def _recycle(xs: Sequence[Any], ys: Sequence[Any]) -> tuple[Sequence[Any], Sequence[Any]]:
    if len(xs) == len(ys):
        return xs, ys
    if len(xs) == 1:
        return list(xs) * len(ys), ys
    if len(ys) == 1:
        return xs, list(ys) * len(xs)
    raise ValueError(f"Can't recycle inputs of length {len(xs)} and {len(ys)}")


def map2(xs: Sequence[Any], ys: Sequence[Any], f: Callable[[Any, Any], Any]) -> list[Any]:
    """Walk two sequences in parallel; a length-1 input is recycled."""
    xs, ys = _recycle(list(xs), list(ys))
    return [f(x, y) for x, y in zip(xs, ys)]


def pmap(rows: pd.DataFrame | Iterable[Mapping[str, Any]], f: Callable[..., Any]) -> list[Any]:
    """Call ``f(**row)`` for every row of a frame or every dict in a list."""
    if isinstance(rows, pd.DataFrame):
        records = rows.to_dict(orient="records")
    else:
        records = list(rows)
    return [f(**rec) for rec in records]


def _labelled(items: Iterable[Any] | Mapping[Any, Any]) -> list[tuple[Any, Any]]:
    if isinstance(items, Mapping):
        return list(items.items())
    return [(x, x) for x in items]


def map_dfr(
    items: Iterable[Any] | Mapping[Any, Any],
    f: FunctionLike,
    id_col: str | None = None,
) -> pd.DataFrame:
    """Apply a frame-returning ``f`` to each item and row-bind the results.

    With ``id_col`` each block gets a leading column holding the item (or the
    mapping key when ``items`` is a dict).
    """
    fn = as_function(f)
    frames = []
    for label, value in _labelled(items):
        out = fn(value)
        if not isinstance(out, pd.DataFrame):
            out = pd.DataFrame([out]) if isinstance(out, Mapping) else pd.DataFrame({"value": [out]})
        if id_col is not None:
            out = out.copy()
            out.insert(0, id_col, label)
        frames.append(out)
    if not frames:
        return pd.DataFrame(columns=[id_col] if id_col else [])
    log.debug("map_dfr: binding %d frames", len(frames))
    return pd.concat(frames, ignore_index=True)


def map_dfc(items: Iterable[Any] | Mapping[Any, Any], f: FunctionLike) -> pd.DataFrame:
    """Apply ``f`` and column-bind; Series results are named by their label."""
    fn = as_function(f)
    cols = []
    for label, value in _labelled(items):
        out = fn(value)
        if isinstance(out, pd.Series):
            out = out.rename(label).to_frame()
        elif not isinstance(out, pd.DataFrame):
            out = pd.DataFrame({label: [out]})
        cols.append(out)
    if not cols:
        return pd.DataFrame()
    return pd.concat(cols, axis=1)


def keep(items, pred: FunctionLike):
    fn = as_function(pred)
    if isinstance(items, Mapping):
        return {k: v for k, v in items.items() if fn(v)}
    return [x for x in items if fn(x)]


def discard(items, pred: FunctionLike):
    fn = as_function(pred)
    if isinstance(items, Mapping):
        return {k: v for k, v in items.items() if not fn(v)}
    return [x for x in items if not fn(x)]


def _is_empty(x: Any) -> bool:
    if x is None:
        return True
    if isinstance(x, (pd.DataFrame, pd.Series)):
        return x.empty
    try:
        return len(x) == 0
    except TypeError:
        return False


def compact(items):
    """Drop ``None`` and empty elements."""
    return discard(items, _is_empty)


def safely(f: FunctionLike) -> Callable[..., tuple[Any, Exception | None]]:
    """Wrap ``f`` so it returns ``(result, None)`` or ``(None, error)``."""
    fn = as_function(f)

    def wrapped(*args, **kwargs):
        try:
            return fn(*args, **kwargs), None
        except Exception as exc:
            log.debug("safely: %s raised %r", getattr(fn, "__name__", fn), exc)
            return None, exc

    return wrapped


def possibly(f: FunctionLike, otherwise: Any = None) -> Callable[..., Any]:
    """Wrap ``f`` so errors yield ``otherwise`` instead of raising."""
    safe = safely(f)

    def wrapped(*args, **kwargs):
        result, error = safe(*args, **kwargs)
        return otherwise if error is not None else result

    return wrapped

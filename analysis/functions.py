"""Coerce the short-hand function specs used by the mapping helpers and verbs."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

import numpy as np
import pandas as pd

FunctionLike = Any


def _named(name: str, kwargs: dict[str, Any]) -> Callable[[Any], Any]:
    def call(x):
        if isinstance(x, (pd.Series, pd.DataFrame)) and callable(getattr(type(x), name, None)):
            return getattr(x, name)(**kwargs)
        if isinstance(x, Mapping) and not kwargs:
            return x[name]
        fn = getattr(np, name, None)
        if callable(fn):
            return fn(x, **kwargs)
        attr = getattr(x, name)
        return attr(**kwargs) if callable(attr) else attr

    call.__name__ = name
    return call


def as_function(f: FunctionLike) -> Callable[[Any], Any]:
    """Turn ``f`` into a one-argument callable.

    * callables are returned unchanged
    * a string names a Series/DataFrame method (``"mean"``), a numpy
      function (``"log"``), or a key when applied to a mapping
    * an int extracts by position (``0`` -> ``x[0]``)
    * ``(name, kwargs)`` calls the named method with keyword arguments,
      e.g. ``("quantile", {"q": 0.9})``
    """
    if callable(f):
        return f
    if isinstance(f, str):
        return _named(f, {})
    if isinstance(f, bool):
        raise TypeError(f"Can't convert {f!r} to a function")
    if isinstance(f, int):
        def pluck(x, _i=f):
            if isinstance(x, pd.Series):
                return x.iloc[_i]
            return x[_i]

        return pluck
    if isinstance(f, tuple) and len(f) == 2 and isinstance(f[0], str) and isinstance(f[1], Mapping):
        return _named(f[0], dict(f[1]))
    raise TypeError(f"Can't convert {type(f).__name__} {f!r} to a function")


def function_name(f: FunctionLike, default: str = "fn") -> str:
    """Short label used for generated column names."""
    if isinstance(f, str):
        return f
    if isinstance(f, tuple) and f and isinstance(f[0], str):
        return f[0]
    name = getattr(f, "__name__", None)
    if not name or name == "<lambda>":
        return default
    return name

from __future__ import annotations

import numpy as np
import pandas as pd
import streamlit as st

from analysis.functions import as_function
from analysis.mapping import map2, map_dfr, map_list, pmap, possibly
from analysis.verbs import is_numeric, mutate_if, summarise_at, summarise_if
from ui.layout import code_cell, prose


def example_prices() -> pd.DataFrame:
    """Tiny deterministic panel: three tickers, five days of closes."""
    dates = pd.bdate_range("2024-01-02", periods=5)
    rows = []
    for ticker, base, step in (("AAPL", 185.0, 1.5), ("MSFT", 370.0, -2.0), ("SPY", 470.0, 0.5)):
        for i, d in enumerate(dates):
            rows.append({"ticker": ticker, "date": d, "close": base + step * i, "volume": 1_000 * (i + 1)})
    return pd.DataFrame(rows)


def ticker_summary(prices: pd.DataFrame) -> pd.DataFrame:
    return summarise_at(prices, ["close", "volume"], {"mean": "mean", "max": "max"}, by="ticker")


def page() -> None:
    st.header("Functional iteration over frames")
    prices = example_prices()

    prose(
        """
A `for` loop that appends to a list is the first thing most of us write.
The map family says the same thing in one line: *apply this function to
every element and hand me back the results*.
"""
    )
    code_cell(
        """
from analysis.mapping import map_list
map_list([1, 4, 9], "sqrt")
"""
    )
    st.write(map_list([1, 4, 9], "sqrt"))

    prose(
        """
Strings, integers and `(name, kwargs)` tuples are coerced into functions, so
`"mean"` calls `Series.mean` and `("quantile", {"q": 0.9})` calls
`Series.quantile(q=0.9)`. Real callables pass straight through.
"""
    )
    code_cell(
        """
p90 = as_function(("quantile", {"q": 0.9}))
p90(prices["close"])
"""
    )
    st.write(float(as_function(("quantile", {"q": 0.9}))(prices["close"])))

    prose("`map2` walks two sequences together; `pmap` feeds each row's columns as keyword arguments.")
    code_cell(
        """
map2([100, 200], [0.1, 0.2], lambda px, w: px * w)
pmap(prices.head(2)[["ticker", "close"]], lambda ticker, close: f"{ticker}@{close}")
"""
    )
    st.write(map2([100, 200], [0.1, 0.2], lambda px, w: px * w))
    st.write(pmap(prices.head(2)[["ticker", "close"]], lambda ticker, close: f"{ticker}@{close}"))

    prose("`map_dfr` applies a frame-returning function per item and row-binds the pieces.")
    code_cell(
        """
map_dfr(["AAPL", "SPY"], lambda t: prices[prices.ticker == t].tail(1), id_col="symbol")
"""
    )
    st.dataframe(
        map_dfr(["AAPL", "SPY"], lambda t: prices[prices.ticker == t].tail(1), id_col="symbol"),
        use_container_width=True,
    )

    prose("Wrap a fragile function with `possibly` and a failure becomes a default value.")
    safe_log = possibly(lambda x: np.log(float(x)), otherwise=np.nan)
    code_cell('map_list(["1", "oops"], possibly(lambda x: np.log(float(x)), otherwise=np.nan))')
    st.write(map_list(["1", "oops"], safe_log))

    st.subheader("Scoped verbs")
    prose(
        """
Scoped verbs apply the same function to a *selection* of columns: by name
(`_at`), by predicate (`_if`) or all of them (`_all`).
"""
    )
    code_cell(
        """
mutate_if(prices, is_numeric, "log")
summarise_at(prices, ["close", "volume"], {"mean": "mean", "max": "max"}, by="ticker")
summarise_if(prices, is_numeric, "std")
"""
    )
    st.dataframe(mutate_if(prices, is_numeric, "log").head(), use_container_width=True)
    st.dataframe(ticker_summary(prices), use_container_width=True)
    st.dataframe(summarise_if(prices, is_numeric, "std"), use_container_width=True)

from __future__ import annotations

import pandas as pd
import streamlit as st

from analysis.reshape import pivot_longer, pivot_wider
from ui.layout import code_cell, prose


def example_wide() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.to_datetime(["2024-01-02", "2024-01-03", "2024-01-04"]),
            "AAPL": [185.6, 184.3, 181.9],
            "MSFT": [370.9, 370.6, 367.9],
            "SPY": [472.7, 468.8, 467.3],
        }
    )


def page() -> None:
    st.header("Long and wide data")
    wide = example_wide()

    prose(
        """
Prices usually arrive *wide*: one column per ticker. That is handy for
eyeballing and for matrix maths, but most grouping and plotting code wants
the *long* layout, one row per observation with a key column saying which
ticker it belongs to.
"""
    )
    st.dataframe(wide, use_container_width=True)

    code_cell(
        """
long = pivot_longer(wide, ["AAPL", "MSFT", "SPY"], names_to="ticker", values_to="close")
"""
    )
    long = pivot_longer(wide, ["AAPL", "MSFT", "SPY"], names_to="ticker", values_to="close")
    st.dataframe(long, use_container_width=True)

    prose(
        """
Going back is a pivot. Duplicate `(date, ticker)` pairs are resolved by
keeping the last observation, so a re-downloaded day never produces two
columns.
"""
    )
    code_cell(
        """
pivot_wider(long, names_from="ticker", values_from="close")
"""
    )
    st.dataframe(pivot_wider(long, names_from="ticker", values_from="close"), use_container_width=True)

    prose("In long form a per-ticker statistic is a one-line group-by:")
    code_cell('long.groupby("ticker")["close"].agg(["min", "max"])')
    st.dataframe(long.groupby("ticker")["close"].agg(["min", "max"]), use_container_width=True)

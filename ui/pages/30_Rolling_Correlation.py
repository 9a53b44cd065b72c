from __future__ import annotations

import pandas as pd
import streamlit as st

from analysis.reshape import to_wide_prices
from analysis.rolling import correlation_long, log_returns, rolling_pairwise_mean
from data_lake.prices import load_prices
from data_lake.storage import Storage
from ui.layout import code_cell, prose

DEFAULT_TICKERS = "AAPL, MSFT, AMZN, JPM, XOM"
DEFAULT_BENCHMARK = "SPY"


def parse_ticker_list(text: str) -> list[str]:
    seen: list[str] = []
    for raw in text.replace(";", ",").split(","):
        sym = raw.strip().upper()
        if sym and sym not in seen:
            seen.append(sym)
    return seen


def correlation_frames(prices: pd.DataFrame, benchmark: str, window: int) -> tuple[pd.DataFrame, pd.Series]:
    returns = log_returns(to_wide_prices(prices))
    by_ticker = correlation_long(returns, benchmark, window)
    mean_corr = rolling_pairwise_mean(returns.drop(columns=[benchmark]), window)
    return by_ticker, mean_corr


def page() -> None:
    st.header("Rolling correlation")
    prose(
        """
A single correlation number over ten years hides a lot. Recomputing it over
a trailing window shows how co-movement rises in sell-offs and fades in
quiet markets. Pull daily prices, reshape them wide, take log returns and
let pandas do the windowing.
"""
    )
    code_cell(
        """
prices = load_prices(storage, tickers + [benchmark], start="2018-01-01")
returns = log_returns(to_wide_prices(prices))
corr = correlation_long(returns, benchmark, window=63)
"""
    )

    c0, c1, c2, c3 = st.columns([3, 1, 1, 1])
    with c0:
        tickers = parse_ticker_list(st.text_input("Tickers", value=DEFAULT_TICKERS))
    with c1:
        benchmark = st.text_input("Benchmark", value=DEFAULT_BENCHMARK).strip().upper()
    with c2:
        window = int(st.number_input("Window (days)", min_value=2, max_value=504, value=63, step=1))
    with c3:
        start = st.date_input("Start", value=pd.Timestamp("2018-01-01").date())

    if not st.button("Compute", key="rolling_corr_go"):
        return
    if len(tickers) < 2:
        st.error("Enter at least two tickers.")
        return

    storage = Storage.from_env()
    try:
        prices = load_prices(storage, tickers + [benchmark], start=start)
        by_ticker, mean_corr = correlation_frames(prices, benchmark, window)
    except Exception as exc:
        st.error(f"{type(exc).__name__}: {exc}")
        return

    st.subheader(f"{window}-day correlation with {benchmark}")
    st.line_chart(by_ticker, x="date", y="correlation", color="ticker")

    prose("Averaging every pairwise correlation gives a single *how together is the market* series.")
    st.line_chart(mean_corr)

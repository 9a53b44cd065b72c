from __future__ import annotations

import pandas as pd
import streamlit as st

from data_lake.membership import (
    DEFAULT_START,
    build_membership,
    load_membership,
    members_on_date,
    snapshot_to_intervals,
)
from data_lake.storage import Storage
from ui.layout import code_cell, prose


def membership_counts(members: pd.DataFrame) -> pd.DataFrame:
    """Members per monthly snapshot, oldest first."""
    return (
        members.groupby("date")["ticker"]
        .nunique()
        .rename("members")
        .sort_index()
        .reset_index()
    )


def storage_caption(storage: Storage) -> str:
    diag = storage.diagnostics()
    state = "ready" if diag["exists"] else "not created yet"
    return f"Lake at `{diag['local_root']}` ({state})"


def page() -> None:
    st.header("Historical S&P 500 constituents")
    prose(
        """
Backtesting on *today's* index members quietly drops every company that
went bust or got acquired. Wikipedia lists the current members and a log of
additions and removals, which is enough to walk history backward: for each
month, take out whatever was added and put back whatever was removed.
"""
    )
    code_cell(
        """
html = wikipedia.fetch_html()
members = reconstruct_membership(
    wikipedia.parse_constituents(html),
    wikipedia.parse_changes(html),
    start="2000-01-01",
)
"""
    )

    storage = Storage.from_env()
    st.caption(storage_caption(storage))
    start = st.text_input("Rebuild from", value=DEFAULT_START)
    if st.button("Rebuild from Wikipedia", key="members_rebuild"):
        try:
            st.success(build_membership(storage, start=start))
        except Exception as exc:
            st.error(f"Rebuild failed: {type(exc).__name__}: {exc}")
            return

    try:
        members = load_membership(storage, cache_salt=storage.cache_salt())
    except FileNotFoundError:
        st.info("No membership table yet. Rebuild it first.")
        return

    st.line_chart(membership_counts(members), x="date", y="members")

    day = st.date_input("Members on", value=pd.Timestamp.today().date())
    active = members_on_date(members, day)
    st.caption(f"{len(active)} members on {day}")
    st.dataframe(active, use_container_width=True)

    prose("The same table as contiguous membership spans:")
    st.dataframe(snapshot_to_intervals(members), use_container_width=True)

"""Lightweight type definitions for the membership lake."""

from typing import TypedDict, Optional


class ConstituentRow(TypedDict):
    ticker: str
    name: str


class MemberRow(TypedDict):
    date: str  # YYYY-MM-01
    ticker: str
    name: str


class ChangeRow(TypedDict):
    date: str  # YYYY-MM-DD
    added_ticker: str
    added_name: str
    removed_ticker: str
    removed_name: str
    reason: str


class MemberInterval(TypedDict):
    ticker: str
    name: str
    start_date: str  # YYYY-MM-01, first month present
    end_date: Optional[str]  # last calendar day of the final month, None while still a member


CONSTITUENT_COLUMNS = ["ticker", "name"]
MEMBER_COLUMNS = ["date", "ticker", "name"]
CHANGE_COLUMNS = [
    "date",
    "added_ticker",
    "added_name",
    "removed_ticker",
    "removed_name",
    "reason",
]
INTERVAL_COLUMNS = ["ticker", "name", "start_date", "end_date"]

# data_lake/wikipedia.py
"""Scrape current S&P 500 constituents and the changes log from Wikipedia."""

from __future__ import annotations

import io
import logging

import pandas as pd
import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from utils.tickers import clean_text, normalize_symbol

from .schemas import CHANGE_COLUMNS, CONSTITUENT_COLUMNS

log = logging.getLogger(__name__)

WIKI_URL = "https://en.wikipedia.org/wiki/List_of_S%26P_500_companies"
CONSTITUENTS_TABLE_ID = "constituents"
CHANGES_TABLE_ID = "changes"
WIKI_DATE_FORMAT = "%B %d, %Y"


class ScrapeError(RuntimeError):
    pass


class TableNotFoundError(ScrapeError):
    pass


class ChangesParseError(ScrapeError):
    pass


# ----------------------------- fetching ------------------------------ #

def _make_session() -> requests.Session:
    s = requests.Session()
    s.headers.update(
        {
            # Wikipedia rejects generic agents
            "User-Agent": "Mozilla/5.0 (compatible; sp500-notebooks/1.0; +https://example.com)",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }
    )
    retry = Retry(
        total=3,
        connect=3,
        read=3,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def fetch_html(url: str = WIKI_URL, session: requests.Session | None = None) -> str:
    session = session or _make_session()
    resp = session.get(url, timeout=20)
    resp.raise_for_status()
    log.debug("fetched %s (%s bytes)", url, len(resp.text))
    return resp.text


# ----------------------------- parsing ------------------------------- #

def find_table(html: str, table_id: str) -> str:
    """Return the outer HTML of ``<table id=table_id>``."""
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table", id=table_id)
    if table is None:
        raise TableNotFoundError(f"No <table id={table_id!r}> on page")
    return str(table)


def _read_table(html: str, table_id: str) -> pd.DataFrame:
    tables = pd.read_html(io.StringIO(find_table(html, table_id)), flavor="bs4")
    if not tables:
        raise TableNotFoundError(f"Table {table_id!r} has no parseable rows")
    return tables[0]


def _flatten_columns(df: pd.DataFrame) -> list[str]:
    """Join multi-row headers: ('Added', 'Ticker') -> 'added ticker'."""
    flat: list[str] = []
    for col in df.columns:
        parts = col if isinstance(col, tuple) else (col,)
        words: list[str] = []
        for part in parts:
            text = clean_text(part).lower()
            if text and not text.startswith("unnamed") and text not in words:
                words.append(text)
        flat.append(" ".join(words))
    return flat


def parse_constituents(html: str) -> pd.DataFrame:
    """Current members as ``ticker, name`` in page order."""
    df = _read_table(html, CONSTITUENTS_TABLE_ID)
    df.columns = _flatten_columns(df)
    cols = set(df.columns)
    sym_col = next((c for c in ("symbol", "ticker symbol", "ticker") if c in cols), None)
    name_col = next((c for c in ("security", "company") if c in cols), None)
    if sym_col is None or name_col is None:
        raise ScrapeError(f"Constituents table lacks symbol/security columns: {list(df.columns)}")

    out = pd.DataFrame(
        {
            "ticker": df[sym_col].map(normalize_symbol),
            "name": df[name_col].map(clean_text),
        }
    )
    out = out[out["ticker"] != ""].reset_index(drop=True)
    log.info("parsed %d current constituents", len(out))
    return out[CONSTITUENT_COLUMNS]


def _match_change_column(flat: str) -> str | None:
    if "date" in flat:
        return "date"
    if "reason" in flat:
        return "reason"
    for side in ("added", "removed"):
        if flat.startswith(side):
            if "ticker" in flat or "symbol" in flat:
                return f"{side}_ticker"
            if "security" in flat or "name" in flat or "company" in flat:
                return f"{side}_name"
    return None


def _parse_change_dates(values: pd.Series) -> pd.Series:
    text = values.map(clean_text)
    try:
        return pd.to_datetime(text, format=WIKI_DATE_FORMAT)
    except ValueError:
        log.debug("changes dates not all %r; falling back to mixed parsing", WIKI_DATE_FORMAT)
        return pd.to_datetime(text, format="mixed")


def parse_changes(html: str) -> pd.DataFrame:
    """Changes log as ``CHANGE_COLUMNS``; unparseable dates raise."""
    df = _read_table(html, CHANGES_TABLE_ID)
    rename: dict[str, str] = {}
    flat_cols = _flatten_columns(df)
    if len(set(flat_cols)) != len(flat_cols):
        raise ChangesParseError(f"Ambiguous changes headers: {flat_cols}")
    df.columns = flat_cols
    for flat in flat_cols:
        target = _match_change_column(flat)
        if target is None:
            log.warning("ignoring unknown changes column %r", flat)
            continue
        rename.setdefault(flat, target)
    missing = sorted(set(CHANGE_COLUMNS) - set(rename.values()))
    if missing:
        raise ChangesParseError(f"Changes table missing columns: {', '.join(missing)}")

    df = df[list(rename)].rename(columns=rename)
    out = pd.DataFrame({"date": _parse_change_dates(df["date"])})
    for col in ("added_ticker", "removed_ticker"):
        out[col] = df[col].map(normalize_symbol)
    for col in ("added_name", "removed_name", "reason"):
        out[col] = df[col].map(clean_text)
    log.info("parsed %d change rows", len(out))
    return out[CHANGE_COLUMNS].reset_index(drop=True)


def scrape(url: str = WIKI_URL) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Fetch the page once and return ``(constituents, changes)``."""
    html = fetch_html(url)
    return parse_constituents(html), parse_changes(html)

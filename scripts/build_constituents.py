#!/usr/bin/env python3
"""Rebuild the point-in-time S&P 500 membership table from Wikipedia."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from data_lake.membership import DEFAULT_START, build_membership  # noqa: E402
from data_lake.storage import Storage  # noqa: E402
from data_lake.wikipedia import WIKI_URL, fetch_html  # noqa: E402


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--start", default=DEFAULT_START, help="earliest month to emit")
    parser.add_argument("--end", help="latest month to emit (default: --as-of)")
    parser.add_argument("--as-of", help="month the constituents list describes (default: current month)")
    parser.add_argument("--root", help="lake root directory (default: $LAKE_ROOT or .lake)")
    parser.add_argument("--html", type=Path, help="use a saved copy of the page instead of fetching")
    parser.add_argument("--url", default=WIKI_URL)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    storage = Storage(args.root)
    html = args.html.read_text(encoding="utf-8") if args.html else fetch_html(args.url)
    summary = build_membership(storage, html=html, start=args.start, end=args.end, as_of=args.as_of)
    print(f"{storage.info()}: {summary}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

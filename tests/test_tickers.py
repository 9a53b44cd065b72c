import numpy as np
import pandas as pd
import pytest

from utils.tickers import clean_text, normalize_symbol, normalize_symbols


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("brk.b", "BRK-B"),
        (" BF.B ", "BF-B"),
        ("abc_d", "ABC-D"),
        ("MMM[1]", "MMM"),
        ("\xa0NVDA\u200b", "NVDA"),
        ("", ""),
        (None, ""),
        (np.nan, ""),
    ],
)
def test_normalize_symbol(raw, expected):
    assert normalize_symbol(raw) == expected


def test_clean_text_strips_footnotes_and_spaces():
    assert clean_text("Market cap change.[5][note 2]") == "Market cap change."
    assert clean_text("KKR\xa0&  Co.") == "KKR & Co."


def test_normalize_symbols_keeps_index():
    s = pd.Series(["a.b", None], index=[10, 11])
    out = normalize_symbols(s)
    assert out.to_dict() == {10: "A-B", 11: ""}

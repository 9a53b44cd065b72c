import numpy as np
import pandas as pd
import pytest

from analysis.reshape import pivot_longer, pivot_wider, to_long_prices, to_wide_prices


def test_pivot_longer_keeps_unselected_as_ids():
    wide = pd.DataFrame({"date": ["d1", "d2"], "AAA": [1.0, 2.0], "BBB": [3.0, np.nan]})
    long = pivot_longer(wide, ["AAA", "BBB"], names_to="ticker", values_to="close")
    assert long.columns.tolist() == ["date", "ticker", "close"]
    assert len(long) == 4

    dropped = pivot_longer(wide, lambda s: s.dtype == float, names_to="ticker", dropna=True)
    assert dropped["ticker"].tolist() == ["AAA", "AAA", "BBB"]


def test_pivot_wider_duplicate_safe():
    long = pd.DataFrame(
        {
            "date": ["d1", "d1", "d1"],
            "ticker": ["BBB", "AAA", "AAA"],
            "close": [3.0, 1.0, 2.0],
        }
    )
    wide = pivot_wider(long, names_from="ticker", values_from="close")
    assert wide.columns.tolist() == ["date", "AAA", "BBB"]
    assert wide.loc[0, "AAA"] == 2.0
    assert wide.shape == (1, 3)


def test_pivot_wider_needs_ids():
    with pytest.raises(ValueError):
        pivot_wider(pd.DataFrame({"k": ["a"], "v": [1]}), names_from="k", values_from="v")


def test_price_panel_round_trip_drops_gaps():
    tidy = pd.DataFrame(
        {
            "ticker": ["AAA", "AAA", "BBB", "AAA"],
            "date": pd.to_datetime(["2020-01-01", "2020-01-02", "2020-01-02", "2020-01-02"]),
            "adj_close": [1.0, 2.0, 3.0, 2.5],
        }
    )
    wide = to_wide_prices(tidy)
    assert wide.columns.tolist() == ["AAA", "BBB"]
    assert wide.loc[pd.Timestamp("2020-01-02"), "AAA"] == 2.5
    assert np.isnan(wide.loc[pd.Timestamp("2020-01-01"), "BBB"])

    long = to_long_prices(wide)
    assert long.to_dict("list") == {
        "date": [pd.Timestamp("2020-01-01"), pd.Timestamp("2020-01-02"), pd.Timestamp("2020-01-02")],
        "ticker": ["AAA", "AAA", "BBB"],
        "adj_close": [1.0, 2.5, 3.0],
    }


def test_pivot_longer_with_explicit_ids_drops_other_columns():
    wide = pd.DataFrame(
        {
            "date": ["d1", "d2"],
            "source": ["yf", "yf"],
            "AAA": [1.0, 2.0],
            "BBB": [3.0, 4.0],
        }
    )
    long = pivot_longer(wide, ["AAA", "BBB"], names_to="ticker", values_to="close", id_cols=["date"])
    assert long.columns.tolist() == ["date", "ticker", "close"]
    assert long["close"].tolist() == [1.0, 2.0, 3.0, 4.0]

    with pytest.raises(KeyError):
        pivot_longer(wide, ["AAA"], id_cols=["nope"])

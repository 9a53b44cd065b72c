import pandas as pd
import pytest

from data_lake.membership import changes_by_month, reconstruct_membership


def _current(*tickers):
    return pd.DataFrame({"ticker": list(tickers), "name": [f"{t} Inc" for t in tickers]})


def _changes(rows):
    cols = ["date", "added_ticker", "added_name", "removed_ticker", "removed_name", "reason"]
    return pd.DataFrame(rows, columns=cols)


def _month(members, month):
    return set(members.loc[members["date"] == pd.Timestamp(month), "ticker"])


def test_added_then_removed_example():
    changes = _changes([["2024-05-15", "C", "C Inc", "D", "D Corp", "Market cap change"]])
    out = reconstruct_membership(_current("A", "B", "C"), changes, start="2024-04-01", end="2024-06-01")

    assert _month(out, "2024-06-01") == {"A", "B", "C"}
    assert _month(out, "2024-05-01") == {"A", "B", "D"}
    d_name = out.loc[(out["date"] == "2024-05-01") & (out["ticker"] == "D"), "name"].item()
    assert d_name == "D Corp"


def test_months_without_changes_carry_forward():
    changes = _changes([["2024-05-15", "C", "C Inc", "D", "D Corp", ""]])
    out = reconstruct_membership(_current("A", "B", "C"), changes, start="2024-01-01", end="2024-06-01")

    for month in ("2024-04-01", "2024-03-01", "2024-02-01", "2024-01-01"):
        assert _month(out, month) == {"A", "B", "D"}


def test_output_months_descending_and_inclusive():
    out = reconstruct_membership(_current("A"), _changes([]), start="2023-11-20", end="2024-02-10")

    months = out["date"].drop_duplicates().tolist()
    assert months == [
        pd.Timestamp("2024-02-01"),
        pd.Timestamp("2024-01-01"),
        pd.Timestamp("2023-12-01"),
        pd.Timestamp("2023-11-01"),
    ]
    assert list(out.columns) == ["date", "ticker", "name"]


def test_added_ticker_absent_before_and_removed_present_before():
    changes = _changes(
        [
            ["2024-03-04", "NEW", "New Co", "OLD", "Old Co", "Acquired"],
            ["2024-03-18", "NEW2", "New Two", "", "", "Spin-off"],
        ]
    )
    out = reconstruct_membership(_current("A", "NEW", "NEW2"), changes, start="2024-01-01", end="2024-04-01")

    april, march = _month(out, "2024-04-01"), _month(out, "2024-03-01")
    assert {"NEW", "NEW2"} <= april
    assert not {"NEW", "NEW2"} & march
    assert "OLD" in march and "OLD" not in april


def test_empty_removed_ticker_is_skipped():
    changes = _changes([["2024-02-10", "X", "X Co", None, None, "Index expansion"]])
    out = reconstruct_membership(_current("A", "X"), changes, start="2024-02-01", end="2024-03-01")
    assert _month(out, "2024-02-01") == {"A"}


def test_duplicate_rows_last_write_wins():
    changes = _changes(
        [
            ["2024-02-01", "", "", "Z", "Zed Old Name", ""],
            ["2024-02-20", "", "", "Z", "Zed Newer Name", ""],
        ]
    )
    out = reconstruct_membership(_current("A"), changes, start="2024-02-01", end="2024-03-01")
    feb = out[out["date"] == pd.Timestamp("2024-02-01")]
    assert feb["ticker"].tolist() == ["A", "Z"]
    assert feb.loc[feb["ticker"] == "Z", "name"].item() == "Zed Newer Name"


def test_changes_in_current_month_do_not_alter_current_snapshot():
    changes = _changes([["2024-06-03", "C", "C Inc", "D", "D Corp", ""]])
    out = reconstruct_membership(
        _current("A", "C"), changes, start="2024-05-01", end="2024-06-30", as_of="2024-06-15"
    )
    assert _month(out, "2024-06-01") == {"A", "C"}
    assert _month(out, "2024-05-01") == {"A", "C"}


def test_end_before_current_month_undoes_later_changes():
    changes = _changes([["2024-05-15", "C", "C Inc", "D", "D Corp", ""]])
    out = reconstruct_membership(_current("A", "B", "C"), changes, start="2024-04-01", end="2024-04-01")

    assert out["date"].drop_duplicates().tolist() == [pd.Timestamp("2024-04-01")]
    assert sorted(out["ticker"]) == ["A", "B", "D"]


def test_explicit_as_of_anchors_the_walk():
    changes = _changes(
        [
            ["2024-05-15", "C", "C Inc", "D", "D Corp", ""],
            ["2024-03-04", "B", "B Inc", "E", "E Corp", ""],
        ]
    )
    out = reconstruct_membership(
        _current("A", "B", "C"), changes, start="2024-03-01", end="2024-04-01", as_of="2024-06-01"
    )

    assert out["date"].drop_duplicates().tolist() == [pd.Timestamp("2024-04-01"), pd.Timestamp("2024-03-01")]
    assert _month(out, "2024-04-01") == {"A", "B", "D"}
    assert _month(out, "2024-03-01") == {"A", "D", "E"}


def test_end_after_as_of_raises():
    with pytest.raises(ValueError, match="after the current snapshot month"):
        reconstruct_membership(_current("A"), _changes([]), start="2024-01-01", end="2024-07-01", as_of="2024-06-01")


def test_tickers_normalized_across_inputs():
    changes = _changes([["2024-05-02", "brk.b", "Berkshire", "", "", ""]])
    out = reconstruct_membership(_current("A", "BRK-B"), changes, start="2024-05-01", end="2024-06-01")
    assert _month(out, "2024-05-01") == {"A"}


def test_deterministic():
    changes = _changes(
        [
            ["2024-05-15", "C", "C Inc", "D", "D Corp", ""],
            ["2024-03-15", "B", "B Inc", "E", "E Corp", ""],
        ]
    )
    args = (_current("A", "B", "C"), changes)
    first = reconstruct_membership(*args, start="2023-12-01", end="2024-06-01")
    second = reconstruct_membership(*args, start="2023-12-01", end="2024-06-01")
    pd.testing.assert_frame_equal(first, second)


def test_default_end_is_current_month():
    out = reconstruct_membership(_current("A"), _changes([]), start=pd.Timestamp.today())
    assert out["date"].tolist() == [pd.Timestamp.today().to_period("M").to_timestamp()]


def test_start_after_end_raises():
    with pytest.raises(ValueError):
        reconstruct_membership(_current("A"), _changes([]), start="2024-06-01", end="2024-01-01")


def test_malformed_change_date_fails_fast():
    changes = _changes([["not a date", "C", "C Inc", "", "", ""]])
    with pytest.raises(ValueError):
        reconstruct_membership(_current("A"), changes, start="2024-01-01", end="2024-06-01")


def test_missing_columns_fail_fast():
    with pytest.raises(ValueError, match="removed_ticker"):
        reconstruct_membership(
            _current("A"),
            pd.DataFrame({"date": ["2024-01-01"], "added_ticker": ["B"]}),
            start="2024-01-01",
            end="2024-02-01",
        )
    with pytest.raises(ValueError, match="name"):
        reconstruct_membership(
            pd.DataFrame({"ticker": ["A"]}),
            _changes([]),
            start="2024-01-01",
            end="2024-02-01",
        )


def test_changes_by_month_keeps_log_order():
    changes = _changes(
        [
            ["2024-02-20", "B", "", "", "", ""],
            ["2024-01-05", "Q", "", "", "", ""],
            ["2024-02-01", "A", "", "", "", ""],
        ]
    )
    grouped = changes_by_month(changes)
    assert set(grouped) == {pd.Period("2024-01", "M"), pd.Period("2024-02", "M")}
    assert grouped[pd.Period("2024-02", "M")]["added_ticker"].tolist() == ["B", "A"]

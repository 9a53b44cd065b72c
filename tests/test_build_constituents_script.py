import importlib.util
from pathlib import Path

import pandas as pd

from data_lake import membership

REPO_ROOT = Path(__file__).resolve().parents[1]


def _load_script():
    path = REPO_ROOT / "scripts" / "build_constituents.py"
    spec = importlib.util.spec_from_file_location("build_constituents", path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_main_uses_saved_html(tmp_path, monkeypatch, wiki_page, capsys):
    monkeypatch.setattr(membership, "PREVIEW_DIR", tmp_path / "previews")
    page = tmp_path / "page.html"
    page.write_text(wiki_page, encoding="utf-8")
    script = _load_script()

    def no_network(*args, **kwargs):
        raise AssertionError("network fetch attempted")

    monkeypatch.setattr(script, "fetch_html", no_network)

    rc = script.main(
        ["--root", str(tmp_path / "lake"), "--html", str(page), "--start", "2024-05-01", "--end", "2024-07-01"]
    )
    assert rc == 0
    assert "rows over 3 months" in capsys.readouterr().err

    df = pd.read_parquet(tmp_path / "lake" / "membership" / "sp500_members.parquet")
    assert df["date"].nunique() == 3

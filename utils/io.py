from __future__ import annotations

import csv
from pathlib import Path
from typing import Union

import pandas as pd

# Determine repository root based on this file's location
REPO_ROOT = Path(__file__).resolve().parents[1]

# Commonly used paths
DATA_DIR = REPO_ROOT / "data"
PREVIEW_DIR = DATA_DIR / "previews"


def write_csv(path: Union[str, Path], df: pd.DataFrame) -> Path:
    """Write DataFrame to CSV with minimal quoting, creating directories as needed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(p, index=False, quoting=csv.QUOTE_MINIMAL)
    return p

# ui/nav.py
from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

RenderFn = Callable[[], None]

ROOT = Path(__file__).resolve().parent

log = logging.getLogger(__name__)


def _load_render_fn(module_name: str, file_path: str, attrs: Sequence[str]) -> Optional[RenderFn]:
    """
    Load a render function from a page module on disk.
    - Works with files whose stems start with digits (we choose our own module_name).
    - Tries attributes in order (e.g., page(), then main()).
    - Returns None on failure (caller can warn gracefully).
    """
    try:
        spec = importlib.util.spec_from_file_location(module_name, ROOT / file_path)
        if not spec or not spec.loader:
            return None
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    except Exception:
        log.exception("failed to load page %s", file_path)
        return None

    for attr in attrs:
        fn = getattr(mod, attr, None)
        if callable(fn):
            return fn
    return None


# Single source of truth for tabs: (label, route, render_fn)
TABS: list[tuple[str, str, Optional[RenderFn]]] = [
    (
        "🔁 Functional iteration",
        "functional-iteration",
        _load_render_fn("ui.pages.functional_iteration", "pages/10_Functional_Iteration.py", ("page",)),
    ),
    (
        "↔️ Long & wide",
        "reshaping",
        _load_render_fn("ui.pages.reshaping", "pages/20_Reshaping.py", ("page",)),
    ),
    (
        "📈 Rolling correlation",
        "rolling-correlation",
        _load_render_fn("ui.pages.rolling_correlation", "pages/30_Rolling_Correlation.py", ("page",)),
    ),
    (
        "🏛️ Historical constituents",
        "historical-constituents",
        _load_render_fn("ui.pages.historical_constituents", "pages/40_Historical_Constituents.py", ("page", "main")),
    ),
]

__all__ = ["TABS"]

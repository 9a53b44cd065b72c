"""Tidy-data helpers used by the notebooks: iteration, scoped verbs, reshaping, rolling stats."""

from .functions import as_function
from .mapping import map_dfr, map_list, map2, pmap
from .reshape import pivot_longer, pivot_wider, to_long_prices, to_wide_prices
from .rolling import rolling_correlation, rolling_correlation_to, rolling_pairwise_mean
from .verbs import across, mutate_at, mutate_if, summarise_at, summarise_if

__all__ = [
    "across",
    "as_function",
    "map2",
    "map_dfr",
    "map_list",
    "mutate_at",
    "mutate_if",
    "pivot_longer",
    "pivot_wider",
    "pmap",
    "rolling_correlation",
    "rolling_correlation_to",
    "rolling_pairwise_mean",
    "summarise_at",
    "summarise_if",
    "to_long_prices",
    "to_wide_prices",
]

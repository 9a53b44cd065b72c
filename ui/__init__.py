# Avoid importing heavy modules at import-time; pages import what they need locally.
from .layout import code_cell, prose, render_header, setup_page

__all__ = ["setup_page", "render_header", "prose", "code_cell"]

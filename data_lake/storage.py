# storage.py
from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

import pandas as pd
import streamlit as st

log = logging.getLogger(__name__)


LOCAL_ROOT = Path(".lake")


class ConfigurationError(RuntimeError):
    pass


def _coerce_path(value: Any) -> str:
    if isinstance(value, os.PathLike):  # type: ignore[arg-type]
        return os.fspath(value)  # type: ignore[arg-type]
    return str(value or "")


def _split_clean_parts(raw: str) -> list[str]:
    if not raw:
        return []
    normalized = raw.replace("\\", "/")
    parts: list[str] = []
    for part in normalized.split("/"):
        piece = part.strip()
        if not piece or piece in {".", ".."}:
            continue
        parts.append(piece)
    return parts


def _normalize_storage_key(raw: Any) -> str:
    """Return a clean relative key: no empty, ``.`` or ``..`` segments."""
    return "/".join(_split_clean_parts(_coerce_path(raw).strip()))


def _coerce_secrets_dict(obj: Any) -> dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return dict(obj)
    try:
        return dict(obj)
    except Exception:
        return {}


@dataclass(slots=True)
class _LakeConfig:
    root: Path


def _load_lake_config(root: str | os.PathLike | None = None) -> _LakeConfig:
    secrets_cfg: dict[str, Any] = {}
    try:
        secrets_cfg = _coerce_secrets_dict(getattr(st, "secrets", {})).get("lake", {})
    except Exception:
        # st.secrets raises when no secrets.toml exists; env/defaults still apply
        secrets_cfg = {}
    env_root = os.getenv("LAKE_ROOT")

    cfg_root = root or env_root or secrets_cfg.get("root") or LOCAL_ROOT
    return _LakeConfig(Path(cfg_root))


class Storage:
    """Local-filesystem store for the artifacts the notebooks share."""

    def __init__(self, root: str | os.PathLike | None = None) -> None:
        cfg = _load_lake_config(root)
        self.local_root: Path = cfg.root

        resolved = self._resolved_root()
        if resolved.exists() and not resolved.is_dir():
            raise ConfigurationError(f"Lake root is not a directory: {resolved}")

    # ---------------- Basic helpers ----------------
    def diagnostics(self) -> dict[str, Any]:
        return {
            "local_root": str(self._resolved_root()),
            "exists": self._resolved_root().is_dir(),
        }

    def info(self) -> str:
        return f"Storage(root={self._resolved_root()})"

    def cache_salt(self) -> str:
        return f"root={self._resolved_root()}"

    # ---------------- I/O primitives ----------------
    def _resolved_root(self) -> Path:
        root = Path(self.local_root if self.local_root is not None else LOCAL_ROOT)
        if not root.is_absolute():
            root = (Path.cwd() / root).resolve()
        return root

    def _normalize_key(self, path: Any) -> str:
        return _normalize_storage_key(path)

    def _norm(self, path: str) -> Path:
        rel = self._normalize_key(path)
        base = self._resolved_root()
        return base / rel if rel else base

    def read_bytes(self, path: str) -> bytes:
        return self._norm(path).read_bytes()

    def write_bytes(self, path: str, payload: bytes) -> None:
        dest = self._norm(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(payload)
        log.debug("wrote %s bytes to %s", len(payload), dest)

    def read_parquet_df(self, path: str) -> pd.DataFrame:
        return pd.read_parquet(self._norm(path))

    def write_parquet_df(self, path: str, df: pd.DataFrame) -> None:
        buffer = io.BytesIO()
        df.to_parquet(buffer, index=False)
        self.write_bytes(path, buffer.getvalue())

    def read_csv_df(self, path: str, **kwargs: Any) -> pd.DataFrame:
        return pd.read_csv(io.BytesIO(self.read_bytes(path)), **kwargs)

    def write_csv_df(self, path: str, df: pd.DataFrame) -> None:
        self.write_bytes(path, df.to_csv(index=False).encode("utf-8"))

    # ---------------- Listing helpers ----------------
    def list_prefix(self, prefix: str) -> List[str]:
        norm = self._normalize_key(prefix)
        base = self._norm(norm)
        if not base.exists() or not base.is_dir():
            return []
        entries: list[str] = []
        for child in sorted(base.iterdir()):
            rel = f"{norm}/{child.name}" if norm else child.name
            if child.is_dir():
                entries.append(f"{rel}/")
            elif child.is_file():
                entries.append(rel)
        return entries

    def exists(self, path: str) -> bool:
        if not path or str(path).endswith("/"):
            return False
        norm = self._normalize_key(path)
        if not norm:
            return False
        return self._norm(norm).is_file()

    # ---------------- Factories ----------------
    @classmethod
    def from_env(cls) -> "Storage":
        return cls()

"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

from core.config import SheetkeepConfig
from store.local_store import LocalDocumentStore


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SheetkeepConfig:
    """Config rooted in a temporary data directory with no remote store."""
    monkeypatch.delenv("SHEETKEEP_STORE_URI", raising=False)
    return replace(SheetkeepConfig.from_env(), data_root=tmp_path / "data")


@pytest.fixture
def local_store(config: SheetkeepConfig) -> LocalDocumentStore:
    """File-backed document store under the temporary data root."""
    return LocalDocumentStore(config.data_root)

"""In-memory dataset workspace.

This module holds the datasets currently shown to the user and the
active dataset selection. It is passed explicitly to ingest and
recovery flows instead of living in process-wide state.
"""

from __future__ import annotations

from typing import Mapping

from core.types import Dataset


class DatasetWorkspace:
    """Mutable view state for loaded and uploaded datasets."""

    def __init__(self) -> None:
        self._datasets: dict[str, Dataset] = {}
        self._active_name: str | None = None

    @property
    def active_name(self) -> str | None:
        """Return the active dataset name, if any."""
        return self._active_name

    def names(self) -> list[str]:
        """Return dataset names in insertion order."""
        return list(self._datasets)

    def get(self, name: str) -> Dataset | None:
        """Return a dataset by name, or None when unknown."""
        return self._datasets.get(name)

    def active(self) -> Dataset | None:
        """Return the active dataset, if any."""
        if self._active_name is None:
            return None
        return self._datasets.get(self._active_name)

    def put(self, dataset: Dataset) -> None:
        """Insert or fully replace a dataset and make it active."""
        self._datasets[dataset.name] = dataset
        self._active_name = dataset.name

    def activate(self, name: str) -> None:
        """Switch the active dataset.

        Raises:
            KeyError: If no dataset with that name is loaded.
        """
        if name not in self._datasets:
            raise KeyError(name)
        self._active_name = name

    def replace_all(self, datasets: Mapping[str, Dataset], active_name: str | None) -> None:
        """Replace the workspace contents with reloaded datasets."""
        self._datasets = dict(datasets)
        self._active_name = active_name if active_name in self._datasets else None

    def __len__(self) -> int:
        return len(self._datasets)

    def __contains__(self, name: object) -> bool:
        return name in self._datasets

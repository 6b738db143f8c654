"""Partial template stores and template directory discovery."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional, Protocol


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------


def find_templates_dir(candidates: Iterable[str | Path]) -> Path:
    """Return the first candidate directory that exists.

    When none exists the first candidate is created (with parents) and
    returned, so a missing templates directory is never fatal.

    Raises:
        ValueError: If *candidates* is empty.
    """
    paths = [Path(c) for c in candidates]
    if not paths:
        raise ValueError("At least one template directory candidate is required")

    for path in paths:
        if path.is_dir():
            return path

    paths[0].mkdir(parents=True, exist_ok=True)
    return paths[0]


# ---------------------------------------------------------------------------
# Partial stores
# ---------------------------------------------------------------------------


class PartialStore(Protocol):
    """Anything that can look up a named partial template."""

    def get(self, name: str) -> Optional[str]:
        """Return the partial source, or ``None`` when there is no such partial."""
        ...


class DictPartialStore:
    """In-memory partials, mostly for tests and inline rendering."""

    def __init__(self, partials: Mapping[str, str] | None = None) -> None:
        self._partials: dict[str, str] = dict(partials or {})

    def get(self, name: str) -> Optional[str]:
        return self._partials.get(name)

    def add(self, name: str, source: str) -> None:
        self._partials[name] = source


class FilePartialStore:
    """Partials stored as ``<directory>/<name>.template`` files.

    Files are read once and cached for the lifetime of the store. A missing
    directory behaves like an empty store. One trailing newline is dropped
    so a partial can be included mid-line.
    """

    SUFFIX = ".template"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._cache: dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        if name in self._cache:
            return self._cache[name]

        path = self.directory / f"{name}{self.SUFFIX}"
        if not path.is_file():
            return None

        content = path.read_text(encoding="utf-8")
        if content.endswith("\n"):
            content = content[:-1]
        self._cache[name] = content
        return content

"""Shared pytest fixtures for the vite-starter test suite.

Provides reusable fixtures for:
- Feature flag sets and project configs targeting a temp directory
- An in-memory filesystem and a scripted process runner for the pipeline
- The default plugin registry
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import pytest

from vitestarter.models import FeatureFlags, PackageManager, ProjectConfig
from vitestarter.plugins import PluginRegistry, create_plugin_registry
from vitestarter.presets import require_template


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------


class MemoryFileSystem:
    """Filesystem double that records every write."""

    def __init__(self, existing: tuple[Path, ...] = ()) -> None:
        self.dirs: set[Path] = set(existing)
        self.files: dict[Path, str] = {}
        self.executables: set[Path] = set()
        self.fail_on: Optional[str] = None

    async def exists(self, path: Path) -> bool:
        return path in self.dirs or path in self.files

    async def mkdir(self, path: Path, parents: bool = True) -> None:
        self.dirs.add(path)

    async def write_file(self, path: Path, content: str, executable: bool = False) -> None:
        if self.fail_on is not None and path.name == self.fail_on:
            raise OSError(f"No space left on device: {path}")
        self.files[path] = content
        if executable:
            self.executables.add(path)

    async def read_file(self, path: Path) -> str:
        return self.files[path]


class ScriptedRunner:
    """Process runner double.

    ``results`` maps a command prefix (``"git commit"``) to the
    ``(returncode, stdout, stderr)`` it should produce. Anything else
    succeeds.
    """

    def __init__(self, results: Optional[dict[str, tuple[int, str, str]]] = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[list[str], Path]] = []

    async def run(self, cmd: list[str], cwd: Path) -> tuple[int, str, str]:
        self.calls.append((list(cmd), cwd))
        joined = " ".join(cmd)
        for prefix, result in self.results.items():
            if joined.startswith(prefix):
                return result
        return (0, "", "")

    @property
    def commands(self) -> list[str]:
        return [" ".join(cmd) for cmd, _ in self.calls]


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


# ---------------------------------------------------------------------------
# Feature sets & configs
# ---------------------------------------------------------------------------


@pytest.fixture
def no_features() -> FeatureFlags:
    return FeatureFlags()


@pytest.fixture
def all_features() -> FeatureFlags:
    """Every optional feature on, with the standard test profile."""
    return require_template("full-pack").features


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ProjectConfig]:
    """Factory for ``ProjectConfig`` objects rooted in ``tmp_path``.

    Keyword arguments that name a feature flag are applied on top of the
    chosen template's flags; everything else goes to ``ProjectConfig``.
    """

    def _make(
        name: str = "my-app",
        template: str = "minimal",
        package_manager: PackageManager = PackageManager.NPM,
        init_git: bool = True,
        install_deps: bool = True,
        **kwargs: Any,
    ) -> ProjectConfig:
        preset = require_template(template)
        flag_names = set(FeatureFlags.model_fields)
        flags = {k: v for k, v in kwargs.items() if k in flag_names}
        extra = {k: v for k, v in kwargs.items() if k not in flag_names}
        return ProjectConfig.create(
            name,
            preset,
            features=preset.features.with_updates(**flags),
            target_dir=tmp_path / name,
            package_manager=package_manager,
            init_git=init_git,
            install_deps=install_deps,
            **extra,
        )

    return _make


@pytest.fixture
def registry() -> PluginRegistry:
    return create_plugin_registry()


@pytest.fixture
def make_fs() -> Callable[..., MemoryFileSystem]:
    return MemoryFileSystem


@pytest.fixture
def make_runner() -> Callable[..., ScriptedRunner]:
    return ScriptedRunner

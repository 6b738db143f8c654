"""Project assembly.

Combines the assembler-owned sources and root files with the output of
every active plugin, resolves dependencies and scripts, and builds the
``package.json``. Assembly is entirely in memory; nothing touches disk
until the pipeline writes the result, so every composition error (script
conflict, file collision, missing template) surfaces before the target
directory is created.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Optional

from vitestarter.config import Config
from vitestarter.engine import create_template_engine
from vitestarter.exceptions import FileCollisionError
from vitestarter.models import ProjectConfig
from vitestarter.plugins import PluginRegistry, create_plugin_registry
from vitestarter.plugins.base import Plugin, PluginContext, ProviderSpec
from vitestarter.resolver import resolve_dependencies, resolve_lint_staged, resolve_scripts
from vitestarter.scaffolder.manifest import build_package_json, serialize_package_json
from vitestarter.scaffolder.project_files import project_files
from vitestarter.scaffolder.sources import source_files

CORE_OWNER = "core"

FileKind = Literal["source", "config"]


# ---------------------------------------------------------------------------
# File manifest
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestEntry:
    path: str
    content: str
    owner: str
    kind: FileKind = "config"
    executable: bool = False


class FileManifest:
    """Output files keyed by project-relative path, each with a single owner."""

    def __init__(self) -> None:
        self._entries: dict[str, ManifestEntry] = {}

    def add(
        self,
        path: str,
        content: str,
        owner: str,
        *,
        kind: FileKind = "config",
        executable: bool = False,
    ) -> None:
        """Register a file.

        Raises:
            FileCollisionError: If *path* is already owned by someone.
        """
        existing = self._entries.get(path)
        if existing is not None:
            raise FileCollisionError(path, existing.owner, owner)
        self._entries[path] = ManifestEntry(path, content, owner, kind, executable)

    def owner_of(self, path: str) -> Optional[str]:
        entry = self._entries.get(path)
        return entry.owner if entry is not None else None

    def entries(self, kind: Optional[FileKind] = None) -> list[ManifestEntry]:
        return [e for e in self._entries.values() if kind is None or e.kind == kind]

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self._entries.values())


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class AssembledProject:
    """Everything needed to write a project to disk."""

    manifest: FileManifest
    package_json: dict[str, Any]
    plugin_ids: list[str] = field(default_factory=list)
    setup_commands: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def source_files(self) -> dict[str, str]:
        return {e.path: e.content for e in self.manifest.entries("source")}

    @property
    def config_files(self) -> dict[str, str]:
        return {e.path: e.content for e in self.manifest.entries("config")}

    @property
    def files(self) -> dict[str, str]:
        return {e.path: e.content for e in self.manifest}

    @property
    def executables(self) -> set[str]:
        return {e.path for e in self.manifest if e.executable}


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class ProjectAssembler:
    """Builds an :class:`AssembledProject` from a :class:`ProjectConfig`."""

    def __init__(
        self,
        registry: Optional[PluginRegistry] = None,
        settings: Optional[Config] = None,
    ) -> None:
        self.registry = registry if registry is not None else create_plugin_registry()
        self.settings = settings or Config()

    def _providers(
        self, plugins: list[Plugin], context: PluginContext
    ) -> list[tuple[str, ProviderSpec]]:
        providers = []
        for plugin in plugins:
            spec = plugin.provider(context)
            if spec is not None:
                providers.append((plugin.id, spec))
        return providers

    def assemble(self, config: ProjectConfig) -> AssembledProject:
        """Compose the full file set and manifest for *config*.

        Raises:
            FileCollisionError: If two contributors generate the same path.
            ScriptConflictError: If two contributors declare the same script.
            TemplateNotFoundError: If a plugin's template file is missing.
        """
        features = config.features
        plugins = self.registry.get_active(features)
        context = PluginContext.from_config(config)

        providers = self._providers(plugins, context)
        engine = create_template_engine(
            features,
            project_name=config.name,
            author=config.author,
            description=config.description,
            license=config.license,
            provider_order=[plugin_id for plugin_id, _ in providers],
            config=self.settings,
        )
        context = replace(context, engine=engine)

        resolved = resolve_dependencies(plugins, context)
        scripts = resolve_scripts(plugins, context)
        lint_staged = resolve_lint_staged(plugins, context)

        manifest = FileManifest()
        for path, content in source_files(
            features, engine, [spec for _, spec in providers]
        ).items():
            manifest.add(path, content, CORE_OWNER, kind="source")
        for path, content in project_files(
            features, engine, scripts, config.package_manager
        ).items():
            manifest.add(path, content, CORE_OWNER)

        setup_commands: list[str] = []
        for plugin in plugins:
            for plugin_file in plugin.get_files(context):
                manifest.add(
                    plugin_file.path,
                    plugin_file.content,
                    plugin.id,
                    executable=plugin_file.executable,
                )
            setup_commands.extend(plugin.get_setup_commands(context))

        package_json = build_package_json(
            config,
            resolved.dependencies,
            resolved.dev_dependencies,
            scripts,
            lint_staged,
        )
        manifest.add("package.json", serialize_package_json(package_json), CORE_OWNER)

        return AssembledProject(
            manifest=manifest,
            package_json=package_json,
            plugin_ids=[plugin.id for plugin in plugins],
            setup_commands=setup_commands,
            warnings=list(resolved.warnings),
        )

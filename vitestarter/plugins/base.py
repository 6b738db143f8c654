"""Plugin interface.

A plugin contributes everything one optional feature needs: files,
dependencies, scripts, lint-staged globs, setup commands and (for features
that wrap the React tree) a provider. Plugins are stateless; every method
is a pure function of the :class:`PluginContext` it is given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from vitestarter.engine import TemplateEngine, create_template_engine
from vitestarter.models import FeatureFlags, PackageManager, ProjectConfig, TestProfileConfig
from vitestarter.presets import get_test_profile


@dataclass(frozen=True)
class PluginFile:
    """A generated file, relative to the project root."""

    path: str
    content: str
    executable: bool = False


@dataclass(frozen=True)
class ProviderSpec:
    """How a plugin wraps ``<App />`` in ``src/main.tsx``."""

    imports: tuple[str, ...]
    open_tag: str
    close_tag: str


@dataclass(frozen=True)
class PluginContext:
    """Input shared by every plugin during one assembly."""

    features: FeatureFlags
    project_name: str = "my-app"
    package_manager: PackageManager = PackageManager.NPM
    author: str = ""
    description: str = ""
    engine: Optional[TemplateEngine] = field(default=None, compare=False)

    @classmethod
    def from_config(
        cls, config: ProjectConfig, engine: Optional[TemplateEngine] = None
    ) -> "PluginContext":
        return cls(
            features=config.features,
            project_name=config.name,
            package_manager=config.package_manager,
            author=config.author,
            description=config.description,
            engine=engine,
        )

    @property
    def test_profile(self) -> TestProfileConfig:
        """Configuration of the selected (or default) test profile."""
        return get_test_profile(self.features.effective_test_profile)

    def get_engine(self) -> TemplateEngine:
        """The shared engine, or a fresh one bound to the packaged templates."""
        if self.engine is not None:
            return self.engine
        return create_template_engine(
            self.features,
            project_name=self.project_name,
            author=self.author,
            description=self.description,
        )

    def render(self, template: str, **extra: Any) -> str:
        """Render an inline template string with the shared engine."""
        return self.get_engine().render(template, extra)


class Plugin(ABC):
    """Base class for feature plugins.

    Subclasses set the ``id``, ``name``, ``description`` and ``order`` class
    attributes and implement the four abstract methods. The remaining hooks
    default to contributing nothing.
    """

    id: ClassVar[str] = ""
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    order: ClassVar[int] = 100

    @abstractmethod
    def should_activate(self, features: FeatureFlags) -> bool:
        """Whether this plugin takes part for the given flags."""

    @abstractmethod
    def get_files(self, context: PluginContext) -> list[PluginFile]:
        """Files this plugin owns."""

    @abstractmethod
    def get_dependencies(self, context: PluginContext) -> dict[str, str]:
        """Runtime dependencies as ``{package: version}``."""

    @abstractmethod
    def get_dev_dependencies(self, context: PluginContext) -> dict[str, str]:
        """Development dependencies as ``{package: version}``."""

    def get_scripts(self, context: PluginContext) -> dict[str, str]:
        return {}

    def get_setup_commands(self, context: PluginContext) -> list[str]:
        return []

    def get_lint_staged(self, context: PluginContext) -> dict[str, list[str]]:
        return {}

    def provider(self, context: PluginContext) -> Optional[ProviderSpec]:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} order={self.order}>"


class FeaturePlugin(Plugin):
    """A plugin switched on by a single ``FeatureFlags`` field.

    Dependencies default to the class-level tables, so simple plugins only
    declare data and ``get_files``.
    """

    feature: ClassVar[str] = ""
    dependencies: ClassVar[dict[str, str]] = {}
    dev_dependencies: ClassVar[dict[str, str]] = {}

    def should_activate(self, features: FeatureFlags) -> bool:
        return bool(getattr(features, self.feature, False))

    def get_dependencies(self, context: PluginContext) -> dict[str, str]:
        return dict(self.dependencies)

    def get_dev_dependencies(self, context: PluginContext) -> dict[str, str]:
        return dict(self.dev_dependencies)

"""Pydantic v2 models for the vite-starter feature model.

Defines the flag set that drives composition, the project presets, the test
profile family and the fully-resolved ``ProjectConfig`` handed to assembly.
Template contexts use the camelCase aliases (``features.reactRouter``) since
the generated code lives in the JavaScript world.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _context_alias(name: str) -> str:
    """camelCase for snake_case fields; single words such as ``i18n`` stay as-is."""
    return to_camel(name) if "_" in name else name


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PackageManager(str, Enum):
    """Supported JavaScript package managers."""
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @property
    def install_command(self) -> list[str]:
        """Command used to install dependencies in a fresh project."""
        if self is PackageManager.YARN:
            return ["yarn"]
        return [self.value, "install"]

    @property
    def ci_install_command(self) -> str:
        """Lockfile-respecting install used by the generated CI workflow."""
        if self is PackageManager.NPM:
            return "npm ci"
        return f"{self.value} install --frozen-lockfile"

    def run_command(self, script: str) -> str:
        """Return the shell command that runs a package script.

        ``npm`` needs ``run``; ``yarn`` and ``pnpm`` accept the script name
        directly.
        """
        if self is PackageManager.NPM:
            return f"npm run {script}"
        return f"{self.value} {script}"


class TestProfile(str, Enum):
    """Test profile tiers, from no generated tests to full coverage."""
    __test__ = False

    BARE = "bare"
    MINIMUM = "minimum"
    STANDARD = "standard"
    ADVANCED = "advanced"
    COMPLETE = "complete"

    @classmethod
    def ordered(cls) -> list["TestProfile"]:
        """All profiles from the smallest tier to the largest."""
        return list(cls)

    @property
    def rank(self) -> int:
        return TestProfile.ordered().index(self)


class StepStatus(str, Enum):
    """Lifecycle of a single project creation step."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Feature flags
# ---------------------------------------------------------------------------

OPTIONAL_FEATURES: tuple[str, ...] = (
    "tailwindcss",
    "redux",
    "react_router",
    "i18n",
    "eslint",
    "prettier",
    "husky",
    "github_actions",
    "vscode",
    "testing",
)


class FeatureFlags(BaseModel):
    """Named boolean switches selecting optional capabilities.

    ``typescript`` is always ``True``; passing ``False`` fails validation.
    Instances are frozen, so the only way to change a selection is
    :meth:`with_updates`, which re-validates the result.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=_context_alias,
        populate_by_name=True,
        extra="forbid",
    )

    typescript: Literal[True] = True
    tailwindcss: bool = False
    redux: bool = False
    react_router: bool = False
    i18n: bool = False
    eslint: bool = False
    prettier: bool = False
    husky: bool = False
    github_actions: bool = False
    vscode: bool = False
    testing: bool = False
    test_profile: Optional[TestProfile] = None

    def with_updates(self, **changes: Any) -> "FeatureFlags":
        """Return a new, validated flag set with *changes* applied."""
        data = self.model_dump()
        data.update(changes)
        return FeatureFlags.model_validate(data)

    def enabled(self) -> list[str]:
        """Names of the optional features that are switched on."""
        return [name for name in OPTIONAL_FEATURES if getattr(self, name)]

    @property
    def effective_test_profile(self) -> TestProfile:
        """The chosen test profile, defaulting to ``standard``."""
        return self.test_profile or TestProfile.STANDARD

    def to_context(self) -> dict[str, Any]:
        """camelCase mapping exposed to templates as ``features``."""
        return self.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

class ProjectTemplate(BaseModel):
    """A named bundle of feature flags offered by the wizard."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Lookup key, e.g. 'full-pack'")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="One-line summary")
    icon: str = Field(default="", description="Glyph shown next to the name")
    color: str = Field(default="white", description="Rich color for the name")
    features: FeatureFlags = Field(default_factory=FeatureFlags)

    @property
    def is_customizable(self) -> bool:
        """Only the ``custom`` preset accepts a hand-picked feature set."""
        return self.id == "custom"

    def customize(self, **changes: Any) -> "ProjectTemplate":
        """Return a copy of the ``custom`` preset with updated features.

        Raises:
            ValueError: If this preset is not ``custom``.
        """
        if not self.is_customizable:
            raise ValueError(f"Template {self.id!r} is a fixed preset and cannot be customized.")
        return self.model_copy(update={"features": self.features.with_updates(**changes)})


class IncludedTests(BaseModel):
    """Which categories of tests a profile generates."""

    model_config = ConfigDict(frozen=True)

    unit: bool = False
    integration: bool = False
    a11y: bool = False
    performance: bool = False
    snapshot: bool = False

    def included(self) -> set[str]:
        return {name for name, value in self.model_dump().items() if value}


class TestProfileConfig(BaseModel):
    """Coverage threshold, test categories and npm packages of a profile."""
    __test__ = False

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    coverage_threshold: int = Field(..., ge=0, le=100)
    include_tests: IncludedTests
    dependencies: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------

class ProjectConfig(BaseModel):
    """Fully-resolved input to project assembly.

    Built once by the wizard or the headless CLI path and never mutated
    afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="npm package name of the project")
    author: str = Field(default="")
    license: str = Field(default="MIT")
    description: str = Field(default="")
    template: ProjectTemplate
    features: FeatureFlags
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    init_git: bool = Field(default=True)
    install_deps: bool = Field(default=True)
    target_dir: Path

    @classmethod
    def create(
        cls,
        name: str,
        template: ProjectTemplate,
        *,
        features: FeatureFlags | None = None,
        target_dir: str | Path | None = None,
        **kwargs: Any,
    ) -> "ProjectConfig":
        """Build a config, taking the preset's flags when *features* is omitted.

        ``target_dir`` defaults to ``./<name>`` resolved against the current
        working directory.
        """
        resolved_dir = Path(target_dir) if target_dir is not None else Path.cwd() / name
        return cls(
            name=name,
            template=template,
            features=features if features is not None else template.features,
            target_dir=resolved_dir.resolve(),
            **kwargs,
        )

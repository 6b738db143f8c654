"""Dependency, script and lint-staged resolution.

Merges the always-present base tables with the contributions of the active
plugins. Plugins are always visited in ascending ``order`` (ties broken by
id), which makes every output here deterministic:

* dependency maps are sorted by package name before they are returned;
* scripts keep their logical grouping (lifecycle first, then plugin order)
  and a key declared twice is an error;
* lint-staged globs appear in the order plugins first mention them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from vitestarter.exceptions import ScriptConflictError
from vitestarter.models import FeatureFlags, TestProfileConfig

if TYPE_CHECKING:
    from vitestarter.plugins.base import Plugin, PluginContext
    from vitestarter.plugins.registry import PluginRegistry

# ---------------------------------------------------------------------------
# Version tables
# ---------------------------------------------------------------------------

BASE_DEPENDENCIES: dict[str, str] = {
    "react": "^18.3.1",
    "react-dom": "^18.3.1",
}

BASE_DEV_DEPENDENCIES: dict[str, str] = {
    "@vitejs/plugin-react": "^4.5.2",
    "typescript": "~5.8.3",
    "@types/react": "^18.3.20",
    "@types/react-dom": "^18.3.7",
    "@types/node": "^22.15.0",
    "vite": "npm:rolldown-vite@7.2.5",
}

# Keyed by plugin id.
FEATURE_DEPENDENCIES: dict[str, dict[str, str]] = {
    "tailwindcss": {
        "tailwindcss": "^4.1.17",
        "@tailwindcss/vite": "^4.1.17",
    },
    "i18n": {
        "i18next": "^25.6.3",
        "react-i18next": "^16.3.5",
        "i18next-browser-languagedetector": "^8.2.0",
    },
    "redux": {
        "@reduxjs/toolkit": "^2.11.0",
        "react-redux": "^9.2.0",
    },
    "reactRouter": {
        "react-router-dom": "^7.9.6",
    },
}

FEATURE_DEV_DEPENDENCIES: dict[str, dict[str, str]] = {
    "tailwindcss": {
        "autoprefixer": "^10.4.22",
        "postcss": "^8.5.6",
    },
    "eslint": {
        "eslint": "^9.39.1",
        "@eslint/js": "^9.39.1",
        "@typescript-eslint/eslint-plugin": "^8.48.0",
        "@typescript-eslint/parser": "^8.48.0",
        "typescript-eslint": "^8.46.4",
        "eslint-plugin-react-hooks": "^5.2.0",
        "eslint-plugin-react-refresh": "^0.4.20",
        "globals": "^16.5.0",
    },
    "prettier": {
        "prettier": "^3.6.2",
        "eslint-config-prettier": "^10.1.8",
        "eslint-plugin-prettier": "^5.5.4",
    },
    "husky": {
        "husky": "^9.1.7",
        "lint-staged": "^16.1.0",
    },
}

# Every package a test profile may name. Profiles pick from this table.
TESTING_DEPENDENCY_VERSIONS: dict[str, str] = {
    "vitest": "^3.1.4",
    "@vitest/coverage-v8": "^3.1.4",
    "@vitest/ui": "^3.1.4",
    "@testing-library/react": "^16.2.0",
    "@testing-library/jest-dom": "^6.6.3",
    "@testing-library/user-event": "^14.6.1",
    "jsdom": "^26.1.0",
    "jest-axe": "^10.0.0",
    "@types/jest-axe": "^3.5.9",
}

BASE_SCRIPTS: dict[str, str] = {
    "dev": "vite",
    "build": "tsc -b && vite build",
    "preview": "vite preview",
}

BASE_OWNER = "base"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class ResolvedDependencies:
    """Merged, sorted dependency maps plus any version-conflict warnings."""

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _in_order(plugins: Iterable["Plugin"]) -> list["Plugin"]:
    return sorted(plugins, key=lambda p: (p.order, p.id))


def _sorted_map(values: Mapping[str, str]) -> dict[str, str]:
    return {key: values[key] for key in sorted(values)}


def _merge_versions(
    target: dict[str, str],
    owners: dict[str, str],
    contribution: Mapping[str, str],
    source: str,
    kind: str,
    warnings: list[str],
) -> None:
    for name, version in contribution.items():
        previous = target.get(name)
        if previous is not None and previous != version:
            warnings.append(
                f"{kind} {name!r}: {owners[name]} requests {previous}, "
                f"{source} requests {version}; using {version}"
            )
        target[name] = version
        owners[name] = source


def select_test_dependencies(
    profile: TestProfileConfig,
    versions: Mapping[str, str] = TESTING_DEPENDENCY_VERSIONS,
) -> dict[str, str]:
    """Pin the packages named by a test profile.

    A name with no entry in *versions* is skipped rather than emitted
    without a version, so a profile may list optional packages.
    """
    return {name: versions[name] for name in profile.dependencies if name in versions}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_dependencies(
    plugins: Iterable["Plugin"], context: "PluginContext"
) -> ResolvedDependencies:
    """Merge base and plugin dependency contributions.

    On a version clash the later plugin wins and a warning is recorded.
    """
    warnings: list[str] = []
    dependencies = dict(BASE_DEPENDENCIES)
    dev_dependencies = dict(BASE_DEV_DEPENDENCIES)
    dep_owners = {name: BASE_OWNER for name in dependencies}
    dev_owners = {name: BASE_OWNER for name in dev_dependencies}

    for plugin in _in_order(plugins):
        _merge_versions(
            dependencies, dep_owners, plugin.get_dependencies(context),
            plugin.id, "dependency", warnings,
        )
        _merge_versions(
            dev_dependencies, dev_owners, plugin.get_dev_dependencies(context),
            plugin.id, "devDependency", warnings,
        )

    return ResolvedDependencies(
        dependencies=_sorted_map(dependencies),
        dev_dependencies=_sorted_map(dev_dependencies),
        warnings=warnings,
    )


def resolve_scripts(plugins: Iterable["Plugin"], context: "PluginContext") -> dict[str, str]:
    """Lifecycle scripts followed by plugin scripts in plugin order.

    Raises:
        ScriptConflictError: If two contributors declare the same script.
    """
    scripts = dict(BASE_SCRIPTS)
    owners = {name: BASE_OWNER for name in scripts}

    for plugin in _in_order(plugins):
        for name, command in plugin.get_scripts(context).items():
            if name in scripts:
                raise ScriptConflictError(name, owners[name], plugin.id)
            scripts[name] = command
            owners[name] = plugin.id

    return scripts


def resolve_lint_staged(
    plugins: Iterable["Plugin"], context: "PluginContext"
) -> dict[str, list[str]]:
    """Build the ``lint-staged`` block, or ``{}`` when husky is not active.

    Commands for the same glob are appended in plugin order, without
    duplicates.
    """
    ordered = _in_order(plugins)
    if not any(plugin.id == "husky" for plugin in ordered):
        return {}

    lint_staged: dict[str, list[str]] = {}
    for plugin in ordered:
        for glob, commands in plugin.get_lint_staged(context).items():
            bucket = lint_staged.setdefault(glob, [])
            bucket.extend(cmd for cmd in commands if cmd not in bucket)

    return {glob: commands for glob, commands in lint_staged.items() if commands}


# ---------------------------------------------------------------------------
# Flag-only helpers
# ---------------------------------------------------------------------------


def _active_for(
    features: FeatureFlags, registry: Optional["PluginRegistry"]
) -> tuple[list["Plugin"], "PluginContext"]:
    from vitestarter.plugins import create_plugin_registry
    from vitestarter.plugins.base import PluginContext

    registry = registry or create_plugin_registry()
    return registry.get_active(features), PluginContext(features=features)


def generate_dependencies(
    features: FeatureFlags, registry: Optional["PluginRegistry"] = None
) -> ResolvedDependencies:
    """Resolve dependencies for *features* using the core plugin set."""
    plugins, context = _active_for(features, registry)
    return resolve_dependencies(plugins, context)


def generate_scripts(
    features: FeatureFlags, registry: Optional["PluginRegistry"] = None
) -> dict[str, str]:
    """Resolve package scripts for *features* using the core plugin set."""
    plugins, context = _active_for(features, registry)
    return resolve_scripts(plugins, context)

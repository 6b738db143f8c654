"""Predefined project templates and test profiles.

Pure data plus lookup helpers. Nothing here has side effects; the wizard and
the headless CLI read these tables to build a ``ProjectConfig``.
"""

from __future__ import annotations

from typing import Any

from vitestarter.models import (
    FeatureFlags,
    IncludedTests,
    ProjectTemplate,
    TestProfile,
    TestProfileConfig,
)

# ---------------------------------------------------------------------------
# Project templates
# ---------------------------------------------------------------------------

DEFAULT_FEATURES = FeatureFlags()

TEMPLATES: tuple[ProjectTemplate, ...] = (
    ProjectTemplate(
        id="minimal",
        name="Minimal",
        description="React + Vite + TypeScript only. Clean slate for custom setup.",
        icon="⚡",
        color="yellow",
        features=DEFAULT_FEATURES,
    ),
    ProjectTemplate(
        id="standard",
        name="Standard",
        description="React + Vite + TypeScript + TailwindCSS + ESLint + Prettier",
        icon="📦",
        color="cyan",
        features=DEFAULT_FEATURES.with_updates(tailwindcss=True, eslint=True, prettier=True),
    ),
    ProjectTemplate(
        id="full-pack",
        name="Full Pack",
        description="Everything included: Redux, React Router, i18n, TailwindCSS, Linting, Husky, CI/CD, Testing",
        icon="🚀",
        color="magenta",
        features=FeatureFlags(
            tailwindcss=True,
            redux=True,
            react_router=True,
            i18n=True,
            eslint=True,
            prettier=True,
            husky=True,
            github_actions=True,
            vscode=True,
            testing=True,
            test_profile=TestProfile.STANDARD,
        ),
    ),
    ProjectTemplate(
        id="custom",
        name="Custom",
        description="Choose exactly what you need. Pick your own features.",
        icon="🎨",
        color="green",
        features=DEFAULT_FEATURES,
    ),
)

FEATURE_DESCRIPTIONS: dict[str, dict[str, str]] = {
    "typescript": {
        "name": "TypeScript",
        "description": "Strongly typed JavaScript (always included)",
        "icon": "📘",
    },
    "tailwindcss": {
        "name": "TailwindCSS",
        "description": "Utility-first CSS framework with Vite plugin",
        "icon": "🎨",
    },
    "redux": {
        "name": "Redux Toolkit",
        "description": "State management with Redux Toolkit and React-Redux",
        "icon": "🔄",
    },
    "react_router": {
        "name": "React Router",
        "description": "Declarative routing for React applications",
        "icon": "🛣️",
    },
    "i18n": {
        "name": "i18next",
        "description": "Internationalization with react-i18next and language detection",
        "icon": "🌐",
    },
    "eslint": {
        "name": "ESLint",
        "description": "Find and fix problems in your JavaScript/TypeScript code",
        "icon": "🔍",
    },
    "prettier": {
        "name": "Prettier",
        "description": "Opinionated code formatter",
        "icon": "✨",
    },
    "husky": {
        "name": "Husky + lint-staged",
        "description": "Git hooks for linting and formatting on commit",
        "icon": "🐶",
    },
    "github_actions": {
        "name": "GitHub Actions",
        "description": "CI/CD workflow for testing and building",
        "icon": "⚙️",
    },
    "vscode": {
        "name": "VS Code Config",
        "description": "Editor settings, extensions, and launch configs",
        "icon": "💻",
    },
    "testing": {
        "name": "Vitest + Testing Library",
        "description": "Unit and component testing with a selectable test profile",
        "icon": "🧪",
    },
}


def get_template_by_id(template_id: str) -> ProjectTemplate | None:
    """Look up a preset by id, returning ``None`` when unknown."""
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None


def require_template(template_id: str) -> ProjectTemplate:
    """Look up a preset by id.

    Raises:
        KeyError: If *template_id* is not a known preset.
    """
    template = get_template_by_id(template_id)
    if template is None:
        valid = ", ".join(t.id for t in TEMPLATES)
        raise KeyError(f"Unknown template {template_id!r} (expected one of: {valid})")
    return template


def get_default_template() -> ProjectTemplate:
    """The preset used when none is chosen (``standard``)."""
    return get_template_by_id("standard") or TEMPLATES[0]


# ---------------------------------------------------------------------------
# Test profiles
# ---------------------------------------------------------------------------

_BASE_TEST_DEPS: tuple[str, ...] = (
    "vitest",
    "jsdom",
    "@testing-library/react",
    "@testing-library/jest-dom",
)

TEST_PROFILES: dict[TestProfile, TestProfileConfig] = {
    TestProfile.BARE: TestProfileConfig(
        name="Bare",
        description="Basic Vitest setup without tests",
        coverage_threshold=0,
        include_tests=IncludedTests(),
        dependencies=_BASE_TEST_DEPS,
    ),
    TestProfile.MINIMUM: TestProfileConfig(
        name="Minimum",
        description="Basic unit tests with 50% coverage",
        coverage_threshold=50,
        include_tests=IncludedTests(unit=True, snapshot=True),
        dependencies=(*_BASE_TEST_DEPS, "@vitest/coverage-v8"),
    ),
    TestProfile.STANDARD: TestProfileConfig(
        name="Standard",
        description="Unit and integration tests with 70% coverage",
        coverage_threshold=70,
        include_tests=IncludedTests(unit=True, integration=True, snapshot=True),
        dependencies=(
            *_BASE_TEST_DEPS,
            "@testing-library/user-event",
            "@vitest/coverage-v8",
        ),
    ),
    TestProfile.ADVANCED: TestProfileConfig(
        name="Advanced",
        description="Complete tests with accessibility and 80% coverage",
        coverage_threshold=80,
        include_tests=IncludedTests(unit=True, integration=True, a11y=True, snapshot=True),
        dependencies=(
            *_BASE_TEST_DEPS,
            "@testing-library/user-event",
            "@vitest/coverage-v8",
            "@vitest/ui",
            "jest-axe",
            "@types/jest-axe",
        ),
    ),
    TestProfile.COMPLETE: TestProfileConfig(
        name="Complete",
        description="All test types with 90%+ coverage",
        coverage_threshold=90,
        include_tests=IncludedTests(
            unit=True, integration=True, a11y=True, performance=True, snapshot=True
        ),
        dependencies=(
            *_BASE_TEST_DEPS,
            "@testing-library/user-event",
            "@vitest/coverage-v8",
            "@vitest/ui",
            "jest-axe",
            "@types/jest-axe",
        ),
    ),
}


def get_test_profile(profile: TestProfile | str) -> TestProfileConfig:
    """Return the configuration of *profile* (enum member or value)."""
    return TEST_PROFILES[TestProfile(profile)]


def get_available_profiles() -> list[dict[str, Any]]:
    """Profiles in tier order, shaped for a selection prompt."""
    return [
        {
            "value": profile,
            "label": TEST_PROFILES[profile].name,
            "description": TEST_PROFILES[profile].description,
        }
        for profile in TestProfile.ordered()
    ]


def get_test_dependencies(profile: TestProfile | str) -> list[str]:
    return list(get_test_profile(profile).dependencies)


def get_coverage_threshold(profile: TestProfile | str) -> int:
    return get_test_profile(profile).coverage_threshold

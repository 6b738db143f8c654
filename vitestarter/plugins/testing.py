"""Vitest + Testing Library plugin.

Every file is rendered from ``templates/test-templates/<file>.hbs`` through
the template engine. Which files exist, the coverage threshold and the
dependency set are all driven by the selected test profile.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from vitestarter.models import FeatureFlags, IncludedTests, TestProfile
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile
from vitestarter.presets import get_test_profile
from vitestarter.resolver import select_test_dependencies

TEMPLATE_DIR = "test-templates"
TESTS_DIR = "src/__tests__"

_Rule = Callable[[FeatureFlags, TestProfile, IncludedTests], bool]


def _from(tier: TestProfile) -> Callable[[TestProfile], bool]:
    return lambda profile: profile.rank >= tier.rank


_standard_up = _from(TestProfile.STANDARD)
_advanced_up = _from(TestProfile.ADVANCED)

# (output file, condition). Order is the order files are generated in.
# Feature-specific suites start at ``standard``; tailwind checks at ``advanced``.
TEST_FILES: tuple[tuple[str, _Rule], ...] = (
    ("setup.ts", lambda f, p, t: True),
    ("test-utils.tsx", lambda f, p, t: True),
    ("App.test.tsx", lambda f, p, t: t.unit),
    ("store.test.ts", lambda f, p, t: f.redux and _standard_up(p)),
    ("router.test.tsx", lambda f, p, t: f.react_router and _standard_up(p)),
    ("integration.test.tsx", lambda f, p, t: f.redux and t.integration),
    ("a11y.test.tsx", lambda f, p, t: t.a11y),
    ("performance.test.tsx", lambda f, p, t: t.performance),
    ("tailwind.test.tsx", lambda f, p, t: f.tailwindcss and _advanced_up(p)),
    ("i18n.test.tsx", lambda f, p, t: f.i18n and _standard_up(p)),
)


def planned_test_files(features: FeatureFlags, profile: TestProfile) -> list[str]:
    """Names of the test files generated under ``src/__tests__`` for *profile*."""
    include = get_test_profile(profile).include_tests
    return [name for name, rule in TEST_FILES if rule(features, profile, include)]


class TestingPlugin(FeaturePlugin):
    __test__ = False

    id = "testing"
    name = "Testing"
    description = "Testing with Vitest and Testing Library"
    order = 40
    feature = "testing"

    def _template_extras(self, context: PluginContext) -> dict[str, Any]:
        profile = context.test_profile
        return {
            "testProfile": context.features.effective_test_profile.value,
            "coverageThreshold": profile.coverage_threshold,
            "hasCoverage": profile.coverage_threshold > 0,
            "includeTests": profile.include_tests.model_dump(),
        }

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        """Render the vitest config and the profile's test files.

        Raises:
            TemplateNotFoundError: If a template for a planned file is missing.
        """
        engine = context.get_engine()
        extras = self._template_extras(context)

        files = [
            PluginFile(
                "vitest.config.ts",
                engine.render_file(f"{TEMPLATE_DIR}/vitest.config.ts.hbs", extras),
            )
        ]
        for name in planned_test_files(context.features, context.features.effective_test_profile):
            files.append(
                PluginFile(
                    f"{TESTS_DIR}/{name}",
                    engine.render_file(f"{TEMPLATE_DIR}/{name}.hbs", extras),
                )
            )
        return files

    def get_dependencies(self, context: PluginContext) -> dict[str, str]:
        return {}

    def get_dev_dependencies(self, context: PluginContext) -> dict[str, str]:
        return select_test_dependencies(context.test_profile)

    def get_scripts(self, context: PluginContext) -> dict[str, str]:
        profile = context.test_profile
        scripts = {
            "test": "vitest run",
            "test:watch": "vitest",
        }
        if "@vitest/ui" in profile.dependencies:
            scripts["test:ui"] = "vitest --ui"
        if profile.coverage_threshold > 0:
            scripts["test:coverage"] = "vitest run --coverage"
        return scripts

"""ESLint plugin: flat config, lint scripts and lint-staged entry."""

from __future__ import annotations

from vitestarter.codegen import format_eslint_config
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile
from vitestarter.resolver import FEATURE_DEV_DEPENDENCIES


class EslintPlugin(FeaturePlugin):
    id = "eslint"
    name = "ESLint"
    description = "Code linting with ESLint"
    order = 50
    feature = "eslint"
    dev_dependencies = FEATURE_DEV_DEPENDENCIES["eslint"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        return [PluginFile("eslint.config.js", format_eslint_config(context.features))]

    def get_scripts(self, context: PluginContext) -> dict[str, str]:
        return {
            "lint": "eslint . --max-warnings=0",
            "lint:fix": "eslint . --fix",
        }

    def get_lint_staged(self, context: PluginContext) -> dict[str, list[str]]:
        return {"*.{ts,tsx}": ["eslint --fix"]}

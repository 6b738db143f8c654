"""Prettier plugin."""

from __future__ import annotations

from vitestarter.codegen import format_json
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile
from vitestarter.resolver import FEATURE_DEV_DEPENDENCIES

PRETTIER_OPTIONS = {
    "semi": True,
    "singleQuote": True,
    "tabWidth": 2,
    "trailingComma": "es5",
    "printWidth": 100,
    "bracketSpacing": True,
    "arrowParens": "avoid",
    "endOfLine": "lf",
}

PRETTIER_IGNORE = """\
dist
coverage
node_modules
pnpm-lock.yaml
package-lock.json
yarn.lock
"""

SOURCE_GLOB = "'src/**/*.{ts,tsx,css,md}'"


class PrettierPlugin(FeaturePlugin):
    id = "prettier"
    name = "Prettier"
    description = "Code formatting with Prettier"
    order = 51
    feature = "prettier"
    dev_dependencies = FEATURE_DEV_DEPENDENCIES["prettier"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        return [
            PluginFile(".prettierrc", format_json(PRETTIER_OPTIONS)),
            PluginFile(".prettierignore", PRETTIER_IGNORE),
        ]

    def get_scripts(self, context: PluginContext) -> dict[str, str]:
        return {
            "format": f"prettier --write {SOURCE_GLOB}",
            "format:check": f"prettier --check {SOURCE_GLOB}",
        }

    def get_lint_staged(self, context: PluginContext) -> dict[str, list[str]]:
        return {
            "*.{ts,tsx}": ["prettier --write"],
            "*.{json,md,css}": ["prettier --write"],
        }

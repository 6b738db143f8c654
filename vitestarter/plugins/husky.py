"""Husky plugin: pre-commit hook running lint-staged.

The ``lint-staged`` globs themselves come from the lint and format plugins
and end up in ``package.json``.
"""

from __future__ import annotations

from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile
from vitestarter.resolver import FEATURE_DEV_DEPENDENCIES

PRE_COMMIT = "npx lint-staged\n"


class HuskyPlugin(FeaturePlugin):
    id = "husky"
    name = "Husky"
    description = "Git hooks with Husky and lint-staged"
    order = 60
    feature = "husky"
    dev_dependencies = FEATURE_DEV_DEPENDENCIES["husky"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        return [PluginFile(".husky/pre-commit", PRE_COMMIT, executable=True)]

    def get_scripts(self, context: PluginContext) -> dict[str, str]:
        return {"prepare": "husky"}

    def get_setup_commands(self, context: PluginContext) -> list[str]:
        # Hooks need a git repository; install alone cannot wire them up.
        return ["npx husky"]

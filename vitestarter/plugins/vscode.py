"""VS Code plugin: recommended extensions and workspace settings."""

from __future__ import annotations

from typing import Any

from vitestarter.codegen import format_json
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile


class VscodePlugin(FeaturePlugin):
    id = "vscode"
    name = "VS Code"
    description = "VS Code editor settings and extensions"
    order = 80
    feature = "vscode"

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        features = context.features

        extensions = []
        if features.eslint:
            extensions.append("dbaeumer.vscode-eslint")
        if features.prettier:
            extensions.append("esbenp.prettier-vscode")
        if features.tailwindcss:
            extensions.append("bradlc.vscode-tailwindcss")
        if features.i18n:
            extensions.append("lokalise.i18n-ally")
        if features.testing:
            extensions.append("vitest.explorer")

        settings: dict[str, Any] = {
            "editor.formatOnSave": True,
            "typescript.tsdk": "node_modules/typescript/lib",
            "typescript.enablePromptUseWorkspaceTsdk": True,
        }
        if features.prettier:
            settings["editor.defaultFormatter"] = "esbenp.prettier-vscode"
        if features.eslint:
            settings["editor.codeActionsOnSave"] = {"source.fixAll.eslint": "explicit"}
        if features.tailwindcss:
            settings["tailwindCSS.experimental.classRegex"] = [
                ["cva\\(([^)]*)\\)", "[\"'`]([^\"'`]*).*?[\"'`]"],
                ["cx\\(([^)]*)\\)", "(?:'|\"|`)([^']*)(?:'|\"|`)"],
            ]
            settings["editor.quickSuggestions"] = {"strings": "on"}
        if features.i18n:
            settings["i18n-ally.localesPaths"] = ["src/i18n/locales"]
            settings["i18n-ally.keystyle"] = "nested"

        return [
            PluginFile(".vscode/extensions.json", format_json({"recommendations": extensions})),
            PluginFile(".vscode/settings.json", format_json(settings)),
        ]

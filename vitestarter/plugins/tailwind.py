"""TailwindCSS plugin."""

from __future__ import annotations

from vitestarter.codegen import JsModule
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile
from vitestarter.resolver import FEATURE_DEPENDENCIES, FEATURE_DEV_DEPENDENCIES


class TailwindPlugin(FeaturePlugin):
    id = "tailwindcss"
    name = "Tailwind CSS"
    description = "Utility-first CSS framework"
    order = 10
    feature = "tailwindcss"
    dependencies = FEATURE_DEPENDENCIES["tailwindcss"]
    dev_dependencies = FEATURE_DEV_DEPENDENCIES["tailwindcss"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        module = JsModule(satisfies="Config")
        module.add_import("tailwindcss", named=["Config"], type_only=True)
        module.default_export = {
            "content": ["./index.html", "./src/**/*.{js,ts,jsx,tsx}"],
            "theme": {"extend": {}},
            "plugins": [],
        }
        return [PluginFile("tailwind.config.ts", module.render())]

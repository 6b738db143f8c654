"""i18next plugin: setup module, English/Spanish locales and a provider."""

from __future__ import annotations

from typing import Any, Optional

from vitestarter.codegen import format_json
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile, ProviderSpec
from vitestarter.resolver import FEATURE_DEPENDENCIES

SUPPORTED_LANGUAGES = ("en", "es")

I18N_SETUP = """\
import i18n from 'i18next';
import { initReactI18next } from 'react-i18next';
import LanguageDetector from 'i18next-browser-languagedetector';

{{#each languages}}import {{this}} from './locales/{{this}}.json';
{{/each}}
i18n
  .use(LanguageDetector)
  .use(initReactI18next)
  .init({
    resources: {
{{#each languages}}      {{this}}: { translation: {{this}} },
{{/each}}    },
    fallbackLng: 'en',
    supportedLngs: [{{#each languages}}'{{this}}'{{#unless @last}}, {{/unless}}{{/each}}],
    interpolation: {
      escapeValue: false,
    },
  });

export default i18n;
"""


def _messages(language: str, project_name: str) -> dict[str, Any]:
    if language == "es":
        return {
            "title": project_name,
            "description": "Edita src/App.tsx y guarda para ver los cambios",
            "home": {"title": "Inicio", "body": f"Bienvenido a {project_name}."},
            "notFound": {"title": "Página no encontrada"},
        }
    return {
        "title": project_name,
        "description": "Edit src/App.tsx and save to see changes",
        "home": {"title": "Home", "body": f"Welcome to {project_name}."},
        "notFound": {"title": "Page not found"},
    }


class I18nPlugin(FeaturePlugin):
    id = "i18n"
    name = "i18next"
    description = "Internationalization with react-i18next"
    order = 15
    feature = "i18n"
    dependencies = FEATURE_DEPENDENCIES["i18n"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        files = [
            PluginFile(
                "src/i18n/index.ts",
                context.render(I18N_SETUP, languages=list(SUPPORTED_LANGUAGES)),
            )
        ]
        for language in SUPPORTED_LANGUAGES:
            files.append(
                PluginFile(
                    f"src/i18n/locales/{language}.json",
                    format_json(_messages(language, context.project_name)),
                )
            )
        return files

    def provider(self, context: PluginContext) -> Optional[ProviderSpec]:
        return ProviderSpec(
            imports=(
                "import { I18nextProvider } from 'react-i18next';",
                "import i18n from './i18n';",
            ),
            open_tag="<I18nextProvider i18n={i18n}>",
            close_tag="</I18nextProvider>",
        )

"""React Router plugin: page components and the ``<BrowserRouter>`` wrapper."""

from __future__ import annotations

from typing import Optional

from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile, ProviderSpec
from vitestarter.resolver import FEATURE_DEPENDENCIES

HOME_PAGE = """\
{{#if features.i18n}}import { useTranslation } from 'react-i18next';
{{/if}}import { Link } from 'react-router-dom';

function HomePage() {
{{#if features.i18n}}  const { t } = useTranslation();

{{/if}}  return (
    <section{{#if features.tailwindcss}} className="space-y-4"{{/if}}>
{{#if features.i18n}}      <h2{{#if features.tailwindcss}} className="text-2xl font-semibold"{{/if}}>{t('home.title')}</h2>
      <p>{t('home.body')}</p>
{{else}}      <h2{{#if features.tailwindcss}} className="text-2xl font-semibold"{{/if}}>Home</h2>
      <p>Welcome to {{projectName}}.</p>
{{/if}}      <Link to="/missing"{{#if features.tailwindcss}} className="underline"{{/if}}>Go nowhere</Link>
    </section>
  );
}

export default HomePage;
"""

NOT_FOUND_PAGE = """\
import { Link } from 'react-router-dom';

function NotFoundPage() {
  return (
    <section{{#if features.tailwindcss}} className="space-y-4"{{/if}}>
      <h2{{#if features.tailwindcss}} className="text-2xl font-semibold"{{/if}}>404 - Page not found</h2>
      <Link to="/"{{#if features.tailwindcss}} className="underline"{{/if}}>Back home</Link>
    </section>
  );
}

export default NotFoundPage;
"""


class ReactRouterPlugin(FeaturePlugin):
    id = "reactRouter"
    name = "React Router"
    description = "Client-side routing with React Router"
    order = 25
    feature = "react_router"
    dependencies = FEATURE_DEPENDENCIES["reactRouter"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        return [
            PluginFile("src/pages/HomePage.tsx", context.render(HOME_PAGE)),
            PluginFile("src/pages/NotFoundPage.tsx", context.render(NOT_FOUND_PAGE)),
        ]

    def provider(self, context: PluginContext) -> Optional[ProviderSpec]:
        return ProviderSpec(
            imports=("import { BrowserRouter } from 'react-router-dom';",),
            open_tag="<BrowserRouter>",
            close_tag="</BrowserRouter>",
        )

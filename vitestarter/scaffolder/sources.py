"""Always-present application sources.

These files are owned by the assembler rather than by a plugin: every
project gets an entry point, a root component and a stylesheet, and the
Redux store bootstrap is generated here when Redux is enabled. The
content adapts to the feature flags through the template engine.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from vitestarter.engine import TemplateEngine
from vitestarter.models import FeatureFlags
from vitestarter.plugins.base import ProviderSpec

BASE_INDENT = "    "
STEP = "  "

MAIN_TSX = """\
import { StrictMode } from 'react';
import { createRoot } from 'react-dom/client';
{{> providerImports}}import App from './App';
import './App.css';

createRoot(document.getElementById('root')!).render(
  <StrictMode>
{{#each providers}}{{{indent}}}{{{openTag}}}
{{/each}}{{{appIndent}}}<App />
{{#each closingProviders}}{{{indent}}}{{{closeTag}}}
{{/each}}  </StrictMode>
);
"""

APP_TSX = """\
{{#if features.i18n}}import { useTranslation } from 'react-i18next';
{{/if}}{{#if features.reactRouter}}import { Link, Route, Routes } from 'react-router-dom';
import HomePage from './pages/HomePage';
import NotFoundPage from './pages/NotFoundPage';
{{/if}}{{#if features.redux}}import { useAppDispatch, useAppSelector } from './store/hooks';
import { selectTheme, toggleTheme } from './store/slices/appSlice';
{{/if}}
function App() {
{{#if features.i18n}}  const { t } = useTranslation();
{{/if}}{{#if features.redux}}  const theme = useAppSelector(selectTheme);
  const dispatch = useAppDispatch();
{{/if}}
  return (
    <div{{#if features.tailwindcss}} className="min-h-screen bg-gradient-to-br from-gray-900 to-gray-800 flex items-center justify-center"{{/if}}>
      <main{{#if features.tailwindcss}} className="text-center"{{/if}}>
        <h1{{#if features.tailwindcss}} className="text-4xl font-bold text-white mb-4"{{/if}}>{{#if features.i18n}}{t('title')}{{else}}{{projectName}}{{/if}}</h1>
        <p{{#if features.tailwindcss}} className="text-gray-400"{{/if}}>
          {{#if features.i18n}}{t('description')}{{else}}Edit <code>src/App.tsx</code> and save to see changes{{/if}}
        </p>
{{#if features.redux}}        <button type="button" onClick={() => dispatch(toggleTheme())}>
          Theme: {theme}
        </button>
{{/if}}{{#if features.reactRouter}}        <nav>
          <Link to="/">Home</Link>
        </nav>
        <Routes>
          <Route path="/" element={<HomePage />} />
          <Route path="*" element={<NotFoundPage />} />
        </Routes>
{{/if}}      </main>
    </div>
  );
}

export default App;
"""

TAILWIND_CSS = "@import 'tailwindcss';\n"

PLAIN_CSS = """\
#root {
  max-width: 1280px;
  margin: 0 auto;
  padding: 2rem;
  text-align: center;
}
"""

VITE_ENV_D_TS = '/// <reference types="vite/client" />\n'

STORE_TS = """\
import { configureStore } from '@reduxjs/toolkit';
import appReducer from './slices/appSlice';

export const store = configureStore({
  reducer: {
    app: appReducer,
  },
});

export type RootState = ReturnType<typeof store.getState>;
export type AppDispatch = typeof store.dispatch;
"""

APP_SLICE_TS = """\
import { createSlice, type PayloadAction } from '@reduxjs/toolkit';
import type { RootState } from '../store';

interface AppState {
  theme: 'light' | 'dark';
}

const initialState: AppState = {
  theme: 'dark',
};

export const appSlice = createSlice({
  name: 'app',
  initialState,
  reducers: {
    setTheme: (state, action: PayloadAction<'light' | 'dark'>) => {
      state.theme = action.payload;
    },
    toggleTheme: state => {
      state.theme = state.theme === 'dark' ? 'light' : 'dark';
    },
  },
});

export const { setTheme, toggleTheme } = appSlice.actions;
export const selectTheme = (state: RootState) => state.app.theme;
export default appSlice.reducer;
"""

VITE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" aria-hidden="true" role="img" '
    'width="31.88" height="32" preserveAspectRatio="xMidYMid meet" viewBox="0 0 256 257">'
    '<defs><linearGradient id="a" x1="-.828%" x2="57.636%" y1="7.652%" y2="78.411%">'
    '<stop offset="0%" stop-color="#41D1FF"/><stop offset="100%" stop-color="#BD34FE"/>'
    '</linearGradient><linearGradient id="b" x1="43.376%" x2="50.316%" y1="2.242%" y2="89.03%">'
    '<stop offset="0%" stop-color="#FFBD4F"/><stop offset="100%" stop-color="#FF980E"/>'
    "</linearGradient></defs>"
    '<path fill="url(#a)" d="M255.153 37.938L134.897 252.976c-2.483 4.44-8.862 4.466-11.382.048'
    "L.875 37.958c-2.746-4.814 1.371-10.646 6.827-9.67l120.385 21.517a6.537 6.537 0 0 0 2.322-.004"
    'l117.867-21.483c5.438-.991 9.574 4.796 6.877 9.62Z"/>'
    '<path fill="url(#b)" d="M185.432.063L96.44 17.501a3.268 3.268 0 0 0-2.634 3.014l-5.474 92.456'
    "a3.268 3.268 0 0 0 3.997 3.378l24.777-5.718c2.318-.535 4.413 1.507 3.936 3.838l-7.361 36.047"
    "c-.495 2.426 1.782 4.5 4.151 3.78l15.304-4.649c2.372-.72 4.652 1.36 4.15 3.788l-11.698 56.621"
    "c-.732 3.542 3.979 5.473 5.943 2.437l1.313-2.028l72.516-144.72c1.215-2.423-.88-5.186-3.54-4.672"
    "l-25.505 4.922c-2.396.462-4.435-1.77-3.759-4.114l16.646-57.705c.677-2.35-1.37-4.583-3.769-4.113Z"
    '"/></svg>\n'
)


def provider_context(providers: Sequence[ProviderSpec]) -> dict[str, Any]:
    """Template variables that nest *providers* around ``<App />``.

    The first provider is the outermost; closing tags are emitted in
    reverse so the tree stays balanced.
    """
    entries = [
        {
            "openTag": spec.open_tag,
            "closeTag": spec.close_tag,
            "indent": BASE_INDENT + STEP * depth,
        }
        for depth, spec in enumerate(providers)
    ]
    imports: list[str] = []
    for spec in providers:
        imports.extend(line for line in spec.imports if line not in imports)
    return {
        "providers": entries,
        "closingProviders": list(reversed(entries)),
        "providerImports": imports,
        "appIndent": BASE_INDENT + STEP * len(entries),
    }


def render_main_tsx(engine: TemplateEngine, providers: Sequence[ProviderSpec]) -> str:
    return engine.render(MAIN_TSX, provider_context(providers))


def render_app_tsx(engine: TemplateEngine) -> str:
    return engine.render(APP_TSX).lstrip("\n")


def render_app_css(features: FeatureFlags) -> str:
    return TAILWIND_CSS if features.tailwindcss else PLAIN_CSS


def source_files(
    features: FeatureFlags,
    engine: TemplateEngine,
    providers: Sequence[ProviderSpec],
) -> dict[str, str]:
    """Every assembler-owned source file, keyed by project-relative path."""
    files = {
        "src/main.tsx": render_main_tsx(engine, providers),
        "src/App.tsx": render_app_tsx(engine),
        "src/App.css": render_app_css(features),
        "src/vite-env.d.ts": VITE_ENV_D_TS,
        "public/vite.svg": VITE_SVG,
    }
    if features.redux:
        files["src/store/store.ts"] = STORE_TS
        files["src/store/slices/appSlice.ts"] = APP_SLICE_TS
    return files

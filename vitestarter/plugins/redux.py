"""Redux Toolkit plugin.

The store and the app slice are part of the always-generated sources; this
plugin owns the typed hooks and the ``<Provider>`` wrapper.
"""

from __future__ import annotations

from typing import Optional

from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile, ProviderSpec
from vitestarter.resolver import FEATURE_DEPENDENCIES

HOOKS_TS = """\
import { useDispatch, useSelector } from 'react-redux';
import type { RootState, AppDispatch } from './store';

// Typed hooks for use throughout the app
export const useAppDispatch = useDispatch.withTypes<AppDispatch>();
export const useAppSelector = useSelector.withTypes<RootState>();
"""


class ReduxPlugin(FeaturePlugin):
    id = "redux"
    name = "Redux Toolkit"
    description = "State management with Redux Toolkit"
    order = 20
    feature = "redux"
    dependencies = FEATURE_DEPENDENCIES["redux"]

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        return [PluginFile("src/store/hooks.ts", HOOKS_TS)]

    def provider(self, context: PluginContext) -> Optional[ProviderSpec]:
        return ProviderSpec(
            imports=(
                "import { Provider } from 'react-redux';",
                "import { store } from './store/store';",
            ),
            open_tag="<Provider store={store}>",
            close_tag="</Provider>",
        )

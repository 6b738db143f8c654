"""Feature plugins and the registry that orders them."""

from __future__ import annotations

from vitestarter.plugins.base import (
    FeaturePlugin,
    Plugin,
    PluginContext,
    PluginFile,
    ProviderSpec,
)
from vitestarter.plugins.eslint import EslintPlugin
from vitestarter.plugins.github_actions import GithubActionsPlugin
from vitestarter.plugins.husky import HuskyPlugin
from vitestarter.plugins.i18n import I18nPlugin
from vitestarter.plugins.prettier import PrettierPlugin
from vitestarter.plugins.react_router import ReactRouterPlugin
from vitestarter.plugins.redux import ReduxPlugin
from vitestarter.plugins.registry import PluginRegistry, validate_plugin
from vitestarter.plugins.tailwind import TailwindPlugin
from vitestarter.plugins.testing import TestingPlugin
from vitestarter.plugins.vscode import VscodePlugin

__all__ = [
    "ALL_PLUGINS",
    "EslintPlugin",
    "FeaturePlugin",
    "GithubActionsPlugin",
    "HuskyPlugin",
    "I18nPlugin",
    "Plugin",
    "PluginContext",
    "PluginFile",
    "PluginRegistry",
    "PrettierPlugin",
    "ProviderSpec",
    "ReactRouterPlugin",
    "ReduxPlugin",
    "TailwindPlugin",
    "TestingPlugin",
    "VscodePlugin",
    "create_plugin_registry",
    "validate_plugin",
]

ALL_PLUGINS: tuple[type[Plugin], ...] = (
    TailwindPlugin,
    I18nPlugin,
    ReduxPlugin,
    ReactRouterPlugin,
    TestingPlugin,
    EslintPlugin,
    PrettierPlugin,
    HuskyPlugin,
    GithubActionsPlugin,
    VscodePlugin,
)


def create_plugin_registry() -> PluginRegistry:
    """A fresh registry holding one instance of every core plugin."""
    return PluginRegistry(plugin_cls() for plugin_cls in ALL_PLUGINS)

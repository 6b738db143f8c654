"""Ordered, validated collection of plugins."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Optional

from vitestarter.exceptions import PluginNotFoundError, PluginValidationError
from vitestarter.models import FeatureFlags
from vitestarter.plugins.base import FeaturePlugin, Plugin


def validate_plugin(plugin: object) -> Plugin:
    """Reject malformed plugins before they can take part in composition.

    Raises:
        PluginValidationError: If *plugin* is not a ``Plugin`` instance, has
            an empty id or name, a non-positive or non-integer order, or
            (for feature plugins) names a field ``FeatureFlags`` lacks.
    """
    if not isinstance(plugin, Plugin):
        raise PluginValidationError(f"{plugin!r} is not a Plugin instance")
    if not isinstance(plugin.id, str) or not plugin.id.strip():
        raise PluginValidationError(f"{type(plugin).__name__} has an empty id")
    if not isinstance(plugin.name, str) or not plugin.name.strip():
        raise PluginValidationError(f"Plugin {plugin.id!r} has an empty name")
    if isinstance(plugin.order, bool) or not isinstance(plugin.order, int) or plugin.order <= 0:
        raise PluginValidationError(
            f"Plugin {plugin.id!r} has invalid order {plugin.order!r} (expected a positive integer)"
        )
    if isinstance(plugin, FeaturePlugin) and plugin.feature not in FeatureFlags.model_fields:
        raise PluginValidationError(
            f"Plugin {plugin.id!r} is switched by unknown feature {plugin.feature!r}"
        )
    return plugin


class PluginRegistry:
    """Holds plugins by id and answers which are active, in order.

    ``get_all`` sorts by ``order`` and then by id, and is the only ordering
    used by every downstream merge.
    """

    def __init__(self, plugins: Iterable[Plugin] = ()) -> None:
        self._plugins: dict[str, Plugin] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: Plugin) -> None:
        """Add *plugin*, replacing any plugin registered under the same id."""
        validate_plugin(plugin)
        self._plugins[plugin.id] = plugin

    def get_all(self) -> list[Plugin]:
        return sorted(self._plugins.values(), key=lambda p: (p.order, p.id))

    def get_active(self, features: FeatureFlags) -> list[Plugin]:
        return [plugin for plugin in self.get_all() if plugin.should_activate(features)]

    def get(self, plugin_id: str) -> Optional[Plugin]:
        return self._plugins.get(plugin_id)

    def require(self, plugin_id: str) -> Plugin:
        """Like :meth:`get` but raises :class:`PluginNotFoundError` when missing."""
        plugin = self._plugins.get(plugin_id)
        if plugin is None:
            raise PluginNotFoundError(plugin_id)
        return plugin

    def ids(self) -> list[str]:
        return [plugin.id for plugin in self.get_all()]

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[Plugin]:
        return iter(self.get_all())

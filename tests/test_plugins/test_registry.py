"""Tests for plugin validation and the plugin registry.

Covers:
- validate_plugin rejections (type, id, name, order, unknown feature)
- Registration, replacement and lookup
- Deterministic ordering and active-plugin selection
- The core plugin set
"""

from __future__ import annotations

import pytest

from vitestarter.exceptions import PluginNotFoundError, PluginValidationError
from vitestarter.models import FeatureFlags
from vitestarter.plugins import (
    ALL_PLUGINS,
    FeaturePlugin,
    PluginRegistry,
    create_plugin_registry,
    validate_plugin,
)

pytestmark = pytest.mark.unit


def make_plugin(plugin_id: str = "sample", order: int = 10, feature: str = "redux", name: str = "Sample"):
    """Build a minimal feature plugin class with the given attributes."""
    attrs = {
        "id": plugin_id,
        "name": name,
        "order": order,
        "feature": feature,
        "get_files": lambda self, context: [],
    }
    return type("SamplePlugin", (FeaturePlugin,), attrs)()


# ---------------------------------------------------------------------------
# validate_plugin
# ---------------------------------------------------------------------------


class TestValidatePlugin:
    def test_accepts_well_formed_plugin(self):
        plugin = make_plugin()
        assert validate_plugin(plugin) is plugin

    def test_rejects_non_plugin(self):
        with pytest.raises(PluginValidationError, match="not a Plugin"):
            validate_plugin(object())

    def test_rejects_empty_id(self):
        with pytest.raises(PluginValidationError, match="empty id"):
            validate_plugin(make_plugin(plugin_id="  "))

    def test_rejects_empty_name(self):
        with pytest.raises(PluginValidationError, match="empty name"):
            validate_plugin(make_plugin(name=""))

    @pytest.mark.parametrize("order", [0, -5, True])
    def test_rejects_bad_order(self, order):
        with pytest.raises(PluginValidationError, match="invalid order"):
            validate_plugin(make_plugin(order=order))

    def test_rejects_unknown_feature(self):
        with pytest.raises(PluginValidationError, match="unknown feature"):
            validate_plugin(make_plugin(feature="graphql"))


# ---------------------------------------------------------------------------
# PluginRegistry
# ---------------------------------------------------------------------------


class TestPluginRegistry:
    def test_register_and_lookup(self):
        registry = PluginRegistry()
        plugin = make_plugin("a")
        registry.register(plugin)
        assert "a" in registry
        assert registry.get("a") is plugin
        assert registry.require("a") is plugin
        assert len(registry) == 1

    def test_missing_plugin(self):
        registry = PluginRegistry()
        assert registry.get("nope") is None
        with pytest.raises(PluginNotFoundError, match="nope"):
            registry.require("nope")

    def test_missing_plugin_is_a_key_error(self):
        with pytest.raises(KeyError):
            PluginRegistry().require("nope")

    def test_same_id_replaces(self):
        first, second = make_plugin("a", order=10), make_plugin("a", order=20)
        registry = PluginRegistry([first, second])
        assert len(registry) == 1
        assert registry.get("a") is second

    def test_invalid_plugin_is_not_registered(self):
        registry = PluginRegistry()
        with pytest.raises(PluginValidationError):
            registry.register(make_plugin(order=0))
        assert len(registry) == 0

    def test_ordering_by_order_then_id(self):
        registry = PluginRegistry(
            [make_plugin("c", 30), make_plugin("b", 10), make_plugin("a", 10)]
        )
        assert registry.ids() == ["a", "b", "c"]
        assert [p.id for p in registry] == ["a", "b", "c"]

    def test_get_active_filters_and_keeps_order(self):
        registry = PluginRegistry(
            [make_plugin("late", 90, feature="redux"), make_plugin("early", 5, feature="redux"),
             make_plugin("off", 1, feature="i18n")]
        )
        active = registry.get_active(FeatureFlags(redux=True))
        assert [p.id for p in active] == ["early", "late"]


class TestCorePlugins:
    EXPECTED = [
        ("tailwindcss", 10),
        ("i18n", 15),
        ("redux", 20),
        ("reactRouter", 25),
        ("testing", 40),
        ("eslint", 50),
        ("prettier", 51),
        ("husky", 60),
        ("githubActions", 70),
        ("vscode", 80),
    ]

    def test_ids_and_orders(self, registry):
        assert [(p.id, p.order) for p in registry] == self.EXPECTED

    def test_one_instance_per_class(self):
        assert len(create_plugin_registry()) == len(ALL_PLUGINS)

    def test_nothing_active_for_minimal(self, registry, no_features):
        assert registry.get_active(no_features) == []

    def test_everything_active_for_full_pack(self, registry, all_features):
        assert len(registry.get_active(all_features)) == len(ALL_PLUGINS)

    @pytest.mark.parametrize(
        "flag, plugin_id",
        [
            ("tailwindcss", "tailwindcss"),
            ("react_router", "reactRouter"),
            ("github_actions", "githubActions"),
            ("testing", "testing"),
        ],
    )
    def test_single_flag_activates_single_plugin(self, registry, flag, plugin_id):
        active = registry.get_active(FeatureFlags(**{flag: True}))
        assert [p.id for p in active] == [plugin_id]

    def test_fresh_registry_each_call(self):
        assert create_plugin_registry() is not create_plugin_registry()

    def test_repr(self, registry):
        assert repr(registry.require("husky")) == "<HuskyPlugin id='husky' order=60>"

"""Structured JavaScript/TypeScript module generation.

Config files are described as data (imports, plain values, raw expressions)
and turned into source text by :func:`to_js` and :meth:`JsModule.render`.
Commas, indentation and nesting are handled here once, so callers only
decide *what* goes into a config.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from vitestarter.models import FeatureFlags

INDENT = "  "
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# ---------------------------------------------------------------------------
# Value nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Raw:
    """A JavaScript expression emitted verbatim (``globals.browser``, ``react()``)."""

    code: str


@dataclass(frozen=True)
class Spread:
    """Object spread. Used as a *key*; its value in the mapping is ignored."""

    code: str


@dataclass(frozen=True)
class Call:
    """A call expression whose arguments are serialized with :func:`to_js`."""

    callee: str
    args: tuple[Any, ...] = ()


def js_string(value: str) -> str:
    """Single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _js_key(key: str) -> str:
    return key if _IDENTIFIER_RE.match(key) else js_string(key)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (Mapping, list, tuple, Call))


def to_js(value: Any, level: int = 0) -> str:
    """Serialize *value* as a JavaScript expression.

    Mappings always span several lines with trailing commas. Lists of
    scalars stay on one line; lists containing containers are expanded.
    """
    if isinstance(value, Raw):
        return value.code
    if isinstance(value, Call):
        return f"{value.callee}({', '.join(to_js(arg, level) for arg in value.args)})"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return js_string(value)

    pad = INDENT * (level + 1)
    closing = INDENT * level

    if isinstance(value, Mapping):
        if not value:
            return "{}"
        lines = []
        for key, item in value.items():
            if isinstance(key, Spread):
                lines.append(f"{pad}...{key.code},")
            else:
                lines.append(f"{pad}{_js_key(str(key))}: {to_js(item, level + 1)},")
        return "{\n" + "\n".join(lines) + f"\n{closing}}}"

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if all(_is_scalar(item) for item in value):
            return "[" + ", ".join(to_js(item, level) for item in value) + "]"
        lines = [f"{pad}{to_js(item, level + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + f"\n{closing}]"

    raise TypeError(f"Cannot serialize {type(value).__name__} to JavaScript")


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JsImport:
    """One import statement."""

    source: str
    default: Optional[str] = None
    named: tuple[str, ...] = ()
    type_only: bool = False

    def render(self) -> str:
        keyword = "import type" if self.type_only else "import"
        parts: list[str] = []
        if self.default:
            parts.append(self.default)
        if self.named:
            parts.append("{ " + ", ".join(self.named) + " }")
        if not parts:
            return f"import {js_string(self.source)};"
        return f"{keyword} {', '.join(parts)} from {js_string(self.source)};"


@dataclass
class JsModule:
    """An ES module: imports, optional preamble statements and a default export."""

    imports: list[JsImport] = field(default_factory=list)
    statements: list[str] = field(default_factory=list)
    default_export: Any = None
    satisfies: Optional[str] = None
    comment: Optional[str] = None

    def add_import(
        self,
        source: str,
        default: Optional[str] = None,
        named: Sequence[str] = (),
        type_only: bool = False,
    ) -> "JsModule":
        self.imports.append(JsImport(source, default, tuple(named), type_only))
        return self

    def render(self) -> str:
        blocks: list[str] = []
        if self.imports:
            blocks.append("\n".join(imp.render() for imp in self.imports))
        blocks.extend(self.statements)
        if self.default_export is not None:
            export = f"export default {to_js(self.default_export)}"
            if self.satisfies:
                export = f"{export} satisfies {self.satisfies}"
            export = f"{export};"
            if self.comment:
                export = f"// {self.comment}\n{export}"
            blocks.append(export)
        return "\n\n".join(blocks) + "\n"


# ---------------------------------------------------------------------------
# Concrete configs
# ---------------------------------------------------------------------------


def format_vite_config(features: FeatureFlags) -> str:
    """``vite.config.ts``: React plugin, plus the Tailwind Vite plugin first when enabled."""
    module = JsModule(comment="https://vite.dev/config/")
    module.add_import("vite", named=["defineConfig"])
    module.add_import("@vitejs/plugin-react", default="react")

    plugins: list[Any] = [Raw("react()")]
    if features.tailwindcss:
        module.add_import("@tailwindcss/vite", default="tailwindcss")
        plugins.insert(0, Raw("tailwindcss()"))

    module.default_export = Call("defineConfig", ({"plugins": plugins},))
    return module.render()


def format_eslint_config(features: FeatureFlags) -> str:
    """Flat ``eslint.config.js`` for TypeScript + React, Prettier-aware."""
    module = JsModule()
    module.add_import("@eslint/js", default="js")
    module.add_import("globals", default="globals")
    module.add_import("eslint-plugin-react-hooks", default="reactHooks")
    module.add_import("eslint-plugin-react-refresh", default="reactRefresh")
    module.add_import("typescript-eslint", default="tseslint")

    plugins: dict[str, Any] = {
        "@typescript-eslint": Raw("tseslint.plugin"),
        "react-hooks": Raw("reactHooks"),
        "react-refresh": Raw("reactRefresh"),
    }
    rules: dict[Any, Any] = {
        Spread("js.configs.recommended.rules"): None,
        Spread("tseslint.configs.recommended.rules"): None,
        Spread("reactHooks.configs.recommended.rules"): None,
        "react-refresh/only-export-components": ["warn", {"allowConstantExport": True}],
        "@typescript-eslint/no-explicit-any": "warn",
        "@typescript-eslint/no-unused-vars": ["error", {"argsIgnorePattern": "^_"}],
    }

    configs: list[Any] = [
        {"ignores": ["dist", "node_modules", "coverage"]},
        {
            "files": ["**/*.{ts,tsx}"],
            "languageOptions": {
                "ecmaVersion": 2020,
                "sourceType": "module",
                "globals": Raw("globals.browser"),
                "parser": Raw("tseslint.parser"),
            },
            "plugins": plugins,
            "rules": rules,
        },
    ]

    if features.prettier:
        module.add_import("eslint-plugin-prettier", default="prettier")
        module.add_import("eslint-config-prettier", default="eslintConfigPrettier")
        plugins["prettier"] = Raw("prettier")
        rules["prettier/prettier"] = "error"
        configs.append(Raw("eslintConfigPrettier"))

    module.default_export = configs
    return module.render()


def format_json(data: Any) -> str:
    """Two-space JSON with a trailing newline, as the generated project expects."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

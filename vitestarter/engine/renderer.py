"""Handlebars-like template micro-engine.

Supported syntax::

    {{!-- comment --}}               removed before anything else
    {{> name}}                       partial inclusion
    {{#with path}}...{{/with}}       render with the object's keys in scope
    {{#each path}}...{{/each}}       iterate; exposes this, @index, @first, @last
    {{#unless cond}}...{{/unless}}   render when cond is falsy
    {{#if cond}}...{{else}}...{{/if}}
    {{{path}}}                       raw output
    {{path}}                         HTML-escaped output

Directives are expanded in exactly that order on every pass, and the text a
directive produces is never scanned again. Block directives are matched by
nesting depth, never lexically, so an inner ``{{/if}}`` cannot close an
outer ``{{#if}}``.

A block without a matching close tag is left in the output untouched. With
``strict=True`` the template is validated first and any malformed directive
raises :class:`~vitestarter.exceptions.TemplateSyntaxError` instead.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from vitestarter.engine.context import TemplateContext
from vitestarter.engine.partials import DictPartialStore, PartialStore
from vitestarter.exceptions import TemplateNotFoundError, TemplateSyntaxError

# ---------------------------------------------------------------------------
# Directive patterns
# ---------------------------------------------------------------------------

_PATH = r"@?\w+(?:\.\w+)*"

COMMENT_RE = re.compile(r"\{\{!--[\s\S]*?--\}\}")
PARTIAL_RE = re.compile(r"\{\{>\s*(\w+)\s*\}\}")
RAW_VARIABLE_RE = re.compile(r"\{\{\{\s*(" + _PATH + r")\s*\}\}\}")
VARIABLE_RE = re.compile(r"\{\{\s*(?!else\s*\}\})(" + _PATH + r")\s*\}\}")

ELSE_TAG = "{{else}}"
BLOCK_NAMES = ("with", "each", "unless", "if")

_OPEN_RES: dict[str, re.Pattern[str]] = {
    name: re.compile(r"\{\{#" + name + r"\s+(" + _PATH + r")\s*\}\}") for name in BLOCK_NAMES
}
# Any opener of the block kind counts towards nesting, even a malformed one.
_NEST_RES: dict[str, re.Pattern[str]] = {
    name: re.compile(r"\{\{#" + name + r"\b") for name in BLOCK_NAMES
}

_TAG_RE = re.compile(r"\{\{(?:#(\w+)(?:\s+([^}]*?))?\s*|/(\w+)\s*|(else)\s*)\}\}")

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}
_HTML_ESCAPE_RE = re.compile(r"[&<>\"']")


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def resolve_path(path: str, ctx: Mapping[str, Any]) -> Any:
    """Resolve a dotted *path* against *ctx*.

    ``this`` and ``@``-prefixed tokens are top-level keys. ``features.x``
    looks up ``x`` inside ``ctx["features"]``. Any other path is walked
    segment by segment and yields ``None`` as soon as an intermediate value
    is missing or not a container.
    """
    if path == "this" or path.startswith("@"):
        return ctx.get(path)

    if path.startswith("features."):
        features = ctx.get("features")
        if isinstance(features, Mapping):
            return features.get(path[len("features."):])
        return None

    current: Any = ctx
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, (list, tuple)) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
    return current


def is_truthy(value: Any) -> bool:
    """Lists and mappings are truthy only when non-empty; the rest use ``bool``."""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, Mapping):
        return len(value) > 0
    return bool(value)


def stringify(value: Any) -> str:
    """Render a scalar the way the generated JavaScript expects to read it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return stringify(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def escape_html(text: str) -> str:
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group()], text)


def cleanup_whitespace(text: str) -> str:
    """Collapse runs of blank lines to one and strip trailing spaces."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    return re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)


# ---------------------------------------------------------------------------
# Block matching
# ---------------------------------------------------------------------------


def find_matching_close(template: str, start: int, name: str) -> int:
    """Index of the ``{{/name}}`` closing the block whose body starts at *start*.

    Returns -1 when the block is never closed.
    """
    close_tag = "{{/" + name + "}}"
    nest_re = _NEST_RES[name]
    depth = 1
    pos = start

    while depth > 0:
        close_at = template.find(close_tag, pos)
        if close_at == -1:
            return -1
        opener = nest_re.search(template, pos, close_at)
        if opener is not None:
            depth += 1
            pos = opener.end()
            continue
        depth -= 1
        if depth == 0:
            return close_at
        pos = close_at + len(close_tag)
    return -1


def find_else(body: str) -> int:
    """Index of the ``{{else}}`` belonging to the enclosing ``{{#if}}``, or -1.

    Only an ``{{else}}`` at nesting depth zero counts; one inside a nested
    ``{{#if}}`` belongs to that inner block.
    """
    nest_re = _NEST_RES["if"]
    close_tag = "{{/if}}"
    depth = 0
    pos = 0

    while True:
        candidates = []
        opener = nest_re.search(body, pos)
        if opener is not None:
            candidates.append((opener.start(), "open", opener.end()))
        else_at = body.find(ELSE_TAG, pos)
        if else_at != -1:
            candidates.append((else_at, "else", else_at + len(ELSE_TAG)))
        close_at = body.find(close_tag, pos)
        if close_at != -1:
            candidates.append((close_at, "close", close_at + len(close_tag)))
        if not candidates:
            return -1

        at, kind, end = min(candidates)
        if kind == "open":
            depth += 1
        elif kind == "close":
            depth -= 1
        elif depth == 0:
            return at
        pos = end


# ---------------------------------------------------------------------------
# Strict-mode validation
# ---------------------------------------------------------------------------


def _line_of(text: str, position: int) -> int:
    return text.count("\n", 0, position) + 1


def validate_template(template: str) -> None:
    """Check that every block directive is well-formed and properly nested.

    Raises:
        TemplateSyntaxError: On an unknown block helper, a block opener
            without a valid path, a close tag with no opener, mismatched
            nesting, an ``{{else}}`` outside ``{{#if}}`` (or a second one),
            or a block left open at the end of the template.
    """
    # Blank comments out so offsets still point into the caller's text.
    text = COMMENT_RE.sub(lambda m: " " * len(m.group()), template)
    path_re = re.compile(_PATH)
    stack: list[tuple[str, int, bool]] = []

    for match in _TAG_RE.finditer(text):
        opened, argument, closed, is_else = match.groups()
        position = match.start()
        line = _line_of(text, position)

        if opened is not None:
            if opened not in BLOCK_NAMES:
                raise TemplateSyntaxError(f"Unknown block helper '#{opened}' on line {line}", position)
            if not argument or not path_re.fullmatch(argument.strip()):
                raise TemplateSyntaxError(
                    f"Block '#{opened}' on line {line} needs a path argument", position
                )
            stack.append((opened, position, False))
        elif closed is not None:
            if not stack:
                raise TemplateSyntaxError(
                    f"Closing '/{closed}' on line {line} has no matching opener", position
                )
            name, opened_at, _ = stack.pop()
            if name != closed:
                raise TemplateSyntaxError(
                    f"Closing '/{closed}' on line {line} does not match '#{name}' "
                    f"opened on line {_line_of(text, opened_at)}",
                    position,
                )
        elif is_else is not None:
            if not stack or stack[-1][0] != "if":
                raise TemplateSyntaxError(f"'else' on line {line} is outside an 'if' block", position)
            name, opened_at, seen_else = stack[-1]
            if seen_else:
                raise TemplateSyntaxError(f"Second 'else' on line {line} in one 'if' block", position)
            stack[-1] = (name, opened_at, True)

    if stack:
        name, opened_at, _ = stack[-1]
        raise TemplateSyntaxError(
            f"Block '#{name}' opened on line {_line_of(text, opened_at)} is never closed",
            opened_at,
        )


# ---------------------------------------------------------------------------
# TemplateEngine
# ---------------------------------------------------------------------------

# Rendered fragments are parked on a shelf and replaced by a private-use
# token until the whole template is done, so later passes never re-read
# substituted text as directives.
_SHELF_TOKEN = "\ue000{}\ue001"
_SHELF_RE = re.compile("\ue000(\\d+)\ue001")


@dataclass(frozen=True)
class _RenderState:
    """Per-render bookkeeping shared by every nested pass."""

    partial_stack: tuple[str, ...] = ()
    shelf: list[str] = field(default_factory=list)

    def shelve(self, text: str) -> str:
        self.shelf.append(text)
        return _SHELF_TOKEN.format(len(self.shelf) - 1)

    def restore(self, text: str) -> str:
        return _SHELF_RE.sub(lambda m: self.restore(self.shelf[int(m.group(1))]), text)

    def including(self, name: str) -> _RenderState:
        return _RenderState((*self.partial_stack, name), self.shelf)


_BlockHandler = Callable[[str, str, Mapping[str, Any], _RenderState], str]


class TemplateEngine:
    """Renders directive templates against a fixed base context.

    Rendering is a pure function of the template text and the context; the
    only I/O is loading partials from the partial store and reading template
    files in :meth:`render_file`. Substituted values are output only: a
    value that looks like a directive is emitted as-is.
    """

    def __init__(
        self,
        context: TemplateContext | Mapping[str, Any] | None = None,
        partials: Optional[PartialStore] = None,
        *,
        templates_dir: str | Path | None = None,
        strict: bool = False,
    ) -> None:
        if isinstance(context, TemplateContext):
            self._base: dict[str, Any] = context.to_mapping()
        else:
            self._base = dict(context or {})
        self.partials: PartialStore = partials if partials is not None else DictPartialStore()
        self.templates_dir = Path(templates_dir) if templates_dir is not None else None
        self.strict = strict

    @property
    def context(self) -> dict[str, Any]:
        """A copy of the base render namespace."""
        return dict(self._base)

    # -- Public API ----------------------------------------------------------

    def render(self, template: str, extra: Mapping[str, Any] | None = None) -> str:
        """Render *template* with the base context overlaid by *extra*."""
        ctx = {**self._base, **(extra or {})}
        state = _RenderState()
        return cleanup_whitespace(state.restore(self._process(template, ctx, state)))

    def render_file(self, template_path: str | Path, extra: Mapping[str, Any] | None = None) -> str:
        """Render a template file, relative to ``templates_dir`` unless absolute.

        Raises:
            TemplateNotFoundError: If the file does not exist.
        """
        full_path = self._full_path(template_path)
        if full_path is None or not full_path.is_file():
            raise TemplateNotFoundError(str(full_path or template_path))
        return self.render(full_path.read_text(encoding="utf-8"), extra)

    def template_exists(self, template_path: str | Path) -> bool:
        full_path = self._full_path(template_path)
        return full_path is not None and full_path.is_file()

    def _full_path(self, template_path: str | Path) -> Optional[Path]:
        path = Path(template_path)
        if path.is_absolute():
            return path
        if self.templates_dir is None:
            return None
        return self.templates_dir / path

    # -- Passes --------------------------------------------------------------

    def _process(self, template: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        if self.strict:
            validate_template(template)

        result = COMMENT_RE.sub("", template)
        result = self._expand_partials(result, ctx, state)
        result = self._expand_blocks(result, "with", ctx, state, self._render_with)
        result = self._expand_blocks(result, "each", ctx, state, self._render_each)
        result = self._expand_blocks(result, "unless", ctx, state, self._render_unless)
        result = self._expand_blocks(result, "if", ctx, state, self._render_if)
        result = RAW_VARIABLE_RE.sub(
            lambda m: state.shelve(stringify(resolve_path(m.group(1), ctx))), result
        )
        return VARIABLE_RE.sub(
            lambda m: state.shelve(escape_html(stringify(resolve_path(m.group(1), ctx)))), result
        )

    def _expand_partials(self, template: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name in state.partial_stack:
                return f'<!-- Partial "{name}" includes itself -->'
            source = self.partials.get(name)
            if source is None:
                return f'<!-- Partial "{name}" not found -->'
            return state.shelve(self._process(source, ctx, state.including(name)))

        return PARTIAL_RE.sub(replace, template)

    def _expand_blocks(
        self,
        template: str,
        name: str,
        ctx: Mapping[str, Any],
        state: _RenderState,
        handler: _BlockHandler,
    ) -> str:
        open_re = _OPEN_RES[name]
        close_tag = "{{/" + name + "}}"
        out: list[str] = []
        pos = 0

        while True:
            match = open_re.search(template, pos)
            if match is None:
                break
            close_at = find_matching_close(template, match.end(), name)
            if close_at == -1:
                # Unclosed: keep the opener verbatim and carry on after it.
                out.append(template[pos:match.end()])
                pos = match.end()
                continue
            out.append(template[pos:match.start()])
            body = template[match.end():close_at]
            out.append(state.shelve(handler(match.group(1), body, ctx, state)))
            pos = close_at + len(close_tag)

        out.append(template[pos:])
        return "".join(out)

    # -- Block handlers ------------------------------------------------------

    def _render_with(self, path: str, body: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        value = resolve_path(path, ctx)
        if not isinstance(value, Mapping):
            return ""
        return self._process(body, {**ctx, **value}, state)

    def _render_each(self, path: str, body: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        items = resolve_path(path, ctx)
        if not isinstance(items, (list, tuple)):
            return ""

        last = len(items) - 1
        rendered: list[str] = []
        for index, item in enumerate(items):
            item_ctx: dict[str, Any] = {
                **ctx,
                "this": item,
                "@index": index,
                "@first": index == 0,
                "@last": index == last,
            }
            if isinstance(item, Mapping):
                item_ctx.update(item)
            rendered.append(self._process(body, item_ctx, state))
        return "".join(rendered)

    def _render_unless(self, path: str, body: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        if is_truthy(resolve_path(path, ctx)):
            return ""
        return self._process(body, ctx, state)

    def _render_if(self, path: str, body: str, ctx: Mapping[str, Any], state: _RenderState) -> str:
        else_at = find_else(body)
        if else_at == -1:
            then_part, else_part = body, ""
        else:
            then_part, else_part = body[:else_at], body[else_at + len(ELSE_TAG):]

        chosen = then_part if is_truthy(resolve_path(path, ctx)) else else_part
        return self._process(chosen, ctx, state) if chosen else ""

"""Tests for the directive template engine.

Covers:
- Block directives (if/else, unless, each, with) and their nesting
- Variable output (escaped vs raw), comments and path resolution
- Substituted values are never rendered a second time
- Partials (found, missing, self-including)
- Permissive handling of malformed directives and strict-mode validation
- Whitespace cleanup and render idempotence
- File rendering relative to the templates directory
"""

from __future__ import annotations

from pathlib import Path

import pytest

from vitestarter.engine import DictPartialStore, TemplateContext, TemplateEngine, render_template
from vitestarter.engine.renderer import (
    cleanup_whitespace,
    find_else,
    find_matching_close,
    is_truthy,
    resolve_path,
    stringify,
    validate_template,
)
from vitestarter.exceptions import TemplateNotFoundError, TemplateSyntaxError
from vitestarter.models import FeatureFlags, TestProfile

pytestmark = pytest.mark.unit


def render(template: str, **ctx) -> str:
    return TemplateEngine(ctx).render(template)


# ---------------------------------------------------------------------------
# Conditionals
# ---------------------------------------------------------------------------


class TestIf:
    NESTED = "{{#if a}}X{{#if b}}Y{{else}}Z{{/if}}W{{/if}}"

    def test_nested_else_belongs_to_inner_block(self):
        assert render(self.NESTED, a=True, b=False) == "XZW"

    def test_nested_true_branch(self):
        assert render(self.NESTED, a=True, b=True) == "XYW"

    def test_false_outer_block_leaks_nothing(self):
        assert render(self.NESTED, a=False) == ""
        assert render(self.NESTED, a=False, b=True) == ""

    def test_else_branch(self):
        assert render("{{#if on}}yes{{else}}no{{/if}}", on=False) == "no"

    def test_empty_list_is_falsy(self):
        assert render("{{#if items}}some{{else}}none{{/if}}", items=[]) == "none"

    def test_empty_mapping_is_falsy(self):
        assert render("{{#if obj}}some{{else}}none{{/if}}", obj={}) == "none"

    def test_missing_value_is_falsy(self):
        assert render("{{#if nope}}x{{/if}}") == ""

    def test_sibling_blocks(self):
        template = "{{#if a}}A{{/if}}-{{#if b}}B{{/if}}"
        assert render(template, a=True, b=True) == "A-B"
        assert render(template, a=False, b=True) == "-B"


class TestUnless:
    def test_renders_when_falsy(self):
        assert render("{{#unless flag}}off{{/unless}}", flag=False) == "off"

    def test_hidden_when_truthy(self):
        assert render("{{#unless flag}}off{{/unless}}", flag=True) == ""


# ---------------------------------------------------------------------------
# Iteration and scoping
# ---------------------------------------------------------------------------


class TestEach:
    def test_this_and_index(self):
        assert render("{{#each items}}{{this}}-{{@index}}{{/each}}", items=["x", "y"]) == "x-0y-1"

    def test_empty_list_renders_nothing(self):
        assert render("{{#each items}}{{this}}-{{@index}}{{/each}}", items=[]) == ""

    def test_non_list_renders_nothing(self):
        assert render("{{#each items}}{{this}}{{/each}}", items="abc") == ""

    def test_first_and_last(self):
        template = "{{#each items}}{{#if @first}}[{{/if}}{{this}}{{#unless @last}},{{/unless}}{{/each}}]"
        assert render(template, items=[1, 2, 3]) == "[1,2,3]"

    def test_mapping_items_are_spread_into_scope(self):
        items = [{"name": "a"}, {"name": "b"}]
        assert render("{{#each items}}{{name}}{{/each}}", items=items) == "ab"

    def test_outer_context_stays_visible(self):
        template = "{{#each items}}{{prefix}}{{this}} {{/each}}"
        assert render(template, items=["a", "b"], prefix="#") == "#a #b"

    def test_nested_each(self):
        template = "{{#each rows}}{{#each this}}{{this}}{{/each}};{{/each}}"
        assert render(template, rows=[[1, 2], [3]]) == "12;3;"


class TestWith:
    def test_mapping_keys_in_scope(self):
        assert render("{{#with user}}{{name}}{{/with}}", user={"name": "Ada"}) == "Ada"

    def test_non_mapping_renders_nothing(self):
        assert render("{{#with user}}{{name}}{{/with}}", user="Ada") == ""

    def test_missing_value_renders_nothing(self):
        assert render("{{#with user}}x{{/with}}") == ""


# ---------------------------------------------------------------------------
# Substituted values
# ---------------------------------------------------------------------------


class TestSubstitutedValues:
    def test_value_inside_block_is_not_rendered_again(self):
        assert render("{{#if a}}{{v}}{{/if}}", a=True, v="{{w}}", w="SECRET") == "{{w}}"

    def test_raw_value_is_not_rendered_again(self):
        assert render("{{{v}}} {{w}}", v="{{w}}", w="x") == "{{w}} x"

    def test_value_inside_each_keeps_directives(self):
        items = ["{{#if on}}yes{{/if}}", "{{> p}}"]
        assert render("{{#each items}}{{{this}}};{{/each}}", items=items, on=True) == (
            "{{#if on}}yes{{/if}};{{> p}};"
        )

    def test_mid_line_spaces_between_blocks_survive(self):
        assert render("{{#if a}}x {{/if}}y", a=True) == "x y"


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestVariables:
    def test_escaped_output(self):
        assert render("{{v}}", v="<b class=\"x\">&'") == "&lt;b class=&quot;x&quot;&gt;&amp;&#39;"

    def test_raw_output(self):
        assert render("{{{v}}}", v="<b>") == "<b>"

    def test_missing_variable_is_empty(self):
        assert render("a{{nope}}b") == "ab"

    def test_dotted_path(self):
        assert render("{{a.b.c}}", a={"b": {"c": 1}}) == "1"

    def test_whitespace_inside_braces(self):
        assert render("{{ name }}", name="x") == "x"

    def test_comments_are_removed(self):
        assert render("a{{!-- a {{var}} in a comment --}}b", var="X") == "ab"

    def test_feature_flags_use_camel_case(self):
        engine = TemplateEngine(TemplateContext(features=FeatureFlags(react_router=True)))
        assert engine.render("{{#if features.reactRouter}}router{{/if}}") == "router"
        assert engine.render("{{features.redux}}") == "false"

    def test_render_template_helper(self):
        out = render_template("{{#if features.redux}}store{{/if}}", FeatureFlags(redux=True))
        assert out == "store"

    def test_extra_overrides_base_context(self):
        engine = TemplateEngine({"name": "base"})
        assert engine.render("{{name}}", {"name": "extra"}) == "extra"
        assert engine.render("{{name}}") == "base"


class TestHelpers:
    def test_stringify(self):
        assert stringify(None) == ""
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(2.0) == "2"
        assert stringify(2.5) == "2.5"
        assert stringify([1, "a"]) == "1,a"
        assert stringify({"a": 1}) == "[object Object]"
        assert stringify(TestProfile.ADVANCED) == "advanced"

    def test_is_truthy(self):
        assert not is_truthy([])
        assert not is_truthy({})
        assert not is_truthy("")
        assert not is_truthy(0)
        assert is_truthy([0])
        assert is_truthy({"a": None})
        assert is_truthy("x")

    def test_resolve_path_list_index(self):
        assert resolve_path("a.items.1", {"a": {"items": ["x", "y"]}}) == "y"
        assert resolve_path("a.items.5", {"a": {"items": ["x"]}}) is None

    def test_resolve_path_through_scalar(self):
        assert resolve_path("a.b", {"a": "text"}) is None

    def test_cleanup_whitespace(self):
        assert cleanup_whitespace("a\n\n\n\nb  \n\tc\t\n") == "a\n\nb\n\tc\n"

    def test_find_matching_close_skips_nested(self):
        template = "{{#if a}}{{#if b}}x{{/if}}{{/if}}tail"
        start = len("{{#if a}}")
        assert find_matching_close(template, start, "if") == template.rindex("{{/if}}")

    def test_find_matching_close_unclosed(self):
        assert find_matching_close("{{#if a}}body", len("{{#if a}}"), "if") == -1

    def test_find_else_ignores_nested(self):
        body = "{{#if b}}1{{else}}2{{/if}}3"
        assert find_else(body) == -1
        assert find_else(body + "{{else}}4") == len(body)


# ---------------------------------------------------------------------------
# Partials
# ---------------------------------------------------------------------------


class TestPartials:
    def test_partial_sees_context(self):
        engine = TemplateEngine({"name": "Ada"}, DictPartialStore({"greet": "Hello {{name}}"}))
        assert engine.render("{{> greet}}!") == "Hello Ada!"

    def test_missing_partial_leaves_marker(self):
        assert TemplateEngine().render("{{> nope}}") == '<!-- Partial "nope" not found -->'

    def test_self_including_partial_stops(self):
        engine = TemplateEngine(partials=DictPartialStore({"loop": "x{{> loop}}"}))
        assert engine.render("{{> loop}}") == 'x<!-- Partial "loop" includes itself -->'

    def test_partials_expand_before_each(self):
        # The partial is rendered once against the outer scope, where this is unbound.
        engine = TemplateEngine(
            {"items": ["a", "b"], "sep": "|"}, DictPartialStore({"item": "<{{this}}{{sep}}>"})
        )
        assert engine.render("{{#each items}}{{> item}}{{/each}}") == "<|><|>"

    def test_partial_output_is_not_rendered_again(self):
        engine = TemplateEngine({"v": "{{w}}", "w": "SECRET"}, DictPartialStore({"p": "{{{v}}}"}))
        assert engine.render("{{> p}}") == "{{w}}"


# ---------------------------------------------------------------------------
# Malformed templates
# ---------------------------------------------------------------------------


class TestMalformed:
    @pytest.mark.parametrize(
        "template",
        [
            "{{#if a}}unclosed",
            "{{#each items}}unclosed",
            "text {{/if}} more",
        ],
    )
    def test_permissive_mode_keeps_text(self, template):
        assert TemplateEngine({"a": True, "items": [1]}).render(template) == template

    @pytest.mark.parametrize(
        "template, fragment",
        [
            ("{{#if a}}unclosed", "never closed"),
            ("text {{/if}}", "no matching opener"),
            ("{{#if a}}x{{/each}}", "does not match"),
            ("{{else}}", "outside an 'if'"),
            ("{{#if a}}1{{else}}2{{else}}3{{/if}}", "Second 'else'"),
            ("{{#loop a}}x{{/loop}}", "Unknown block helper"),
            ("{{#if}}x{{/if}}", "needs a path"),
        ],
    )
    def test_strict_mode_raises(self, template, fragment):
        engine = TemplateEngine({"a": True}, strict=True)
        with pytest.raises(TemplateSyntaxError, match=fragment):
            engine.render(template)

    def test_error_reports_position(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            validate_template("line one\n{{/if}}")
        assert exc_info.value.position == len("line one\n")
        assert "line 2" in str(exc_info.value)

    def test_comments_do_not_confuse_validation(self):
        validate_template("{{!-- {{#if a}} --}}{{#if b}}x{{/if}}")

    def test_strict_mode_renders_valid_templates(self):
        engine = TemplateEngine({"a": True}, strict=True)
        assert engine.render("{{#if a}}ok{{/if}}") == "ok"


# ---------------------------------------------------------------------------
# Determinism & files
# ---------------------------------------------------------------------------


class TestRendering:
    def test_idempotent(self):
        engine = TemplateEngine(TemplateContext(features=FeatureFlags(redux=True, i18n=True)))
        template = "{{#each providerOrder}}{{this}}{{#unless @last}}>{{/unless}}{{/each}}\n\n\n\n{{projectName}}"
        assert engine.render(template) == engine.render(template)

    def test_blank_line_runs_collapse(self):
        assert render("a\n{{#if x}}b{{/if}}\n\n\nc", x=False) == "a\n\nc"

    def test_render_file(self, tmp_path: Path):
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "hello.hbs").write_text("Hi {{name}}", encoding="utf-8")
        engine = TemplateEngine({"name": "Ada"}, templates_dir=tmp_path)
        assert engine.template_exists("nested/hello.hbs")
        assert engine.render_file("nested/hello.hbs") == "Hi Ada"

    def test_render_missing_file(self, tmp_path: Path):
        engine = TemplateEngine(templates_dir=tmp_path)
        assert not engine.template_exists("nope.hbs")
        with pytest.raises(TemplateNotFoundError):
            engine.render_file("nope.hbs")

    def test_render_file_without_templates_dir(self):
        with pytest.raises(TemplateNotFoundError):
            TemplateEngine().render_file("relative.hbs")

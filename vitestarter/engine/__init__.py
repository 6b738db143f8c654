"""Template micro-engine: context, partial stores, renderer and factories."""

from __future__ import annotations

from typing import Any, Optional

from vitestarter.config import Config
from vitestarter.engine.context import (
    TemplateContext,
    build_template_context,
    default_provider_order,
)
from vitestarter.engine.partials import (
    DictPartialStore,
    FilePartialStore,
    PartialStore,
    find_templates_dir,
)
from vitestarter.engine.renderer import TemplateEngine, validate_template
from vitestarter.models import FeatureFlags

__all__ = [
    "DictPartialStore",
    "FilePartialStore",
    "PartialStore",
    "TemplateContext",
    "TemplateEngine",
    "build_template_context",
    "create_template_engine",
    "default_provider_order",
    "find_templates_dir",
    "render_template",
    "validate_template",
]


def create_template_engine(
    features: FeatureFlags,
    *,
    project_name: str = "",
    author: str = "",
    description: str = "",
    license: str = "",
    provider_order: Optional[list[str]] = None,
    config: Optional[Config] = None,
) -> TemplateEngine:
    """Build an engine bound to the packaged (or configured) templates directory.

    Partials are loaded from ``<templates_dir>/partials``.
    """
    config = config or Config()
    templates_dir = find_templates_dir(config.template_candidates())
    context = build_template_context(
        features,
        project_name=project_name,
        author=author,
        description=description,
        license=license,
        provider_order=provider_order,
    )
    return TemplateEngine(
        context,
        FilePartialStore(templates_dir / "partials"),
        templates_dir=templates_dir,
        strict=config.strict_templates,
    )


def render_template(
    template: str,
    features: FeatureFlags,
    extra: Optional[dict[str, Any]] = None,
    *,
    strict: bool = False,
) -> str:
    """Render a one-off template string against a default context for *features*."""
    engine = TemplateEngine(build_template_context(features), strict=strict)
    return engine.render(template, extra)

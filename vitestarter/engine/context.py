"""The render namespace handed to the template engine.

``TemplateContext`` is strictly typed. Anything beyond the built-in fields
goes through the explicit ``extras`` table, and an extra may never shadow a
built-in name.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vitestarter.models import FeatureFlags

RESERVED_KEYS = frozenset(
    {
        "features",
        "projectName",
        "author",
        "description",
        "license",
        "hasProviders",
        "providerOrder",
    }
)


def default_provider_order(features: FeatureFlags) -> list[str]:
    """Ids of the provider-contributing features, outermost first."""
    order: list[str] = []
    if features.i18n:
        order.append("i18n")
    if features.redux:
        order.append("redux")
    if features.react_router:
        order.append("reactRouter")
    return order


class TemplateContext(BaseModel):
    """Typed template context: feature flags, project metadata and helpers."""

    model_config = ConfigDict(frozen=True)

    features: FeatureFlags = Field(default_factory=FeatureFlags)
    project_name: str = Field(default="my-app")
    author: str = Field(default="")
    description: str = Field(default="")
    license: str = Field(default="MIT")
    provider_order: tuple[str, ...] = Field(default=())
    extras: dict[str, Any] = Field(default_factory=dict)

    @field_validator("extras")
    @classmethod
    def _no_shadowing(cls, value: dict[str, Any]) -> dict[str, Any]:
        clashes = sorted(RESERVED_KEYS.intersection(value))
        if clashes:
            raise ValueError(f"extra keys shadow built-in context fields: {', '.join(clashes)}")
        return value

    @property
    def has_providers(self) -> bool:
        return bool(self.provider_order)

    def with_extras(self, **values: Any) -> "TemplateContext":
        """Return a copy with *values* merged into the extras table."""
        data = dict(self)
        data["extras"] = {**self.extras, **values}
        return TemplateContext(**data)

    def to_mapping(self) -> dict[str, Any]:
        """The camelCase namespace templates are rendered against."""
        mapping: dict[str, Any] = {
            "features": self.features.to_context(),
            "projectName": self.project_name,
            "author": self.author,
            "description": self.description,
            "license": self.license,
            "hasProviders": self.has_providers,
            "providerOrder": list(self.provider_order),
        }
        mapping.update(self.extras)
        return mapping


def build_template_context(
    features: FeatureFlags,
    *,
    project_name: str = "",
    author: str = "",
    description: str = "",
    license: str = "",
    provider_order: Optional[list[str]] = None,
    **extras: Any,
) -> TemplateContext:
    """Create a context, falling back to ``my-app`` / ``MIT`` for blank values.

    Args:
        features: Active feature flags.
        project_name: npm package name of the project.
        author: Author string for the manifest and README.
        description: Project description.
        license: SPDX license id.
        provider_order: Provider ids outermost first. Defaults to
            :func:`default_provider_order`.
        **extras: Additional, explicitly-named template variables.
    """
    return TemplateContext(
        features=features,
        project_name=project_name or "my-app",
        author=author,
        description=description,
        license=license or "MIT",
        provider_order=tuple(
            provider_order if provider_order is not None else default_provider_order(features)
        ),
        extras=extras,
    )

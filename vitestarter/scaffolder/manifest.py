"""``package.json`` construction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vitestarter.codegen import format_json
from vitestarter.models import ProjectConfig

PROJECT_VERSION = "0.1.0"


def build_package_json(
    config: ProjectConfig,
    dependencies: Mapping[str, str],
    dev_dependencies: Mapping[str, str],
    scripts: Mapping[str, str],
    lint_staged: Mapping[str, list[str]] | None = None,
) -> dict[str, Any]:
    """Assemble the manifest with a fixed key order.

    ``description`` and ``author`` are omitted when blank, and
    ``lint-staged`` only appears when there is something to run.
    """
    manifest: dict[str, Any] = {
        "name": config.name,
        "version": PROJECT_VERSION,
        "private": True,
        "type": "module",
    }
    if config.description:
        manifest["description"] = config.description
    if config.author:
        manifest["author"] = config.author
    manifest["license"] = config.license
    manifest["scripts"] = dict(scripts)
    manifest["dependencies"] = dict(dependencies)
    manifest["devDependencies"] = dict(dev_dependencies)
    if lint_staged:
        manifest["lint-staged"] = {glob: list(cmds) for glob, cmds in lint_staged.items()}
    return manifest


def serialize_package_json(manifest: Mapping[str, Any]) -> str:
    return format_json(dict(manifest))

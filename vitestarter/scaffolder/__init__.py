"""Project assembly: orchestrator-owned files, manifest and plugin composition.

Quick usage::

    from vitestarter.presets import require_template
    from vitestarter.models import ProjectConfig
    from vitestarter.scaffolder import ProjectAssembler

    config = ProjectConfig.create("my-app", require_template("standard"))
    project = ProjectAssembler().assemble(config)
    project.files["package.json"]
"""

from vitestarter.scaffolder.generator import (
    AssembledProject,
    FileManifest,
    ManifestEntry,
    ProjectAssembler,
)
from vitestarter.scaffolder.manifest import build_package_json, serialize_package_json

__all__ = [
    "AssembledProject",
    "FileManifest",
    "ManifestEntry",
    "ProjectAssembler",
    "build_package_json",
    "serialize_package_json",
]

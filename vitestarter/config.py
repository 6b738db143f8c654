"""vite-starter configuration.

Typed, process-wide settings for the scaffolder. These are knobs of the tool
itself (where templates live, subprocess timeout, template strictness), not
of the generated project; the latter is ``models.ProjectConfig``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from vitestarter.models import PackageManager

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global vite-starter configuration.

    Created once by the CLI entry point and passed to the engine factory and
    the pipeline.
    """

    templates_dir: Optional[Path] = Field(
        default=None, description="Override for the templates root directory"
    )
    default_template: str = Field(default="standard")
    default_package_manager: PackageManager = Field(default=PackageManager.NPM)
    min_node_major: int = Field(default=18, ge=1, description="Minimum supported Node.js major")
    command_timeout: Optional[int] = Field(
        default=None,
        ge=1,
        description="Seconds before git/install subprocesses are killed; None waits forever",
    )
    strict_templates: bool = Field(
        default=False, description="Raise on malformed template directives"
    )

    def template_candidates(self) -> list[Path]:
        """Candidate template roots, in lookup order.

        The explicit override comes first, then the templates shipped inside
        the package, then ``./templates`` in the working directory.
        """
        candidates: list[Path] = []
        if self.templates_dir is not None:
            candidates.append(Path(self.templates_dir))
        candidates.append(PACKAGE_TEMPLATES_DIR)
        candidates.append(Path.cwd() / "templates")
        return candidates

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            VITE_STARTER_TEMPLATES_DIR, VITE_STARTER_DEFAULT_TEMPLATE,
            VITE_STARTER_PACKAGE_MANAGER, VITE_STARTER_MIN_NODE,
            VITE_STARTER_COMMAND_TIMEOUT, VITE_STARTER_STRICT_TEMPLATES.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("VITE_STARTER_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["VITE_STARTER_TEMPLATES_DIR"])
        if os.environ.get("VITE_STARTER_DEFAULT_TEMPLATE"):
            kwargs["default_template"] = os.environ["VITE_STARTER_DEFAULT_TEMPLATE"]
        if os.environ.get("VITE_STARTER_PACKAGE_MANAGER"):
            kwargs["default_package_manager"] = PackageManager(
                os.environ["VITE_STARTER_PACKAGE_MANAGER"]
            )
        if os.environ.get("VITE_STARTER_MIN_NODE"):
            kwargs["min_node_major"] = int(os.environ["VITE_STARTER_MIN_NODE"])
        if os.environ.get("VITE_STARTER_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["VITE_STARTER_COMMAND_TIMEOUT"])
        if os.environ.get("VITE_STARTER_STRICT_TEMPLATES"):
            kwargs["strict_templates"] = (
                os.environ["VITE_STARTER_STRICT_TEMPLATES"].strip().lower() in _TRUTHY
            )
        return cls(**kwargs)

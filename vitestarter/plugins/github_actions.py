"""GitHub Actions plugin: a CI workflow built as data and dumped with PyYAML."""

from __future__ import annotations

from typing import Any

import yaml

from vitestarter.models import PackageManager
from vitestarter.plugins.base import FeaturePlugin, PluginContext, PluginFile

NODE_VERSIONS = ["18.x", "20.x", "22.x"]
WORKFLOW_PATH = ".github/workflows/ci.yml"


def build_workflow(context: PluginContext) -> dict[str, Any]:
    """The CI workflow as a plain mapping, in GitHub's key order."""
    pm = context.package_manager
    features = context.features

    steps: list[dict[str, Any]] = [{"uses": "actions/checkout@v4"}]
    if pm is PackageManager.PNPM:
        steps.append({"uses": "pnpm/action-setup@v4", "with": {"version": 9}})
    steps.append(
        {
            "name": "Use Node.js ${{ matrix.node-version }}",
            "uses": "actions/setup-node@v4",
            "with": {"node-version": "${{ matrix.node-version }}", "cache": pm.value},
        }
    )
    steps.append({"name": "Install dependencies", "run": pm.ci_install_command})

    if features.eslint:
        steps.append({"name": "Lint", "run": pm.run_command("lint")})
    if features.prettier:
        steps.append({"name": "Check formatting", "run": pm.run_command("format:check")})
    if features.testing:
        script = "test:coverage" if context.test_profile.coverage_threshold > 0 else "test"
        steps.append({"name": "Test", "run": pm.run_command(script)})
    steps.append({"name": "Build", "run": pm.run_command("build")})

    return {
        "name": "CI",
        "on": {
            "push": {"branches": ["main"]},
            "pull_request": {"branches": ["main"]},
        },
        "jobs": {
            "build": {
                "runs-on": "ubuntu-latest",
                "strategy": {"matrix": {"node-version": list(NODE_VERSIONS)}},
                "steps": steps,
            }
        },
    }


class GithubActionsPlugin(FeaturePlugin):
    id = "githubActions"
    name = "GitHub Actions"
    description = "CI/CD with GitHub Actions"
    order = 70
    feature = "github_actions"

    def get_files(self, context: PluginContext) -> list[PluginFile]:
        content = yaml.safe_dump(
            build_workflow(context), sort_keys=False, default_flow_style=False, width=120
        )
        return [PluginFile(WORKFLOW_PATH, content)]

"""Command-line entry point for ``vite-starter``.

Usage::

    vite-starter                                  # interactive wizard
    vite-starter my-app --yes                     # default template, no prompts
    vite-starter my-app --template full-pack -y
    CI=1 vite-starter my-app --tailwind --redux --testing --test-profile advanced

Feature flags switch to headless mode when a project name is given and the
environment is non-interactive (no TTY, or a CI marker variable is set).
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, TextIO

from vitestarter.config import Config
from vitestarter.exceptions import (
    DirectoryExistsError,
    InvalidProjectNameError,
    PipelineError,
    ViteStarterError,
    WizardCancelledError,
)
from vitestarter.models import PackageManager, ProjectConfig, TestProfile
from vitestarter.pipeline import (
    ConsoleProgressReporter,
    CreationResult,
    ProjectCreator,
    pipeline_steps,
    report_result,
)
from vitestarter.presets import TEMPLATES, require_template
from vitestarter.utils import console, create_progress, print_error, print_warning
from vitestarter.validation import is_git_installed, require_valid_project_name
from vitestarter.version import check_node_version, get_version
from vitestarter.wizard import WizardDefaults, run_wizard

CI_ENV_VARS: tuple[str, ...] = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "BUILDKITE",
)

# CLI flag dest -> FeatureFlags field.
FLAG_FEATURES: dict[str, str] = {
    "tailwind": "tailwindcss",
    "redux": "redux",
    "router": "react_router",
    "i18n": "i18n",
    "eslint": "eslint",
    "prettier": "prettier",
    "husky": "husky",
    "github_actions": "github_actions",
    "vscode": "vscode",
    "testing": "testing",
}

HEADLESS_BASE_TEMPLATE = "minimal"


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vite-starter",
        description="Create modern React + Vite + TypeScript projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  vite-starter my-app\n"
            "  vite-starter my-app --template full-pack --yes\n"
            "  vite-starter my-app --tailwind --eslint --testing --test-profile minimum\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", metavar="project-name", help="Name of the project")
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {get_version()}",
        help="Display version number",
    )
    parser.add_argument(
        "-t", "--template",
        choices=[template.id for template in TEMPLATES],
        default=None,
        help="Use a specific template",
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Skip prompts and use defaults")
    parser.add_argument("--no-git", action="store_true", help="Skip git initialization")
    parser.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    parser.add_argument(
        "--package-manager",
        choices=[pm.value for pm in PackageManager],
        default=None,
        help="Package manager used to install dependencies",
    )

    features = parser.add_argument_group("features")
    features.add_argument("--tailwind", action="store_true", default=None, help="Add TailwindCSS")
    features.add_argument("--redux", action="store_true", default=None, help="Add Redux Toolkit")
    features.add_argument("--router", action="store_true", default=None, help="Add React Router")
    features.add_argument("--i18n", action="store_true", default=None, help="Add i18next")
    features.add_argument("--eslint", action="store_true", default=None, help="Add ESLint")
    features.add_argument("--prettier", action="store_true", default=None, help="Add Prettier")
    features.add_argument("--husky", action="store_true", default=None, help="Add Husky + lint-staged")
    features.add_argument(
        "--github-actions", action="store_true", default=None, help="Add a GitHub Actions workflow"
    )
    features.add_argument("--vscode", action="store_true", default=None, help="Add VS Code settings")
    features.add_argument("--testing", action="store_true", default=None, help="Add Vitest")
    features.add_argument(
        "--test-profile",
        choices=[profile.value for profile in TestProfile.ordered()],
        default=None,
        help="Test profile (implies --testing)",
    )
    return parser


def feature_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """FeatureFlags updates for every feature flag present on the command line."""
    changes: dict[str, Any] = {
        field: True for dest, field in FLAG_FEATURES.items() if getattr(args, dest, None)
    }
    if args.test_profile:
        changes["testing"] = True
        changes["test_profile"] = TestProfile(args.test_profile)
    return changes


# ---------------------------------------------------------------------------
# Mode detection
# ---------------------------------------------------------------------------


def is_non_interactive(
    env: Optional[Mapping[str, str]] = None, stdin: Optional[TextIO] = None
) -> bool:
    """True without a terminal on stdin or when a CI marker variable is set."""
    env = os.environ if env is None else env
    stdin = sys.stdin if stdin is None else stdin
    for name in CI_ENV_VARS:
        value = env.get(name, "").strip().lower()
        if value and value not in ("0", "false"):
            return True
    return stdin is None or not stdin.isatty()


def should_run_headless(
    args: argparse.Namespace,
    env: Optional[Mapping[str, str]] = None,
    stdin: Optional[TextIO] = None,
) -> bool:
    """Whether to skip the wizard entirely.

    ``--yes`` with a name always does. Feature flags with a name do when the
    environment is non-interactive.
    """
    if not args.project_name:
        return False
    if args.yes:
        return True
    return bool(feature_overrides(args)) and is_non_interactive(env, stdin)


# ---------------------------------------------------------------------------
# Config construction
# ---------------------------------------------------------------------------


def build_headless_config(
    args: argparse.Namespace, settings: Config, cwd: Optional[Path] = None
) -> ProjectConfig:
    """Resolve a ``ProjectConfig`` from flags alone.

    With feature flags and no ``--template`` the flags are applied on top of
    the ``minimal`` preset; otherwise on top of the chosen (or configured
    default) template.

    Raises:
        InvalidProjectNameError: If the name breaks npm naming rules.
        DirectoryExistsError: If the target directory already exists.
    """
    name = require_valid_project_name(args.project_name)
    overrides = feature_overrides(args)

    if args.template:
        template_id = args.template
    elif overrides:
        template_id = HEADLESS_BASE_TEMPLATE
    else:
        template_id = settings.default_template
    template = require_template(template_id)

    target_dir = (cwd or Path.cwd()) / name
    if target_dir.exists():
        raise DirectoryExistsError(str(target_dir))

    package_manager = (
        PackageManager(args.package_manager) if args.package_manager else settings.default_package_manager
    )
    return ProjectConfig.create(
        name,
        template,
        features=template.features.with_updates(**overrides),
        target_dir=target_dir,
        package_manager=package_manager,
        init_git=not args.no_git,
        install_deps=not args.no_install,
    )


def wizard_defaults(args: argparse.Namespace, settings: Config, git_available: bool) -> WizardDefaults:
    return WizardDefaults(
        project_name=args.project_name,
        template_id=args.template or settings.default_template,
        package_manager=(
            PackageManager(args.package_manager) if args.package_manager else settings.default_package_manager
        ),
        init_git=not args.no_git,
        install_deps=not args.no_install,
        git_available=git_available,
    )


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def create_project(config: ProjectConfig, settings: Config) -> CreationResult:
    """Run the creation pipeline with a live spinner per step."""
    with create_progress() as progress:
        reporter = ConsoleProgressReporter(pipeline_steps(config), progress)
        creator = ProjectCreator(settings=settings, on_progress=reporter)
        return asyncio.run(creator.create(config))


def print_next_steps(config: ProjectConfig, result: CreationResult, cwd: Optional[Path] = None) -> None:
    """Tell the user how to enter the project, relative to the working directory."""
    pm = config.package_manager
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print(f"  cd {os.path.relpath(config.target_dir, cwd or Path.cwd())}")
    if not result.dependencies_installed:
        console.print(f"  {' '.join(pm.install_command)}")
    console.print(f"  {pm.run_command('dev')}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Config.from_env()

    node = asyncio.run(check_node_version(settings.min_node_major))
    if not node.valid:
        print_error(node.message)
        return 1

    git_available = asyncio.run(is_git_installed())

    try:
        if should_run_headless(args):
            config = build_headless_config(args, settings)
        else:
            config = run_wizard(wizard_defaults(args, settings, git_available))

        if config.init_git and not git_available:
            print_warning("git was not found; skipping repository initialization.")
            config = config.model_copy(update={"init_git": False})

        result = create_project(config, settings)
    except WizardCancelledError as exc:
        print_warning(str(exc))
        return 1
    except InvalidProjectNameError as exc:
        print_error(str(exc))
        return 1
    except PipelineError as exc:
        print_error(f"Project creation failed at step {exc.step_index + 1} ({exc.step}).")
        print_error(str(exc))
        return 1
    except ViteStarterError as exc:
        print_error(str(exc))
        return 1

    for warning in result.warnings:
        print_warning(warning)
    report_result(result)
    print_next_steps(config, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())

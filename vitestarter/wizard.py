"""Interactive project wizard.

A linear sequence of Rich prompts: project name, template, features (custom
template only), package manager, git, then a summary to confirm. Declining
the summary goes back to the template step.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from vitestarter.exceptions import WizardCancelledError
from vitestarter.models import (
    OPTIONAL_FEATURES,
    FeatureFlags,
    PackageManager,
    ProjectConfig,
    ProjectTemplate,
    TestProfile,
)
from vitestarter.presets import (
    FEATURE_DESCRIPTIONS,
    TEMPLATES,
    get_available_profiles,
    require_template,
)
from vitestarter.utils import console as default_console
from vitestarter.utils import print_error, print_summary_table, print_warning
from vitestarter.validation import suggest_valid_name, validate_project_name


@dataclass
class WizardDefaults:
    """Starting answers, usually taken from CLI flags."""

    project_name: Optional[str] = None
    template_id: str = "standard"
    package_manager: PackageManager = PackageManager.NPM
    init_git: bool = True
    install_deps: bool = True
    git_available: bool = True


# ---------------------------------------------------------------------------
# Individual steps
# ---------------------------------------------------------------------------


def ask_project_name(
    initial: Optional[str], cwd: Path, console: Console = default_console
) -> tuple[str, Path]:
    """Prompt until the name is valid and ``cwd/<name>`` does not exist."""
    default = initial or "my-app"
    while True:
        name = Prompt.ask("[bold cyan]Project name[/bold cyan]", default=default, console=console)
        result = validate_project_name(name)
        if not result.valid:
            print_error(f"Invalid name: {', '.join(result.errors)}")
            suggestion = suggest_valid_name(name)
            if suggestion != name:
                console.print(f"[dim]Suggestion: {suggestion}[/dim]")
                default = suggestion
            continue

        target = cwd / name
        if target.exists():
            print_error(f'Directory "{name}" already exists')
            continue
        return name, target


def ask_template(default_id: str, console: Console = default_console) -> ProjectTemplate:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Template", no_wrap=True)
    table.add_column("Description")
    for template in TEMPLATES:
        table.add_row(
            f"{template.icon} [{template.color}]{template.id}[/{template.color}]",
            template.description,
        )
    console.print(table)

    choice = Prompt.ask(
        "[bold cyan]Template[/bold cyan]",
        choices=[template.id for template in TEMPLATES],
        default=default_id,
        console=console,
    )
    return require_template(choice)


def ask_test_profile(current: Optional[TestProfile], console: Console = default_console) -> TestProfile:
    for option in get_available_profiles():
        console.print(f"  [bold]{option['value'].value}[/bold] [dim]{option['description']}[/dim]")
    choice = Prompt.ask(
        "[bold cyan]Test profile[/bold cyan]",
        choices=[profile.value for profile in TestProfile.ordered()],
        default=(current or TestProfile.STANDARD).value,
        console=console,
    )
    return TestProfile(choice)


def ask_features(features: FeatureFlags, console: Console = default_console) -> FeatureFlags:
    """One yes/no question per optional feature, then the test profile."""
    console.print("[dim]TypeScript is always included.[/dim]")
    changes: dict[str, object] = {}
    for name in OPTIONAL_FEATURES:
        info = FEATURE_DESCRIPTIONS[name]
        changes[name] = Confirm.ask(
            f"{info['icon']} {info['name']} [dim]({info['description']})[/dim]",
            default=getattr(features, name),
            console=console,
        )
    if changes["testing"]:
        changes["test_profile"] = ask_test_profile(features.test_profile, console)
    return features.with_updates(**changes)


def ask_package_manager(default: PackageManager, console: Console = default_console) -> PackageManager:
    choice = Prompt.ask(
        "[bold cyan]Package manager[/bold cyan]",
        choices=[pm.value for pm in PackageManager],
        default=default.value,
        console=console,
    )
    return PackageManager(choice)


def ask_git(default: bool, available: bool, console: Console = default_console) -> bool:
    if not available:
        print_warning("git was not found; skipping repository initialization.")
        return False
    return Confirm.ask("[bold cyan]Initialize a git repository?[/bold cyan]", default=default, console=console)


def summarize(config: ProjectConfig) -> dict[str, str]:
    """Rows of the confirmation table."""
    enabled = [FEATURE_DESCRIPTIONS[name]["name"] for name in config.features.enabled()]
    rows = {
        "Name": config.name,
        "Directory": str(config.target_dir),
        "Template": config.template.name,
        "Features": ", ".join(enabled) or "none",
        "Package manager": config.package_manager.value,
        "Git": "yes" if config.init_git else "no",
        "Install dependencies": "yes" if config.install_deps else "no",
    }
    if config.features.testing:
        rows["Test profile"] = config.features.effective_test_profile.value
    return rows


# ---------------------------------------------------------------------------
# Wizard
# ---------------------------------------------------------------------------


def run_wizard(
    defaults: WizardDefaults,
    cwd: Optional[Path] = None,
    console: Console = default_console,
) -> ProjectConfig:
    """Walk the user through every question and return the resulting config.

    Raises:
        WizardCancelledError: If the prompts are interrupted (Ctrl+C or end
            of input).
    """
    console.print(
        Panel(
            "[bold bright_cyan]vite-starter[/bold bright_cyan]\n"
            "Create a React + Vite + TypeScript project",
            border_style="bright_cyan",
        )
    )
    try:
        return _ask_all(defaults, cwd or Path.cwd(), console)
    except (KeyboardInterrupt, EOFError) as exc:
        raise WizardCancelledError() from exc


def _ask_all(defaults: WizardDefaults, cwd: Path, console: Console) -> ProjectConfig:
    name, target_dir = ask_project_name(defaults.project_name, cwd, console)
    template_id = defaults.template_id

    while True:
        template = ask_template(template_id, console)
        template_id = template.id
        features = template.features
        if template.is_customizable:
            features = ask_features(features, console)

        package_manager = ask_package_manager(defaults.package_manager, console)
        init_git = ask_git(defaults.init_git, defaults.git_available, console)

        config = ProjectConfig.create(
            name,
            template,
            features=features,
            target_dir=target_dir,
            package_manager=package_manager,
            init_git=init_git,
            install_deps=defaults.install_deps,
        )
        print_summary_table(summarize(config), title="Project summary")
        if Confirm.ask("[bold]Create project?[/bold]", default=True, console=console):
            return config

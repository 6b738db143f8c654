"""Tests for the command-line entry point (vitestarter.cli).

Covers:
- Argument parsing and feature flag overrides
- Interactive vs headless mode detection (TTY and CI markers)
- Headless config construction
- main(): node check, wizard/headless dispatch, exit codes and error output
- Next-steps output relative to the working directory
"""

from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from vitestarter.cli import (
    build_headless_config,
    build_parser,
    feature_overrides,
    is_non_interactive,
    main,
    print_next_steps,
    should_run_headless,
    wizard_defaults,
)
from vitestarter.config import Config
from vitestarter.exceptions import (
    DirectoryExistsError,
    InvalidProjectNameError,
    PipelineError,
    WizardCancelledError,
)
from vitestarter.models import PackageManager, TestProfile
from vitestarter.pipeline import CreationResult
from vitestarter.scaffolder import ProjectAssembler
from vitestarter.version import NodeCheck


class FakeStdin:
    def __init__(self, tty: bool) -> None:
        self.tty = tty

    def isatty(self) -> bool:
        return self.tty


TTY = FakeStdin(True)
PIPE = FakeStdin(False)


def parse(*argv: str):
    return build_parser().parse_args(list(argv))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParser:
    @pytest.mark.unit
    def test_defaults(self):
        args = parse()
        assert args.project_name is None
        assert args.template is None
        assert args.yes is False
        assert args.no_git is False and args.no_install is False
        assert args.tailwind is None and args.testing is None

    @pytest.mark.unit
    def test_all_flags(self):
        args = parse(
            "shop", "-t", "full-pack", "-y", "--no-git", "--no-install",
            "--package-manager", "pnpm", "--github-actions", "--test-profile", "complete",
        )
        assert args.project_name == "shop"
        assert args.template == "full-pack"
        assert args.yes and args.no_git and args.no_install
        assert args.package_manager == "pnpm"
        assert args.github_actions is True
        assert args.test_profile == "complete"

    @pytest.mark.unit
    def test_unknown_template_rejected(self):
        with pytest.raises(SystemExit):
            parse("shop", "--template", "enterprise")

    @pytest.mark.unit
    def test_version_flag(self, capsys):
        with patch("vitestarter.cli.get_version", return_value="9.9.9"):
            parser = build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "9.9.9" in capsys.readouterr().out


class TestFeatureOverrides:
    @pytest.mark.unit
    def test_none(self):
        assert feature_overrides(parse("shop")) == {}

    @pytest.mark.unit
    def test_flags_map_to_fields(self):
        overrides = feature_overrides(parse("shop", "--tailwind", "--router", "--github-actions"))
        assert overrides == {"tailwindcss": True, "react_router": True, "github_actions": True}

    @pytest.mark.unit
    def test_test_profile_implies_testing(self):
        overrides = feature_overrides(parse("shop", "--test-profile", "minimum"))
        assert overrides == {"testing": True, "test_profile": TestProfile.MINIMUM}


# ---------------------------------------------------------------------------
# Mode detection
# ---------------------------------------------------------------------------


class TestIsNonInteractive:
    @pytest.mark.unit
    def test_tty_without_ci(self):
        assert is_non_interactive({}, TTY) is False

    @pytest.mark.unit
    def test_no_tty(self):
        assert is_non_interactive({}, PIPE) is True

    @pytest.mark.unit
    @pytest.mark.parametrize("var", ["CI", "CONTINUOUS_INTEGRATION", "GITHUB_ACTIONS", "GITLAB_CI", "BUILDKITE"])
    def test_ci_markers(self, var):
        assert is_non_interactive({var: "true"}, TTY) is True

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["0", "false", "FALSE", ""])
    def test_falsy_ci_values_ignored(self, value):
        assert is_non_interactive({"CI": value}, TTY) is False


class TestShouldRunHeadless:
    @pytest.mark.unit
    def test_no_name_is_never_headless(self):
        assert should_run_headless(parse("--yes"), {"CI": "1"}, PIPE) is False

    @pytest.mark.unit
    def test_yes_with_name(self):
        assert should_run_headless(parse("shop", "--yes"), {}, TTY) is True

    @pytest.mark.unit
    def test_flags_in_ci(self):
        assert should_run_headless(parse("shop", "--redux"), {"CI": "1"}, TTY) is True

    @pytest.mark.unit
    def test_flags_on_terminal_use_wizard(self):
        assert should_run_headless(parse("shop", "--redux"), {}, TTY) is False

    @pytest.mark.unit
    def test_name_only_in_ci_uses_wizard(self):
        assert should_run_headless(parse("shop"), {"CI": "1"}, PIPE) is False


# ---------------------------------------------------------------------------
# Config construction
# ---------------------------------------------------------------------------


class TestBuildHeadlessConfig:
    @pytest.mark.unit
    def test_flags_apply_on_minimal(self, tmp_path: Path):
        args = parse("shop", "--tailwind", "--testing", "--package-manager", "yarn", "--no-git")
        config = build_headless_config(args, Config(), cwd=tmp_path)
        assert config.template.id == "minimal"
        assert config.features.enabled() == ["tailwindcss", "testing"]
        assert config.package_manager is PackageManager.YARN
        assert config.init_git is False
        assert config.install_deps is True
        assert config.target_dir == (tmp_path / "shop").resolve()

    @pytest.mark.unit
    def test_flags_apply_on_chosen_template(self, tmp_path: Path):
        args = parse("shop", "-t", "standard", "--redux", "--test-profile", "complete")
        config = build_headless_config(args, Config(), cwd=tmp_path)
        assert config.features.enabled() == ["tailwindcss", "redux", "eslint", "prettier", "testing"]
        assert config.features.test_profile is TestProfile.COMPLETE

    @pytest.mark.unit
    def test_yes_uses_configured_default(self, tmp_path: Path):
        settings = Config(default_template="full-pack", default_package_manager=PackageManager.PNPM)
        config = build_headless_config(parse("shop", "--yes"), settings, cwd=tmp_path)
        assert config.template.id == "full-pack"
        assert config.package_manager is PackageManager.PNPM

    @pytest.mark.unit
    def test_invalid_name(self, tmp_path: Path):
        with pytest.raises(InvalidProjectNameError):
            build_headless_config(parse("My App", "--yes"), Config(), cwd=tmp_path)

    @pytest.mark.unit
    def test_existing_directory(self, tmp_path: Path):
        (tmp_path / "shop").mkdir()
        with pytest.raises(DirectoryExistsError, match="already exists"):
            build_headless_config(parse("shop", "--yes"), Config(), cwd=tmp_path)


class TestWizardDefaults:
    @pytest.mark.unit
    def test_from_flags(self):
        args = parse("shop", "-t", "minimal", "--package-manager", "pnpm", "--no-install")
        defaults = wizard_defaults(args, Config(), git_available=False)
        assert defaults.project_name == "shop"
        assert defaults.template_id == "minimal"
        assert defaults.package_manager is PackageManager.PNPM
        assert defaults.init_git is True
        assert defaults.install_deps is False
        assert defaults.git_available is False

    @pytest.mark.unit
    def test_from_settings(self):
        defaults = wizard_defaults(parse(), Config(default_template="full-pack"), git_available=True)
        assert defaults.project_name is None
        assert defaults.template_id == "full-pack"
        assert defaults.package_manager is PackageManager.NPM


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch):
    """Run main() in tmp_path with node present, git present, and a stubbed pipeline."""
    monkeypatch.chdir(tmp_path)
    created: list = []

    def fake_create(config, settings):
        created.append(config)
        return CreationResult(
            project_dir=config.target_dir,
            steps=[],
            project=ProjectAssembler().assemble(config),
            git_initialized=config.init_git,
            dependencies_installed=config.install_deps,
        )

    with patch("vitestarter.cli.Config.from_env", return_value=Config()), patch(
        "vitestarter.cli.check_node_version",
        new_callable=AsyncMock,
        return_value=NodeCheck(True, "Node.js v20.11.1", "v20.11.1"),
    ) as node, patch(
        "vitestarter.cli.is_git_installed", new_callable=AsyncMock, return_value=True
    ) as git, patch("vitestarter.cli.create_project", side_effect=fake_create) as create:
        yield SimpleNamespace(created=created, node=node, git=git, create=create, cwd=tmp_path)


class TestMain:
    @pytest.mark.unit
    def test_headless_success(self, cli_env):
        assert main(["shop", "--yes", "--no-install"]) == 0
        [config] = cli_env.created
        assert config.name == "shop"
        assert config.template.id == "standard"
        assert config.install_deps is False
        cli_env.node.assert_awaited_once_with(18)

    @pytest.mark.unit
    def test_unsupported_node(self, cli_env):
        cli_env.node.return_value = NodeCheck(False, "Node.js v16.0.0 is not supported", "v16.0.0")
        with patch("vitestarter.cli.print_error") as mock_error:
            assert main(["shop", "--yes"]) == 1
        mock_error.assert_called_once_with("Node.js v16.0.0 is not supported")
        cli_env.create.assert_not_called()

    @pytest.mark.unit
    def test_missing_git_disables_init(self, cli_env):
        cli_env.git.return_value = False
        with patch("vitestarter.cli.print_warning") as mock_warning:
            assert main(["shop", "--yes"]) == 0
        assert cli_env.created[0].init_git is False
        assert any("git was not found" in c.args[0] for c in mock_warning.call_args_list)

    @pytest.mark.unit
    def test_wizard_mode(self, cli_env):
        config = build_headless_config(parse("wiz", "--yes"), Config(), cwd=cli_env.cwd)
        with patch("vitestarter.cli.run_wizard", return_value=config) as mock_wizard:
            assert main(["--template", "minimal"]) == 0
        defaults = mock_wizard.call_args.args[0]
        assert defaults.template_id == "minimal"
        assert defaults.git_available is True
        assert cli_env.created == [config]

    @pytest.mark.unit
    def test_wizard_cancelled(self, cli_env):
        with patch("vitestarter.cli.run_wizard", side_effect=WizardCancelledError()), patch(
            "vitestarter.cli.print_warning"
        ) as mock_warning:
            assert main([]) == 1
        mock_warning.assert_called_once_with("Project creation cancelled.")
        cli_env.create.assert_not_called()

    @pytest.mark.unit
    def test_invalid_name(self, cli_env):
        with patch("vitestarter.cli.print_error") as mock_error:
            assert main(["My App", "--yes"]) == 1
        assert "My App" in mock_error.call_args.args[0]

    @pytest.mark.unit
    def test_existing_directory(self, cli_env):
        (cli_env.cwd / "shop").mkdir()
        with patch("vitestarter.cli.print_error") as mock_error:
            assert main(["shop", "--yes"]) == 1
        assert "already exists" in mock_error.call_args.args[0]

    @pytest.mark.unit
    def test_pipeline_failure(self, cli_env):
        cli_env.create.side_effect = PipelineError("Installing dependencies", 4, "npm exited with 1")
        with patch("vitestarter.cli.print_error") as mock_error:
            assert main(["shop", "--yes"]) == 1
        messages = [c.args[0] for c in mock_error.call_args_list]
        assert messages[0] == "Project creation failed at step 5 (Installing dependencies)."
        assert "npm exited with 1" in messages[1]

    @pytest.mark.unit
    def test_next_steps_for_scoped_name(self, cli_env):
        with patch("vitestarter.cli.console") as mock_console:
            assert main(["@acme/shop", "--yes", "--no-install"]) == 0
        lines = [c.args[0] for c in mock_console.print.call_args_list if c.args]
        assert f"  cd {os.path.join('@acme', 'shop')}" in lines
        assert "  npm install" in lines


class TestPrintNextSteps:
    @pytest.mark.unit
    def test_cd_is_relative_to_cwd(self, tmp_path: Path):
        config = build_headless_config(parse("shop", "--yes"), Config(), cwd=tmp_path / "work")
        with patch("vitestarter.cli.console") as mock_console:
            print_next_steps(config, SimpleNamespace(dependencies_installed=True), cwd=tmp_path.resolve())
        lines = [c.args[0] for c in mock_console.print.call_args_list if c.args]
        assert lines == [
            "[bold]Next steps:[/bold]",
            f"  cd {os.path.join('work', 'shop')}",
            "  npm run dev",
        ]

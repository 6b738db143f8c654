"""Tests for project name validation (vitestarter.validation).

Covers:
- npm naming rules (errors and warnings)
- Scoped package names
- Name suggestions
- git availability check
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from vitestarter.exceptions import InvalidProjectNameError
from vitestarter.validation import (
    MAX_NAME_LENGTH,
    is_git_installed,
    require_valid_project_name,
    suggest_valid_name,
    validate_project_name,
)


# ---------------------------------------------------------------------------
# validate_project_name
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["my-app", "app2", "my.app", "a_b", "@acme/web", "x" * MAX_NAME_LENGTH])
    def test_valid_names(self, name):
        result = validate_project_name(name)
        assert result.valid, result.errors
        assert result.errors == [] and result.warnings == []

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty(self, name):
        result = validate_project_name(name)
        assert not result.valid
        assert result.errors == ["Project name cannot be empty"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, fragment",
        [
            (".hidden", "cannot start with a period"),
            ("_private", "cannot start with an underscore"),
            (" padded ", "leading or trailing spaces"),
            ("node_modules", "not a valid package name"),
            ("favicon.ico", "not a valid package name"),
            ("my app", "URL-friendly"),
            ("a/b/c", "URL-friendly"),
        ],
    )
    def test_errors(self, name, fragment):
        result = validate_project_name(name)
        assert not result.valid
        assert any(fragment in e for e in result.errors)
        assert result.warnings == [] or all(w in result.errors for w in result.warnings)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, fragment",
        [
            ("http", "core module name"),
            ("MyApp", "capital letters"),
            ("wow!", "special characters"),
            ("x" * (MAX_NAME_LENGTH + 1), "more than 214 characters"),
        ],
    )
    def test_warnings_make_name_invalid(self, name, fragment):
        result = validate_project_name(name)
        assert not result.valid
        assert any(fragment in w for w in result.warnings)
        assert set(result.warnings) <= set(result.errors)

    @pytest.mark.unit
    def test_every_problem_reported(self):
        result = validate_project_name("_My App")
        joined = " ".join(result.errors)
        assert "underscore" in joined
        assert "capital letters" in joined
        assert "URL-friendly" in joined

    @pytest.mark.unit
    def test_scope_with_bad_package_part(self):
        assert not validate_project_name("@acme/my app").valid


class TestRequireValidProjectName:
    @pytest.mark.unit
    def test_returns_name(self):
        assert require_valid_project_name("shop") == "shop"

    @pytest.mark.unit
    def test_raises_with_all_errors(self):
        with pytest.raises(InvalidProjectNameError) as exc_info:
            require_valid_project_name("My App")
        assert exc_info.value.name == "My App"
        assert len(exc_info.value.errors) >= 2
        assert isinstance(exc_info.value, ValueError)


# ---------------------------------------------------------------------------
# suggest_valid_name
# ---------------------------------------------------------------------------


class TestSuggestValidName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("My Cool App", "my-cool-app"),
            ("snake_case_name", "snake-case-name"),
            ("123 go", "app-123-go"),
            ("--weird!!name--", "weirdname"),
            ("!!!", "my-app"),
            ("", "my-app"),
        ],
    )
    def test_suggestions(self, raw, expected):
        assert suggest_valid_name(raw) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["My Cool App", "Ünïcode Näme", "  spaced  out  ", "9lives"])
    def test_suggestions_validate(self, raw):
        assert validate_project_name(suggest_valid_name(raw)).valid


# ---------------------------------------------------------------------------
# is_git_installed
# ---------------------------------------------------------------------------


class TestIsGitInstalled:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_present(self):
        with patch("vitestarter.validation.run_command", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (0, "git version 2.45.0", "")
            assert await is_git_installed() is True
        mock_run.assert_awaited_once_with(["git", "--version"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing(self):
        with patch("vitestarter.validation.run_command", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (127, "", "No such file or directory")
            assert await is_git_installed() is False

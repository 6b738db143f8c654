"""Exception hierarchy for vite-starter.

Every error raised on purpose by the package derives from
``ViteStarterError`` so the CLI can catch a single type at the top level and
turn it into a non-zero exit.
"""

from __future__ import annotations

__all__ = [
    "CommandExecutionError",
    "DirectoryExistsError",
    "FileCollisionError",
    "InvalidProjectNameError",
    "PipelineError",
    "PluginNotFoundError",
    "PluginValidationError",
    "ScriptConflictError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "ViteStarterError",
    "WizardCancelledError",
]


class ViteStarterError(Exception):
    """Base exception for vite-starter errors."""


# ---------------------------------------------------------------------------
# Template engine
# ---------------------------------------------------------------------------


class TemplateSyntaxError(ViteStarterError):
    """Raised by strict-mode rendering when a directive is malformed."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)


class TemplateNotFoundError(ViteStarterError):
    """Raised when a required template file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Template file not found: {path}")


# ---------------------------------------------------------------------------
# Plugins and composition
# ---------------------------------------------------------------------------


class PluginValidationError(ViteStarterError):
    """Raised when a plugin is rejected at registration time."""


class PluginNotFoundError(ViteStarterError, KeyError):
    """Raised when a plugin id is not registered."""

    def __init__(self, plugin_id: str) -> None:
        self.plugin_id = plugin_id
        super().__init__(f"Plugin {plugin_id!r} is not registered.")

    def __str__(self) -> str:
        return self.args[0]


class ScriptConflictError(ViteStarterError):
    """Raised when two contributors declare the same package script."""

    def __init__(self, script: str, first: str, second: str) -> None:
        self.script = script
        self.first = first
        self.second = second
        super().__init__(f"Script {script!r} is declared by both {first!r} and {second!r}.")


class FileCollisionError(ViteStarterError):
    """Raised when two contributors generate the same output path."""

    def __init__(self, path: str, first: str, second: str) -> None:
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"File {path!r} is generated by both {first!r} and {second!r}.")


# ---------------------------------------------------------------------------
# Preconditions and pipeline
# ---------------------------------------------------------------------------


class InvalidProjectNameError(ViteStarterError, ValueError):
    """Raised when a project name breaks npm package naming rules."""

    def __init__(self, name: str, errors: list[str]) -> None:
        self.name = name
        self.errors = errors
        super().__init__(f"Invalid project name {name!r}: {'; '.join(errors)}")


class DirectoryExistsError(ViteStarterError):
    """Raised when the target directory is already present on disk."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Directory already exists: {path}")


class CommandExecutionError(ViteStarterError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: list[str], return_code: int, stderr: str = "") -> None:
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
        message = f"Command {' '.join(command)!r} failed with return code {return_code}."
        if stderr:
            message = f"{message}\nStderr: {stderr}"
        super().__init__(message)


class PipelineError(ViteStarterError):
    """Raised when a project creation step fails irrecoverably."""

    def __init__(self, step: str, step_index: int, message: str) -> None:
        self.step = step
        self.step_index = step_index
        super().__init__(f"Step {step_index + 1} ({step}): {message}")


class WizardCancelledError(ViteStarterError):
    """Raised when the user aborts the interactive wizard."""

    def __init__(self, message: str = "Project creation cancelled.") -> None:
        super().__init__(message)

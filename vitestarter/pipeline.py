"""vite-starter project creation pipeline.

Runs the creation steps strictly in sequence:

Step 1: creating-directory -- Create the target directory (must not exist).
Step 2: copying-files      -- Write the application sources.
Step 3: generating-config  -- Write package.json, root configs and plugin files.
Step 4: initializing-git   -- ``git init`` + initial commit (best effort).
Step 5: installing-deps    -- Install dependencies, then run plugin setup commands.

Steps 4 and 5 only exist when enabled in the ``ProjectConfig``. The whole
project is assembled in memory before step 1, so composition errors never
leave a half-written directory behind. Files written before a later step
fails are not rolled back.
"""

from __future__ import annotations

import asyncio
import shlex
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol

from rich.progress import Progress, TaskID

from vitestarter.config import Config
from vitestarter.exceptions import (
    CommandExecutionError,
    DirectoryExistsError,
    PipelineError,
    ViteStarterError,
)
from vitestarter.models import ProjectConfig, StepStatus
from vitestarter.scaffolder import AssembledProject, ProjectAssembler
from vitestarter.scaffolder.generator import FileKind
from vitestarter.utils import (
    console,
    format_duration,
    print_error,
    print_step,
    print_success,
    run_command,
)

# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

CREATING_DIRECTORY = "creating-directory"
COPYING_FILES = "copying-files"
GENERATING_CONFIG = "generating-config"
INITIALIZING_GIT = "initializing-git"
INSTALLING_DEPS = "installing-deps"

STEP_LABELS: dict[str, str] = {
    CREATING_DIRECTORY: "Creating project directory",
    COPYING_FILES: "Copying template files",
    GENERATING_CONFIG: "Generating configuration",
    INITIALIZING_GIT: "Initializing git repository",
    INSTALLING_DEPS: "Installing dependencies",
}

INITIAL_COMMIT_MESSAGE = "Initial commit from vite-starter"

ProgressCallback = Callable[[int, StepStatus], None]


def pipeline_steps(config: ProjectConfig) -> list[str]:
    """The step ids that will run for *config*, in order."""
    steps = [CREATING_DIRECTORY, COPYING_FILES, GENERATING_CONFIG]
    if config.init_git:
        steps.append(INITIALIZING_GIT)
    if config.install_deps:
        steps.append(INSTALLING_DEPS)
    return steps


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class FileSystem(Protocol):
    async def exists(self, path: Path) -> bool: ...

    async def mkdir(self, path: Path, parents: bool = True) -> None: ...

    async def write_file(self, path: Path, content: str, executable: bool = False) -> None: ...

    async def read_file(self, path: Path) -> str: ...


class LocalFileSystem:
    """The real disk. Blocking calls run in a worker thread."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.exists)

    async def mkdir(self, path: Path, parents: bool = True) -> None:
        await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=parents)

    async def write_file(self, path: Path, content: str, executable: bool = False) -> None:
        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            if executable:
                path.chmod(path.stat().st_mode | 0o111)

        await asyncio.to_thread(_write)

    async def read_file(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")


class ProcessRunner(Protocol):
    async def run(self, cmd: list[str], cwd: Path) -> tuple[int, str, str]: ...


class SubprocessRunner:
    """Runs commands through :func:`vitestarter.utils.run_command`.

    Args:
        timeout: Seconds before a command is killed. ``None`` waits forever.
    """

    def __init__(self, timeout: Optional[int] = None) -> None:
        self.timeout = timeout

    async def run(self, cmd: list[str], cwd: Path) -> tuple[int, str, str]:
        return await run_command(cmd, cwd=cwd, timeout=self.timeout)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class CreationResult:
    """Outcome of a successful pipeline run."""

    project_dir: Path
    steps: list[str]
    project: AssembledProject
    git_initialized: bool = False
    dependencies_installed: bool = False
    warnings: list[str] = field(default_factory=list)
    duration: float = 0.0


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectCreator:
    """Drives the creation steps for one ``ProjectConfig``.

    Attributes:
        assembler: Builds the in-memory project.
        fs: Filesystem collaborator.
        runner: Subprocess collaborator used for git and the package manager.
        on_progress: Called with ``(step_index, status)`` on every transition.
    """

    def __init__(
        self,
        assembler: Optional[ProjectAssembler] = None,
        fs: Optional[FileSystem] = None,
        runner: Optional[ProcessRunner] = None,
        on_progress: Optional[ProgressCallback] = None,
        settings: Optional[Config] = None,
    ) -> None:
        self.settings = settings or Config()
        self.assembler = assembler or ProjectAssembler(settings=self.settings)
        self.fs: FileSystem = fs or LocalFileSystem()
        self.runner: ProcessRunner = runner or SubprocessRunner(self.settings.command_timeout)
        self.on_progress = on_progress

    def _notify(self, index: int, status: StepStatus) -> None:
        if self.on_progress is not None:
            self.on_progress(index, status)

    async def create(self, config: ProjectConfig) -> CreationResult:
        """Assemble *config* and write it to ``config.target_dir``.

        Raises:
            ViteStarterError: If assembly fails (script conflict, file
                collision, missing template). Nothing has been written yet.
            PipelineError: If a step fails. Earlier steps' output stays on disk.
        """
        started = time.monotonic()
        project = self.assembler.assemble(config)
        steps = pipeline_steps(config)
        result = CreationResult(
            project_dir=config.target_dir,
            steps=steps,
            project=project,
            warnings=list(project.warnings),
        )

        for index in range(len(steps)):
            self._notify(index, StepStatus.PENDING)

        for index, step in enumerate(steps):
            self._notify(index, StepStatus.IN_PROGRESS)
            try:
                await self._run_step(step, config, result)
            except PipelineError:
                self._notify(index, StepStatus.ERROR)
                raise
            except (ViteStarterError, OSError) as exc:
                self._notify(index, StepStatus.ERROR)
                raise PipelineError(step, index, str(exc)) from exc
            self._notify(index, StepStatus.COMPLETE)

        result.duration = time.monotonic() - started
        return result

    async def _run_step(self, step: str, config: ProjectConfig, result: CreationResult) -> None:
        if step == CREATING_DIRECTORY:
            await self._create_directory(config.target_dir)
        elif step == COPYING_FILES:
            await self._write_entries(config.target_dir, result.project, "source")
        elif step == GENERATING_CONFIG:
            await self._write_entries(config.target_dir, result.project, "config")
        elif step == INITIALIZING_GIT:
            result.git_initialized = await self._init_git(config.target_dir, result.warnings)
        elif step == INSTALLING_DEPS:
            await self._install(config, result)

    # -- Steps ---------------------------------------------------------------

    async def _create_directory(self, target: Path) -> None:
        if await self.fs.exists(target):
            raise DirectoryExistsError(str(target))
        await self.fs.mkdir(target, parents=True)

    async def _write_entries(self, target: Path, project: AssembledProject, kind: FileKind) -> None:
        for entry in project.manifest.entries(kind):
            await self.fs.write_file(target / entry.path, entry.content, entry.executable)

    async def _init_git(self, target: Path, warnings: list[str]) -> bool:
        """Create a repository with one commit. Failures become warnings."""
        commands = [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE],
        ]
        for cmd in commands:
            try:
                returncode, _, stderr = await self.runner.run(cmd, target)
            except (OSError, ViteStarterError) as exc:
                returncode, stderr = 1, str(exc)
            if returncode != 0:
                warnings.append(f"Git initialization skipped: {' '.join(cmd)} failed: {stderr}")
                return False
        return True

    async def _install(self, config: ProjectConfig, result: CreationResult) -> None:
        target = config.target_dir
        cmd = config.package_manager.install_command
        returncode, _, stderr = await self.runner.run(cmd, target)
        if returncode != 0:
            raise CommandExecutionError(cmd, returncode, stderr)
        result.dependencies_installed = True

        # Hooks such as husky need both node_modules and a repository.
        if not result.git_initialized:
            if result.project.setup_commands:
                result.warnings.append(
                    "Setup commands skipped because git was not initialized: "
                    + ", ".join(result.project.setup_commands)
                )
            return

        for command in result.project.setup_commands:
            returncode, _, stderr = await self.runner.run(shlex.split(command), target)
            if returncode != 0:
                result.warnings.append(f"Setup command {command!r} failed: {stderr}")


# ---------------------------------------------------------------------------
# Console reporting
# ---------------------------------------------------------------------------


class ConsoleProgressReporter:
    """Progress callback that renders steps to the Rich console.

    When a ``Progress`` is supplied, a spinner runs while a step is in
    progress; otherwise each transition prints a plain line.
    """

    def __init__(self, steps: list[str], progress: Optional[Progress] = None) -> None:
        self.steps = steps
        self.progress = progress
        self.started: dict[int, float] = {}
        self._tasks: dict[int, TaskID] = {}

    def _label(self, index: int) -> str:
        step = self.steps[index]
        return f"[{index + 1}/{len(self.steps)}] {STEP_LABELS.get(step, step)}"

    def __call__(self, index: int, status: StepStatus) -> None:
        if status is StepStatus.PENDING:
            return
        label = self._label(index)
        if status is StepStatus.IN_PROGRESS:
            self.started[index] = time.monotonic()
            if self.progress is not None:
                self._tasks[index] = self.progress.add_task(f"{label}...", total=None)
            else:
                print_step(f"{label}...")
            return

        task = self._tasks.pop(index, None)
        if task is not None and self.progress is not None:
            self.progress.remove_task(task)

        elapsed = format_duration(time.monotonic() - self.started.get(index, time.monotonic()))
        if status is StepStatus.COMPLETE:
            console.print(f"  [green]+[/green] {label} [dim]({elapsed})[/dim]")
        elif status is StepStatus.ERROR:
            print_error(f"  x {label} failed after {elapsed}")


def report_result(result: CreationResult) -> None:
    """Print the post-creation summary line."""
    print_success(
        f"Created {result.project_dir.name} "
        f"({len(result.project.manifest)} files) in {format_duration(result.duration)}"
    )

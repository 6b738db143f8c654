"""Project name validation following npm package naming rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import quote

from vitestarter.exceptions import InvalidProjectNameError
from vitestarter.utils import run_command

MAX_NAME_LENGTH = 214

BLACKLIST = frozenset({"node_modules", "favicon.ico"})

NODE_BUILTINS = frozenset(
    {
        "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
        "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
        "events", "fs", "http", "http2", "https", "inspector", "module", "net",
        "os", "path", "perf_hooks", "process", "punycode", "querystring",
        "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
        "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
        "worker_threads", "zlib",
    }
)

_SCOPED_RE = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL_CHARS_RE = re.compile(r"[~'!()*]")


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _url_safe(value: str) -> bool:
    # Mirrors encodeURIComponent, which leaves these characters alone.
    return quote(value, safe="-_.!~*'()") == value


def validate_project_name(name: str) -> ValidationResult:
    """Check *name* against the rules npm applies to new packages.

    Problems that npm would only warn about for existing packages (capital
    letters, special characters, core module names, excessive length) still
    make the name invalid for a new project. ``errors`` lists every problem;
    ``warnings`` repeats the subset that are npm warnings.
    """
    if not name or not name.strip():
        return ValidationResult(valid=False, errors=["Project name cannot be empty"])

    errors: list[str] = []
    warnings: list[str] = []

    if name.startswith("."):
        errors.append("name cannot start with a period")
    if name.startswith("_"):
        errors.append("name cannot start with an underscore")
    if name.strip() != name:
        errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLIST:
        errors.append(f"{name} is not a valid package name")

    if name.lower() in NODE_BUILTINS:
        warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS_RE.search(name.split("/")[-1]):
        warnings.append('name can no longer contain special characters ("~\'!()*")')

    if not _url_safe(name):
        match = _SCOPED_RE.match(name)
        if match is None or not all(_url_safe(part) for part in match.groups() if part):
            errors.append("name can only contain URL-friendly characters")

    return ValidationResult(valid=not errors and not warnings, errors=errors + warnings, warnings=warnings)


def require_valid_project_name(name: str) -> str:
    """Return *name* unchanged when valid.

    Raises:
        InvalidProjectNameError: Listing every rule the name breaks.
    """
    result = validate_project_name(name)
    if not result.valid:
        raise InvalidProjectNameError(name, result.errors)
    return name


def suggest_valid_name(name: str) -> str:
    """Best-effort conversion of *name* into a valid npm package name.

    Examples::

        suggest_valid_name("My Cool App")  -> "my-cool-app"
        suggest_valid_name("123 go")       -> "app-123-go"
    """
    suggested = name.lower()
    suggested = re.sub(r"[\s_]+", "-", suggested)
    suggested = re.sub(r"[^a-z0-9-]", "", suggested)
    suggested = suggested.strip("-")
    if re.match(r"^\d", suggested):
        suggested = f"app-{suggested}"
    return suggested or "my-app"


async def is_git_installed() -> bool:
    returncode, _, _ = await run_command(["git", "--version"])
    return returncode == 0

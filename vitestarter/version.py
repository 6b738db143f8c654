"""Tool version and Node.js runtime checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from vitestarter.utils import run_command

DISTRIBUTION_NAME = "vite-starter"
FALLBACK_VERSION = "0.0.0"
MIN_NODE_MAJOR = 18

_NODE_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")


@dataclass
class NodeCheck:
    valid: bool
    message: str
    version: Optional[str] = None


def get_version() -> str:
    """Installed version of vite-starter, or ``0.0.0`` when running from a checkout."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION


def parse_node_major(raw: str) -> Optional[int]:
    match = _NODE_VERSION_RE.match(raw.strip())
    return int(match.group(1)) if match else None


async def check_node_version(min_major: int = MIN_NODE_MAJOR) -> NodeCheck:
    """Run ``node --version`` and compare its major version to *min_major*.

    A missing ``node`` binary or unparseable output is reported as invalid.
    """
    returncode, stdout, stderr = await run_command(["node", "--version"])
    if returncode != 0:
        return NodeCheck(
            valid=False,
            message=f"Node.js was not found ({stderr or 'node --version failed'}). "
            f"Please install Node.js {min_major}.0.0 or higher.",
        )

    current = stdout.strip()
    major = parse_node_major(current)
    if major is None:
        return NodeCheck(valid=False, message=f"Could not parse Node.js version {current!r}.")

    if major < min_major:
        return NodeCheck(
            valid=False,
            message=f"Node.js version {current} is not supported. "
            f"Please upgrade to Node.js {min_major}.0.0 or higher.",
            version=current,
        )
    return NodeCheck(valid=True, message=f"Node.js {current} detected", version=current)

"""vite-starter: scaffold React + Vite + TypeScript projects from composable feature plugins."""

from vitestarter.config import Config
from vitestarter.models import FeatureFlags, PackageManager, ProjectConfig, TestProfile

__all__ = [
    "Config",
    "FeatureFlags",
    "PackageManager",
    "ProjectConfig",
    "TestProfile",
]

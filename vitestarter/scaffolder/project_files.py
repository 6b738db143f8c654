"""Root-level project files: HTML shell, TypeScript configs, git ignores and README."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vitestarter.codegen import format_json, format_vite_config
from vitestarter.engine import TemplateEngine
from vitestarter.models import FeatureFlags, PackageManager
from vitestarter.presets import FEATURE_DESCRIPTIONS

INDEX_HTML = """\
<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <link rel="icon" type="image/svg+xml" href="/vite.svg" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{{projectName}}</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.tsx"></script>
  </body>
</html>
"""

GITIGNORE = """\
# Logs
logs
*.log
npm-debug.log*
yarn-debug.log*
yarn-error.log*
pnpm-debug.log*

node_modules
dist
dist-ssr
coverage
*.local

# Editor directories and files
.vscode/*
!.vscode/extensions.json
!.vscode/settings.json
.idea
.DS_Store
*.suo
*.ntvs*
*.njsproj
*.sln
*.sw?
"""

README_MD = """\
# {{projectName}}

{{#if description}}{{description}}
{{else}}React + TypeScript + Vite project.
{{/if}}
## Getting started

```bash
{{{installCommand}}}
{{{devCommand}}}
```

## Available scripts

{{#each scripts}}- `{{{run}}}`: `{{{command}}}`
{{/each}}
{{#if hasFeatures}}## Features

{{#each featureList}}- **{{{name}}}**: {{{description}}}
{{/each}}
{{/if}}## License

{{license}}
"""


def tsconfig_json() -> dict[str, Any]:
    return {
        "files": [],
        "references": [
            {"path": "./tsconfig.app.json"},
            {"path": "./tsconfig.node.json"},
        ],
    }


def tsconfig_app_json(features: FeatureFlags) -> dict[str, Any]:
    """Compiler options for the application sources under ``src``."""
    types = ["vite/client"]
    if features.testing:
        types.extend(["vitest/globals", "@testing-library/jest-dom"])

    compiler_options: dict[str, Any] = {
        "tsBuildInfoFile": "./node_modules/.tmp/tsconfig.app.tsbuildinfo",
        "target": "ES2022",
        "useDefineForClassFields": True,
        "lib": ["ES2022", "DOM", "DOM.Iterable"],
        "module": "ESNext",
        "types": types,
        "skipLibCheck": True,
        "moduleResolution": "bundler",
        "allowImportingTsExtensions": True,
        "verbatimModuleSyntax": True,
        "moduleDetection": "force",
        "noEmit": True,
        "jsx": "react-jsx",
        "strict": True,
        "noUnusedLocals": True,
        "noUnusedParameters": True,
        "noFallthroughCasesInSwitch": True,
        "noUncheckedSideEffectImports": True,
    }
    if features.i18n:
        compiler_options["resolveJsonModule"] = True
    return {"compilerOptions": compiler_options, "include": ["src"]}


def tsconfig_node_json(features: FeatureFlags) -> dict[str, Any]:
    include = ["vite.config.ts"]
    if features.testing:
        include.append("vitest.config.ts")
    if features.tailwindcss:
        include.append("tailwind.config.ts")
    return {
        "compilerOptions": {
            "tsBuildInfoFile": "./node_modules/.tmp/tsconfig.node.tsbuildinfo",
            "target": "ES2023",
            "lib": ["ES2023"],
            "module": "ESNext",
            "types": ["node"],
            "skipLibCheck": True,
            "moduleResolution": "bundler",
            "allowImportingTsExtensions": True,
            "verbatimModuleSyntax": True,
            "moduleDetection": "force",
            "noEmit": True,
            "strict": True,
            "noUnusedLocals": True,
            "noUnusedParameters": True,
            "noFallthroughCasesInSwitch": True,
        },
        "include": include,
    }


def render_readme(
    engine: TemplateEngine,
    features: FeatureFlags,
    scripts: Mapping[str, str],
    package_manager: PackageManager,
) -> str:
    """README with install/run commands for *package_manager*.

    Only scripts that exist in the manifest are listed, each with the
    command that runs it under the chosen package manager.
    """
    feature_list = [
        {
            "name": FEATURE_DESCRIPTIONS[name]["name"],
            "description": FEATURE_DESCRIPTIONS[name]["description"],
        }
        for name in features.enabled()
    ]
    return engine.render(
        README_MD,
        {
            "installCommand": " ".join(package_manager.install_command),
            "devCommand": package_manager.run_command("dev"),
            "scripts": [
                {"run": package_manager.run_command(name), "command": command}
                for name, command in scripts.items()
            ],
            "featureList": feature_list,
            "hasFeatures": bool(feature_list),
        },
    )


def project_files(
    features: FeatureFlags,
    engine: TemplateEngine,
    scripts: Mapping[str, str],
    package_manager: PackageManager,
) -> dict[str, str]:
    """Every root-level config file, keyed by project-relative path."""
    return {
        "index.html": engine.render(INDEX_HTML),
        "vite.config.ts": format_vite_config(features),
        "tsconfig.json": format_json(tsconfig_json()),
        "tsconfig.app.json": format_json(tsconfig_app_json(features)),
        "tsconfig.node.json": format_json(tsconfig_node_json(features)),
        ".gitignore": GITIGNORE,
        "README.md": render_readme(engine, features, scripts, package_manager),
    }

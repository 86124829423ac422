"""Release feed constants, on-disk layouts and environment settings."""
import os
from pathlib import Path

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN")
USER_AGENT = "lsp-provision"

# Container directories live under here, one per tool
CONTAINER_ROOT = Path(
    os.environ.get(
        "LSP_PROVISION_HOME", os.path.expanduser("~/.cache/lsp_provision/servers")
    )
)
NODE_BINARY = os.environ.get("LSP_PROVISION_NODE")

# typescript-language-server, newest layout first
TYPESCRIPT_SERVER_PATHS = (
    "node_modules/typescript-language-server/lib/cli.mjs",
    "node_modules/typescript-language-server/lib/cli.js",
)
TYPESCRIPT_TSSERVER_PATH = "node_modules/typescript/lib"

# vscode-eslint, built from a source tarball
ESLINT_REPO = "microsoft/vscode-eslint"
ESLINT_REPO_DIR = "vscode-eslint"
ESLINT_SERVER_PATH = "vscode-eslint/server/out/eslintServer.js"

# In-progress installs are hidden until they are renamed into place
STAGING_PREFIX = ".staging-"

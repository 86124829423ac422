from typing import Any, Dict

import aiohttp

from lsp_provision.constants import (
    GITHUB_API_BASE,
    GITHUB_REPOS_PATH,
    GITHUB_TOKEN,
    RELEASES_PATH,
    USER_AGENT,
)
from lsp_provision.logging import get_logger
from lsp_provision.types import GitHubRelease

logger = get_logger(__name__)


def github_headers() -> Dict[str, str]:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
    if GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {GITHUB_TOKEN}"
    return headers


def parse_release(data: Dict[str, Any]) -> GitHubRelease:
    return GitHubRelease(
        name=data.get("name") or data["tag_name"],
        tarball_url=data["tarball_url"],
        pre_release=bool(data.get("prerelease", False)),
    )


async def latest_github_release(
    repo: str, pre_release: bool, session: aiohttp.ClientSession
) -> GitHubRelease:
    """Return the newest release of repo whose prerelease flag equals pre_release.

    The releases endpoint lists newest first, so the first match wins.
    """
    url = f"{GITHUB_API_BASE}/{GITHUB_REPOS_PATH}/{repo}/{RELEASES_PATH}"

    async with session.get(url, headers=github_headers()) as response:
        response.raise_for_status()
        releases = await response.json()

    if not isinstance(releases, list):
        raise ValueError(f"Unexpected releases payload for {repo}")

    for data in releases:
        if bool(data.get("prerelease", False)) == pre_release:
            release = parse_release(data)
            logger.debug(
                "github_release_selected", repo=repo, name=release.name
            )
            return release

    kind = "prerelease" if pre_release else "release"
    raise ValueError(f"No {kind} found for {repo}")

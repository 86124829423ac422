"""Tests for GitHub release lookup."""
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from lsp_provision.utils.github import github_headers, latest_github_release

RELEASES = [
    {
        "name": "release/3.0.6",
        "tag_name": "release/3.0.6",
        "tarball_url": "https://api.github.com/repos/o/r/tarball/release/3.0.6",
        "prerelease": True,
    },
    {
        "name": "2.4.4",
        "tag_name": "release/2.4.4",
        "tarball_url": "https://api.github.com/repos/o/r/tarball/release/2.4.4",
        "prerelease": False,
    },
]


def mock_session(payload=None, error=None):
    response = MagicMock()
    response.json = AsyncMock(return_value=payload)
    response.raise_for_status = MagicMock(side_effect=error)

    request = MagicMock()
    request.__aenter__ = AsyncMock(return_value=response)
    request.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=request)
    return session


@pytest.mark.asyncio
async def test_latest_prerelease():
    session = mock_session(RELEASES)

    release = await latest_github_release("o/r", True, session)

    assert release.name == "release/3.0.6"
    assert release.tarball_url.endswith("3.0.6")
    assert release.pre_release
    url = session.get.call_args.args[0]
    assert url == "https://api.github.com/repos/o/r/releases"


@pytest.mark.asyncio
async def test_latest_stable_release():
    release = await latest_github_release("o/r", False, mock_session(RELEASES))

    assert release.name == "2.4.4"
    assert not release.pre_release


@pytest.mark.asyncio
async def test_release_name_falls_back_to_tag():
    payload = [{"name": "", "tag_name": "v1.0.0", "tarball_url": "u", "prerelease": True}]

    release = await latest_github_release("o/r", True, mock_session(payload))

    assert release.name == "v1.0.0"


@pytest.mark.asyncio
async def test_no_matching_release():
    with pytest.raises(ValueError, match="No prerelease found for o/r"):
        await latest_github_release("o/r", True, mock_session(RELEASES[1:]))


@pytest.mark.asyncio
async def test_http_error_propagates():
    error = aiohttp.ClientResponseError(MagicMock(), (), status=403, message="rate limited")

    with pytest.raises(aiohttp.ClientResponseError):
        await latest_github_release("o/r", True, mock_session(error=error))


@pytest.mark.asyncio
async def test_non_list_payload():
    payload = {"message": "Not Found", "documentation_url": "https://docs.github.com"}

    with pytest.raises(ValueError, match="Unexpected releases payload for o/r"):
        await latest_github_release("o/r", True, mock_session(payload))


def test_github_headers_token(monkeypatch):
    monkeypatch.setattr("lsp_provision.utils.github.GITHUB_TOKEN", "secret")

    headers = github_headers()

    assert headers["Authorization"] == "Bearer secret"
    assert headers["User-Agent"] == "lsp-provision"

import io
import tarfile
from unittest.mock import AsyncMock, MagicMock

import pytest

from lsp_provision.utils.fetching import download_file, extract_archive
from lsp_provision.utils.fs import (
    async_subprocess_run,
    remove_matching,
    replace_path,
    visible_entries,
)


def test_remove_matching(tmp_path):
    keep = tmp_path / "keep"
    keep.mkdir()
    (tmp_path / "old-dir").mkdir()
    (tmp_path / "old-dir" / "file").write_text("x")
    (tmp_path / "old-file").write_text("x")

    remove_matching(tmp_path, lambda entry: entry != keep)

    assert list(tmp_path.iterdir()) == [keep]


def test_remove_matching_missing_directory(tmp_path):
    remove_matching(tmp_path / "missing", lambda entry: True)


def test_visible_entries_sorted_without_hidden(tmp_path):
    for name in ("b", "a", ".staging-1"):
        (tmp_path / name).mkdir()

    assert [p.name for p in visible_entries(tmp_path)] == ["a", "b"]


def test_replace_path(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "new").write_text("new")
    dst = tmp_path / "dst"
    dst.mkdir()
    (dst / "old").write_text("old")

    replace_path(src, dst)

    assert not src.exists()
    assert [p.name for p in dst.iterdir()] == ["new"]


def test_extract_archive(tmp_path):
    archive_path = tmp_path / "release.tar.gz"
    with tarfile.open(archive_path, "w:gz") as tf:
        data = b"content"
        info = tarfile.TarInfo("owner-repo-1234/README.md")
        info.size = len(data)
        tf.addfile(info, io.BytesIO(data))

    dest = extract_archive(archive_path, tmp_path / "out")

    assert (dest / "owner-repo-1234" / "README.md").read_text() == "content"


def test_extract_archive_not_gzip(tmp_path):
    archive_path = tmp_path / "release.tar.gz"
    archive_path.write_bytes(b"not an archive")

    with pytest.raises(ValueError, match="Failed to extract release.tar.gz"):
        extract_archive(archive_path, tmp_path / "out")


def mock_download_session(status, chunks):
    async def iter_chunked(size):
        for chunk in chunks:
            yield chunk

    response = MagicMock()
    response.status = status
    response.content.iter_chunked = MagicMock(side_effect=iter_chunked)

    request = MagicMock()
    request.__aenter__ = AsyncMock(return_value=response)
    request.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=request)
    return session


@pytest.mark.asyncio
async def test_download_file(tmp_path):
    dest = tmp_path / "archive.tar.gz"
    session = mock_download_session(200, [b"abc", b"def"])

    await download_file(session, "https://example/archive", dest)

    assert dest.read_bytes() == b"abcdef"
    assert session.get.call_args.kwargs["allow_redirects"] is True


@pytest.mark.asyncio
async def test_download_file_bad_status(tmp_path):
    dest = tmp_path / "archive.tar.gz"
    session = mock_download_session(404, [])

    with pytest.raises(RuntimeError, match="status 404"):
        await download_file(session, "https://example/archive", dest)

    assert not dest.exists()


@pytest.mark.asyncio
async def test_async_subprocess_run(tmp_path):
    returncode, stdout, stderr = await async_subprocess_run("pwd", cwd=tmp_path)

    assert returncode == 0
    assert stdout.strip() == str(tmp_path.resolve())

import tarfile
from pathlib import Path
from typing import Dict, Optional

import aiohttp

from lsp_provision.constants import USER_AGENT
from lsp_provision.logging import get_logger

logger = get_logger(__name__)


async def download_file(
    session: aiohttp.ClientSession,
    url: str,
    dest: Path,
    headers: Optional[Dict[str, str]] = None,
) -> None:
    """Stream url into dest, following redirects."""
    request_headers = {"User-Agent": USER_AGENT, **(headers or {})}

    logger.info("download_started", url=url, destination=str(dest))

    try:
        async with session.get(
            url, headers=request_headers, allow_redirects=True
        ) as response:
            if response.status != 200:
                raise RuntimeError(f"Download failed with status {response.status}")

            downloaded = 0
            with open(dest, "wb") as f:
                async for chunk in response.content.iter_chunked(8192):
                    f.write(chunk)
                    downloaded += len(chunk)

    except Exception as e:
        if dest.exists():
            dest.unlink()
        logger.error("download_failed", url=url, error=str(e))
        raise RuntimeError(f"Failed to download {url}: {e}") from e

    logger.info("download_complete", url=url, size=downloaded)


def extract_archive(archive_path: Path, dest_dir: Path) -> Path:
    """Decompress and unpack a gzipped tarball into dest_dir."""
    logger.debug("extract_archive", archive=str(archive_path), dest=str(dest_dir))

    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            archive.extractall(dest_dir, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise ValueError(f"Failed to extract {archive_path.name}: {e}") from e

    logger.info(
        "archive_extracted", archive=str(archive_path), extracted_to=str(dest_dir)
    )

    return dest_dir

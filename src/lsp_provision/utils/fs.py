import asyncio
import shutil
from pathlib import Path
from typing import Callable, List, Optional

from lsp_provision.logging import get_logger

logger = get_logger(__name__)


async def async_subprocess_run(*args, cwd: Optional[Path] = None):
    """
    Run a command asynchronously and return its exit code, stdout, and stderr.

    :param args: Command and arguments to run
    :param cwd: Working directory for the command
    :return: Tuple of (returncode, stdout, stderr)
    """
    logger.debug("subprocess_exec", cmd=list(args), cwd=str(cwd) if cwd else None)

    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()

    logger.debug("subprocess_complete", cmd=list(args), returncode=proc.returncode)

    return proc.returncode, stdout.decode(), stderr.decode()


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def remove_matching(directory: Path, predicate: Callable[[Path], bool]) -> None:
    """Remove every immediate child of directory for which predicate holds."""
    if not directory.is_dir():
        return

    for entry in directory.iterdir():
        if predicate(entry):
            logger.info("stale_entry_removed", path=str(entry))
            remove_path(entry)


def visible_entries(directory: Path) -> List[Path]:
    """Immediate children in name order, skipping hidden entries."""
    return sorted(p for p in directory.iterdir() if not p.name.startswith("."))


def replace_path(src: Path, dst: Path) -> None:
    """Move src to dst, discarding whatever dst held before."""
    if dst.exists() or dst.is_symlink():
        remove_path(dst)
    src.rename(dst)

"""Error handling for language server provisioning."""
from pathlib import Path
from typing import Any, Dict, Optional

from mcp.types import ErrorData, INVALID_PARAMS, INVALID_REQUEST, INTERNAL_ERROR

from lsp_provision.logging import get_logger


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[Any] = None,
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, ProvisionError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("provision_error", **error_info)


class ProvisionError(Exception):
    """Base error class for provisioning."""

    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(code=self.code, message=str(self), data=self.details)


class VersionLookupError(ProvisionError):
    """Remote source unreachable or returned no usable version."""

    def __init__(
        self, tool: str, message: str, details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            f"{tool}: {message}",
            code=INTERNAL_ERROR,
            details={"tool": tool, **(details or {})},
        )
        self.tool = tool


class InstallError(ProvisionError):
    """Download, extraction or build step failed."""

    def __init__(self, tool: str, message: str, step: Optional[str] = None):
        super().__init__(
            f"{tool}: {message}",
            code=INTERNAL_ERROR,
            details={"tool": tool, "step": step},
        )
        self.tool = tool
        self.step = step


class BinNotFoundError(ProvisionError):
    """Binary not found error."""

    def __init__(self, binary_name: str):
        super().__init__(
            f"Binary {binary_name} not found",
            code=INVALID_REQUEST,
            details={"binary_name": binary_name},
        )


class UnknownToolError(ProvisionError):
    """Requested tool is not one of the known language servers."""

    def __init__(self, name: str):
        super().__init__(
            f"Unknown language server: {name}",
            code=INVALID_PARAMS,
            details={"name": name},
        )


class PathResolutionMiss(Exception):
    """No usable cached binary. Absorbed by the path resolver."""

    def __init__(self, container_dir: Path, reason: str):
        super().__init__(f"{reason} in directory {container_dir}")
        self.container_dir = container_dir
        self.reason = reason

"""Enclave error hierarchy.

All enclave-specific errors inherit from EnclaveError for easy catching.
"""


class EnclaveError(Exception):
    """Base error for all enclave operations."""


class ConfigError(EnclaveError):
    """Invalid or missing configuration."""


class PathDoesNotExist(ConfigError):
    """A required root or destination-parent path is missing."""


class ContentError(EnclaveError):
    """Error in source blob handling (registration, lookup, parsing)."""


class RegistryClosed(ContentError):
    """A blob was registered after the build phase finished."""


class UnknownBlob(ContentError, KeyError):
    """No blob is registered at the requested path."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class FrontmatterParseError(ContentError):
    """A frontmatter header could not be parsed.

    Only raised and recovered inside the frontmatter parser, which treats an
    unparseable header as no header at all.
    """


class RouteError(EnclaveError):
    """Error in the route identifier map."""


class RouteMapClosed(RouteError):
    """A route was assigned after the build phase finished."""


class DuplicateRoute(RouteError):
    """A route was assigned twice."""


class UnroutableBlob(RouteError, TypeError):
    """A route was assigned to a blob without a URL path (e.g. a layout)."""


class UndefinedRoute(RouteError, KeyError):
    """No blob is assigned to the requested route."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class CompileError(EnclaveError):
    """Error during compilation (asset bundling, rendering, writing)."""


class AssetCompilationFailed(CompileError):
    """The asset bundler exited with a non-zero status.

    Attributes:
        returncode: Exit status of the bundler process.
        stderr: Captured standard error of the bundler process.

    """

    def __init__(self, message: str, *, returncode: int = 1, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class AssetReportUnparseable(CompileError):
    """The asset bundler succeeded but its report could not be parsed."""

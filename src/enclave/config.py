"""Enclave configuration.

EnclaveConfig is the central configuration object, frozen after creation.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from enclave._errors import PathDoesNotExist
from enclave.paths import clean, concat


def _default_env() -> str:
    return os.environ.get("ENCLAVE_ENV", "development")


@dataclass(frozen=True, slots=True)
class EnclaveConfig:
    """Configuration for one site compilation.

    Attributes:
        root: Site root directory.  Resolved to an absolute path on
              construction and required to exist.
        assets_dir: Asset sources, relative to root.
        contents_dir: Content sources, relative to root.
        layouts_dir: Layout sources, relative to root.
        output_root: Build output directory (default ``tmp/build-<env>``).
        output_assets: Bundler output directory, relative to output_root.
            Its base name doubles as the bundler's public URL prefix.
        output_directory_index: File name written for routes ending in ``/``.
        minify: Let the bundler minify its output.
        cache: Let the bundler use its cache directory.
        cache_dir: Bundler cache directory, relative to root.
        bundler_command: Command prefix for the bundler's build step.
        env: Build environment name (``ENCLAVE_ENV``, default ``development``).

    Relative directories resolve against ``root``; absolute ones are kept.

    """

    root: Path = field(default_factory=Path.cwd)
    assets_dir: str = "assets"
    contents_dir: str = "contents"
    layouts_dir: str = "layouts"
    output_root: str | None = None
    output_assets: str = "assets"
    output_directory_index: str = "index.html"
    minify: bool = False
    cache: bool = False
    cache_dir: str | None = "tmp/parcel"
    bundler_command: tuple[str, ...] = ("yarn", "run", "parcel", "build")
    env: str = field(default_factory=_default_env)

    def __post_init__(self) -> None:
        root = clean(Path(self.root).expanduser().absolute())
        if not root.exists():
            msg = f"Root path does not exist: {root}"
            raise PathDoesNotExist(msg)
        object.__setattr__(self, "root", root)
        object.__setattr__(self, "bundler_command", tuple(self.bundler_command))

    def _under_root(self, value: str | Path) -> Path:
        path = Path(value)
        if path.is_absolute():
            return clean(path)
        return clean(concat(self.root, path))

    @property
    def assets_path(self) -> Path:
        """Absolute path to the asset sources."""
        return self._under_root(self.assets_dir)

    @property
    def contents_path(self) -> Path:
        """Absolute path to the content sources."""
        return self._under_root(self.contents_dir)

    @property
    def layouts_path(self) -> Path:
        """Absolute path to the layout sources."""
        return self._under_root(self.layouts_dir)

    @property
    def output_root_path(self) -> Path:
        """Absolute path to the build output directory."""
        return self._under_root(self.output_root or f"tmp/build-{self.env}")

    @property
    def output_assets_path(self) -> Path:
        """Absolute path the bundler writes into."""
        return clean(concat(self.output_root_path, self.output_assets))

    @property
    def cache_dir_path(self) -> Path | None:
        """Absolute bundler cache directory, or None when unset."""
        if not self.cache_dir:
            return None
        return self._under_root(self.cache_dir)

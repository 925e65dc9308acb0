"""Blob registry — the tracked source files of one kind under one root.

Blobs are keyed by absolute, lexically normalized input path.  A registry is
open while the site rules run and is closed exactly once afterwards; closed
registries are read-only.

Example::

    contents = BlobRegistry(root / "contents", Content)
    contents.register_many(r"\\.md$")
    contents.register("index.html.j2", locals={"title": "Home"})
    contents.close()

"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from enclave._errors import RegistryClosed, UnknownBlob
from enclave._types import InputPath
from enclave.content.blobs import HasInputPath
from enclave.paths import clean, concat


class BlobRegistry[B: HasInputPath]:
    """Registry of blobs of a single kind, scoped to one source directory.

    Args:
        scoped_root: Absolute directory that relative paths resolve against.
        blob_class: Blob kind to construct (called with ``input_path=`` and
            any registration options).

    """

    __slots__ = ("_blob_class", "_closed", "_files", "_lookup", "_scoped_root")

    def __init__(self, scoped_root: Path, blob_class: Callable[..., B]) -> None:
        self._scoped_root = Path(scoped_root)
        self._blob_class = blob_class
        self._lookup: dict[InputPath, B] = {}
        self._files: dict[str, Path] | None = None
        self._closed = False

    @property
    def scoped_root(self) -> Path:
        return self._scoped_root

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Make the registry read-only."""
        self._closed = True

    # ----- Lookup -----

    def lookup(self, relpath: str | Path) -> B:
        """Return the blob registered at *relpath*.

        Raises:
            UnknownBlob: If nothing is registered at that path.

        """
        abspath = self._into_abspath(relpath)
        try:
            return self._lookup[abspath]
        except KeyError:
            msg = f"Don't know about this blob: {str(abspath)!r}"
            raise UnknownBlob(msg) from None

    def __getitem__(self, relpath: str | Path) -> B:
        return self.lookup(relpath)

    def get(self, abspath: InputPath) -> B | None:
        """Return the blob at an absolute input path, or None."""
        return self._lookup.get(clean(abspath))

    def __contains__(self, relpath: object) -> bool:
        if not isinstance(relpath, (str, Path)):
            return False
        return self._into_abspath(relpath) in self._lookup

    def __iter__(self) -> Iterator[B]:
        return iter(list(self._lookup.values()))

    def __len__(self) -> int:
        return len(self._lookup)

    # ----- Registration -----

    def register(
        self,
        relpath: str | Path,
        customize: Callable[[B], object] | None = None,
        **options: Any,
    ) -> B:
        """Create the blob at *relpath*, or return the one already there.

        *options* are only used when the blob is created.  *customize* is
        called with the blob in both cases.

        Raises:
            RegistryClosed: If the registry has been closed.

        """
        self._ensure_open()

        abspath = self._into_abspath(relpath)
        blob = self._lookup.get(abspath)
        if blob is None:
            blob = self._blob_class(input_path=abspath, **options)
            self._lookup[abspath] = blob

        if customize is not None:
            customize(blob)

        return blob

    def register_many(self, pattern: str | re.Pattern[str]) -> list[B]:
        """Register every file whose relative path matches *pattern*.

        *pattern* is a regular expression searched against POSIX-style paths
        relative to the scoped root.  Files already registered keep their
        existing blob.  Returns the matching blobs in discovery order.

        Raises:
            RegistryClosed: If the registry has been closed.

        """
        self._ensure_open()

        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        matched: list[B] = []

        for relpath, abspath in self._discover().items():
            if regex.search(relpath) is None:
                continue
            blob = self._lookup.get(abspath)
            if blob is None:
                blob = self._blob_class(input_path=abspath)
                self._lookup[abspath] = blob
            matched.append(blob)

        return matched

    # ----- Helpers -----

    def _ensure_open(self) -> None:
        if self._closed:
            kind = getattr(self._blob_class, "__name__", "blob")
            msg = f"Can't add more {kind}s after the initial setup"
            raise RegistryClosed(msg)

    def _into_abspath(self, relpath: str | Path) -> Path:
        return clean(concat(self._scoped_root, relpath))

    def _discover(self) -> dict[str, Path]:
        """Map relative POSIX path -> absolute path for every file, once."""
        if self._files is None:
            if self._scoped_root.is_dir():
                files = sorted(p for p in self._scoped_root.rglob("*") if p.is_file())
            else:
                files = []
            self._files = {
                path.relative_to(self._scoped_root).as_posix(): clean(path)
                for path in files
            }
        return self._files

"""Path helpers shared by the registries, the route map and the compiler.

``concat`` differs from ``Path.joinpath``: a part that starts with ``/`` is
still joined *below* the base instead of replacing it::

    Path("/foo") / "/bar"      -> /bar
    concat("/foo", "/bar")     -> /foo/bar

"""

import os
import re
from pathlib import Path

_SEPARATOR_RUN = re.compile(r"/+")

# ``..`` alone, or ``..`` followed by a separator, at the start of a relative path
_PARENT_ESCAPE = re.compile(r"\A\.\.(?:\Z|/)")


def concat(base: str | os.PathLike[str], *parts: str | os.PathLike[str]) -> Path:
    """Join *parts* onto *base*, treating absolute-looking parts as relative."""
    joined = os.fspath(base)
    for part in parts:
        joined = joined.rstrip("/") + "/" + os.fspath(part).lstrip("/")
    return Path(joined)


def clean(path: str | os.PathLike[str]) -> Path:
    """Lexically resolve ``.`` and ``..`` segments without touching the disk."""
    return Path(os.path.normpath(path))


def contains(base: str | os.PathLike[str], candidate: str | os.PathLike[str]) -> bool:
    """Return True if *candidate* is *base* itself or lies below it.

    The check is lexical: *candidate* is made relative to *base* and must not
    begin with a parent-directory escape.
    """
    difference = os.path.relpath(candidate, base)
    return _PARENT_ESCAPE.match(difference.replace(os.sep, "/")) is None


def normalize_route(route: str) -> str:
    """Prefix *route* with ``/`` and collapse runs of separators.

    >>> normalize_route("foo//bar")
    '/foo/bar'

    """
    return _SEPARATOR_RUN.sub("/", "/" + route)

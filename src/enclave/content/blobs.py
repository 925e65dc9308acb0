"""Blobs — tracked source files plus their routing and rendering metadata.

Three concrete kinds exist:

- :class:`Asset` — handed to the external bundler; routable.
- :class:`Content` — rendered through its render chain (and layout); routable.
- :class:`Layout` — wraps rendered content; referenced, never routed.

Shared capabilities are described by the :class:`HasInputPath`,
:class:`Routable` and :class:`Renderable` protocols.

Thread Safety:
    Blobs are mutable and owned by a single compile at a time (the compiler
    serialises whole builds behind one lock).

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from enclave._types import InputPath, RoutePath, Variables
from enclave.content.frontmatter import parse_frontmatter
from enclave.paths import normalize_route

# Placeholder in a renderer list, replaced by the guesser once rules are applied
GUESS: Final = "guess"


@runtime_checkable
class HasInputPath(Protocol):
    input_path: InputPath


@runtime_checkable
class Routable(HasInputPath, Protocol):
    output_path: Path | None

    @property
    def url_path(self) -> RoutePath | None: ...


@runtime_checkable
class Renderable(HasInputPath, Protocol):
    renderers: list[Any]

    @property
    def body(self) -> str: ...


def _as_renderer_list(renderers: object) -> list[Any]:
    if isinstance(renderers, (list, tuple)):
        return list(renderers)
    return [renderers]


def _normalize_url_path(url_path: object) -> str | None:
    if url_path is None:
        return None
    return normalize_route(str(url_path))


@dataclass(eq=False, slots=True)
class Asset:
    """A bundler input file.

    Attributes:
        input_path: Absolute path to the source file.
        entrypoint: Passed to the bundler as a build entry when True.
        body: Compiled output, loaded after the bundler reports it.
        output_path: Absolute path of the bundler's output file.

    """

    input_path: InputPath
    entrypoint: bool = False
    body: str | None = None
    output_path: Path | None = None
    _url_path: RoutePath | None = field(default=None, init=False, repr=False)

    @property
    def url_path(self) -> RoutePath | None:
        """Normalized URL path (route or bundler output location)."""
        return self._url_path

    @url_path.setter
    def url_path(self, value: object) -> None:
        self._url_path = _normalize_url_path(value)


@dataclass(eq=False, slots=True)
class Layout:
    """A template that wraps rendered content."""

    input_path: InputPath
    renderers: list[Any] = field(default_factory=lambda: [GUESS])
    _body: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.renderers = _as_renderer_list(self.renderers)

    @property
    def body(self) -> str:
        """Raw layout source, read once."""
        if self._body is None:
            self._body = self.input_path.read_text(encoding="utf-8", errors="surrogateescape")
        return self._body


@dataclass(eq=False, slots=True)
class Content:
    """A renderable, routable source file.

    Attributes:
        input_path: Absolute path to the source file.
        layout: Layout wrapping the rendered body, or None.
        locals: Variables supplied by the site rules.  Take precedence over
            frontmatter in :attr:`input`.
        renderers: Renderer units applied in order; may contain :data:`GUESS`
            until the site resolves it.
        output_path: Destination file, computed by the compiler.

    """

    input_path: InputPath
    layout: Layout | None = None
    locals: Variables = field(default_factory=dict)
    renderers: list[Any] = field(default_factory=lambda: [GUESS])
    output_path: Path | None = None
    _url_path: RoutePath | None = field(default=None, init=False, repr=False)
    _parsed: tuple[Variables, str] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.renderers = _as_renderer_list(self.renderers)

    @property
    def url_path(self) -> RoutePath | None:
        return self._url_path

    @url_path.setter
    def url_path(self, value: object) -> None:
        self._url_path = _normalize_url_path(value)

    @property
    def frontmatter(self) -> Variables:
        return self._parse()[0]

    @property
    def body(self) -> str:
        """Source text without its frontmatter header."""
        return self._parse()[1]

    @property
    def input(self) -> Variables:
        """Frontmatter merged with locals; locals win on collision."""
        return {**self.frontmatter, **self.locals}

    def _parse(self) -> tuple[Variables, str]:
        if self._parsed is None:
            text = self.input_path.read_text(encoding="utf-8", errors="surrogateescape")
            self._parsed = parse_frontmatter(text)
        return self._parsed


type Blob = Asset | Content | Layout


def renderer_names(renderers: Sequence[Any]) -> list[str]:
    """Readable names for a renderer list (diagnostics only)."""
    return [r if isinstance(r, str) else type(r).__name__ for r in renderers]

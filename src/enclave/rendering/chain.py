"""Render chain — fold a body through an ordered list of renderer units."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from enclave._errors import CompileError

if TYPE_CHECKING:
    from enclave._types import Continuation
    from enclave.rendering.view_context import ViewContext


class RenderChain:
    """Applies renderers first to last, each receiving the previous output.

    Holds no state between calls; every call starts again from ``body``.

    Args:
        body: Source text fed to the first renderer.
        path: Originating file, for diagnostics and template cache keys.
        renderers: Renderer units (see :class:`enclave.rendering.renderers.Renderer`).
        view_context: Shared context handed to every renderer.

    """

    __slots__ = ("_body", "_path", "_renderers", "_view_context")

    def __init__(
        self,
        *,
        body: str,
        path: Path | None,
        renderers: Sequence[Any],
        view_context: ViewContext,
    ) -> None:
        self._body = body
        self._path = path
        self._renderers = tuple(renderers)
        self._view_context = view_context

    def __call__(self, caller: Continuation | None = None) -> str:
        """Run the chain; *caller* is the continuation for yielded content."""
        rendered = self._body
        for renderer in self._renderers:
            if isinstance(renderer, str):
                msg = f"Unresolved renderer {renderer!r} for {self._path}"
                raise CompileError(msg)
            rendered = renderer(rendered, self._view_context, path=self._path, caller=caller)
        return rendered

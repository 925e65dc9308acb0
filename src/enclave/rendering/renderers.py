"""Renderer units — opaque body transformers used by render chains.

A renderer is any callable with the signature::

    renderer(source, view_context, *, path, caller=None) -> str

``caller`` is the continuation for yielded content: a layout receives the
already-rendered content body through it, a partial receives the captured
body of a Jinja ``{% call %}`` block.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import jinja2
import markdown

if TYPE_CHECKING:
    from enclave._types import Continuation
    from enclave.rendering.view_context import ViewContext

_NON_ALPHA = re.compile(r"[^A-Za-z]")


class Renderer(Protocol):
    def __call__(
        self,
        source: str,
        view_context: ViewContext,
        *,
        path: Path | None,
        caller: Continuation | None = None,
    ) -> str: ...


def template_cache_key(source: str, path: Path | None = None) -> str:
    """Cache key for a compiled template: content hash, plus path when known.

    Identical source at the same path always maps to the same key, so it is
    compiled at most once per view context.
    """
    digest = hashlib.sha256(source.encode("utf-8")).hexdigest()
    if path is None:
        return f"_{digest}"
    return f"_{digest}__{_NON_ALPHA.sub('_', str(path))}"


class JinjaRenderer:
    """Compiles the body as a Jinja2 template and renders it.

    The template sees the view context's :meth:`~ViewContext.namespace`
    (``routes``, ``layouts``, ``assets``, ``contents``, ``locals``,
    ``frontmatter``, ``input``, ``render``, ``capture``, helpers and the input
    variables themselves).  When a continuation is supplied it is exposed as
    ``caller``, so layouts write ``{{ caller() }}`` where the content goes.

    Output is not autoescaped and a trailing newline is preserved.  Undefined
    names raise instead of rendering as empty strings.

    Args:
        **environment_options: Extra ``jinja2.Environment`` options.

    """

    __slots__ = ("_environment",)

    def __init__(self, **environment_options: Any) -> None:
        options: dict[str, Any] = {
            "autoescape": False,
            "keep_trailing_newline": True,
            "undefined": jinja2.StrictUndefined,
        }
        options.update(environment_options)
        self._environment = jinja2.Environment(**options)

    @property
    def environment(self) -> jinja2.Environment:
        return self._environment

    def __call__(
        self,
        source: str,
        view_context: ViewContext,
        *,
        path: Path | None = None,
        caller: Continuation | None = None,
    ) -> str:
        template = self._compile(source, view_context, path)
        variables = view_context.namespace()
        if caller is not None:
            variables["caller"] = caller
        return template.render(variables)

    def _compile(
        self,
        source: str,
        view_context: ViewContext,
        path: Path | None,
    ) -> jinja2.Template:
        key = template_cache_key(source, path)
        template = view_context.compiled_templates.get(key)
        if template is None:
            template = self._environment.from_string(source)
            view_context.compiled_templates[key] = template
        return template


class MarkdownRenderer:
    """Converts Markdown to HTML with Python-Markdown.

    Ignores the view context and any continuation.

    Args:
        extensions: Python-Markdown extension names.

    """

    __slots__ = ("_extensions",)

    def __init__(self, extensions: Sequence[str] = ("tables", "fenced_code")) -> None:
        self._extensions = list(extensions)

    def __call__(
        self,
        source: str,
        view_context: ViewContext,
        *,
        path: Path | None = None,
        caller: Continuation | None = None,
    ) -> str:
        return markdown.markdown(source, extensions=self._extensions)


# Extension -> renderer factory used when a site does not configure its own
DEFAULT_GUESSES: dict[str, Any] = {
    "j2": JinjaRenderer,
    "jinja": JinjaRenderer,
    "md": MarkdownRenderer,
    "markdown": MarkdownRenderer,
}

"""Renderer guessing from chained file extensions.

``post.md.j2`` carries two extensions.  They are walked outermost first
(``j2`` then ``md``), so the Jinja renderer lands first in the list and runs
first, handing its output to Markdown.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from pathlib import Path
from typing import Any


def _is_factory(guess: object) -> bool:
    """True for classes and callables whose signature fixes zero positional args.

    Renderer instances always accept ``(source, view_context)``; a callable
    taking ``*args`` could be either and is kept as a renderer.
    """
    if isinstance(guess, type):
        return True
    if not callable(guess):
        return False
    try:
        signature = inspect.signature(guess)
    except (TypeError, ValueError):
        return False
    return not any(
        param.kind is param.VAR_POSITIONAL
        or (
            param.default is param.empty
            and param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
        )
        for param in signature.parameters.values()
    )


class Guesser:
    """Maps a path to the renderers implied by its extensions.

    Args:
        registry: Extension (without dot) -> renderer instance or
            zero-argument renderer factory.  Factories are classes or
            callables without positional parameters and are called on every
            guess.  Anything accepting positional arguments, ``*args``
            included, is used as the renderer itself.

    """

    __slots__ = ("_registry",)

    def __init__(self, registry: Mapping[str, Any]) -> None:
        self._registry = dict(registry)

    def __call__(self, path: str | Path) -> list[Any]:
        extensions = Path(path).name.split(".")[1:]

        renderers: list[Any] = []
        for extension in reversed(extensions):
            if extension not in self._registry:
                continue
            guess = self._registry[extension]
            if _is_factory(guess):
                guess = guess()
            renderers.append(guess)

        return renderers

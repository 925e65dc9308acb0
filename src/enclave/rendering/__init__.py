"""Rendering layer — renderer guessing, render chains and view contexts."""

from enclave.rendering.chain import RenderChain
from enclave.rendering.guesser import Guesser
from enclave.rendering.renderers import (
    DEFAULT_GUESSES,
    JinjaRenderer,
    MarkdownRenderer,
    Renderer,
)
from enclave.rendering.view_context import ViewContext

__all__ = [
    "DEFAULT_GUESSES",
    "Guesser",
    "JinjaRenderer",
    "MarkdownRenderer",
    "RenderChain",
    "Renderer",
    "ViewContext",
]

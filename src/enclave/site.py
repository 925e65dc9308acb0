"""Site — the blob registries and route map for one compilation.

A site is built in one phase: the rules callable registers blobs and assigns
routes, ``"guess"`` renderers are resolved from file extensions, and then
every registry and the route map are closed for the rest of the run.

Example::

    site = Site(config)

    @site.rules
    def rules(*, assets, layouts, contents, routes):
        assets.register("application.js", entrypoint=True)
        default = layouts.register("default.html.j2")
        routes["/"] = contents.register("index.html.j2", layout=default)

"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from enclave._types import ViewContextHelper
from enclave.config import EnclaveConfig
from enclave.content.blobs import GUESS, Asset, Content, Layout
from enclave.content.registry import BlobRegistry
from enclave.content.routes import RouteIdentifiers
from enclave.rendering.guesser import Guesser
from enclave.rendering.renderers import DEFAULT_GUESSES


class Site:
    """Registries, routes and rendering options for one site.

    Args:
        config: Frozen site configuration.
        view_context_helpers: Helpers applied, in order, to every view context.
        guesses: Extension -> renderer (or factory) map used for ``"guess"``.
            Defaults to :data:`~enclave.rendering.renderers.DEFAULT_GUESSES`.

    """

    def __init__(
        self,
        config: EnclaveConfig,
        *,
        view_context_helpers: Sequence[ViewContextHelper] = (),
        guesses: Mapping[str, Any] | None = None,
    ) -> None:
        self._config = config
        self.view_context_helpers: list[ViewContextHelper] = list(view_context_helpers)
        self.guesses: dict[str, Any] = dict(DEFAULT_GUESSES if guesses is None else guesses)

        self._route_identifiers = RouteIdentifiers()
        self._asset_blobs: BlobRegistry[Asset] = BlobRegistry(config.assets_path, Asset)
        self._content_blobs: BlobRegistry[Content] = BlobRegistry(config.contents_path, Content)
        self._layout_blobs: BlobRegistry[Layout] = BlobRegistry(config.layouts_path, Layout)

    @property
    def config(self) -> EnclaveConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._config.root

    @property
    def route_identifiers(self) -> RouteIdentifiers:
        return self._route_identifiers

    @property
    def asset_blobs(self) -> BlobRegistry[Asset]:
        return self._asset_blobs

    @property
    def content_blobs(self) -> BlobRegistry[Content]:
        return self._content_blobs

    @property
    def layout_blobs(self) -> BlobRegistry[Layout]:
        return self._layout_blobs

    def rules(self, define: Callable[..., object]) -> Callable[..., object]:
        """Run the site's build phase, then close everything.

        *define* is called with ``assets``, ``layouts``, ``contents`` and
        ``routes`` keyword arguments.  Returns *define* so this method also
        works as a decorator.
        """
        define(
            assets=self._asset_blobs,
            layouts=self._layout_blobs,
            contents=self._content_blobs,
            routes=self._route_identifiers,
        )

        guesser = Guesser(self.guesses)
        _guess_renderers(guesser, self._layout_blobs)
        _guess_renderers(guesser, self._content_blobs)

        self._asset_blobs.close()
        self._layout_blobs.close()
        self._content_blobs.close()
        self._route_identifiers.close()

        return define


def _guess_renderers(guesser: Guesser, blobs: BlobRegistry[Any]) -> None:
    """Replace each ``"guess"`` placeholder with the renderers its path implies."""
    for blob in blobs:
        resolved: list[Any] = []
        for renderer in blob.renderers:
            if isinstance(renderer, str) and renderer == GUESS:
                resolved.extend(guesser(blob.input_path))
            else:
                resolved.append(renderer)
        blob.renderers = resolved

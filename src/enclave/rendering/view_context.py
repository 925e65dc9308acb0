"""View context — everything a template can see during one render.

One instance backs one top-level content render.  When the content has a
layout, the layout renders inside the *same* instance, so the content's
locals and frontmatter stay visible to it.

Helpers extend a context with extra functions::

    def asset_url(view, route):
        return view.routes[route].url_path

    view.extend({"asset_url": asset_url})
    view.asset_url("/assets/application.js")

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from typing import TYPE_CHECKING, Any

from enclave._types import Variables
from enclave.rendering.chain import RenderChain

if TYPE_CHECKING:
    from enclave.content.blobs import Asset, Content, Layout, Renderable
    from enclave.content.registry import BlobRegistry
    from enclave.content.routes import RouteIdentifiers


class ViewContext:
    """Read-only view over the site plus the active blob's variables.

    Args:
        routes: Route identifier map.
        layouts: Layout registry.
        assets: Asset registry.
        contents: Content registry.
        locals: The active content's locals.
        frontmatter: The active content's parsed frontmatter.

    """

    def __init__(
        self,
        *,
        routes: RouteIdentifiers,
        layouts: BlobRegistry[Layout],
        assets: BlobRegistry[Asset],
        contents: BlobRegistry[Content],
        locals: Mapping[str, Any] | None = None,
        frontmatter: Mapping[str, Any] | None = None,
    ) -> None:
        self._routes = routes
        self._layouts = layouts
        self._assets = assets
        self._contents = contents
        self._locals = dict(locals or {})
        self._frontmatter = dict(frontmatter or {})
        self._helpers: dict[str, Callable[..., Any]] = {}
        self._buffers: list[list[str]] = []
        # Compiled templates keyed by content hash, filled by template renderers
        self.compiled_templates: dict[str, Any] = {}

    @property
    def routes(self) -> RouteIdentifiers:
        return self._routes

    @property
    def layouts(self) -> BlobRegistry[Layout]:
        return self._layouts

    @property
    def assets(self) -> BlobRegistry[Asset]:
        return self._assets

    @property
    def contents(self) -> BlobRegistry[Content]:
        return self._contents

    @property
    def locals(self) -> Variables:
        return self._locals

    @property
    def frontmatter(self) -> Variables:
        return self._frontmatter

    @property
    def input(self) -> Variables:
        """Frontmatter merged with locals; locals win."""
        return {**self._frontmatter, **self._locals}

    @property
    def helpers(self) -> dict[str, Callable[..., Any]]:
        """Bound helper functions added with :meth:`extend`."""
        return dict(self._helpers)

    def __getattr__(self, name: str) -> Any:
        helpers = self.__dict__.get("_helpers", {})
        if name in helpers:
            return helpers[name]
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)

    def extend(self, helper: Mapping[str, Callable[..., Any]]) -> None:
        """Bind each helper function to this context by name.

        Functions receive the view context as their first argument.  Later
        helpers replace earlier ones with the same name.
        """
        for name, func in helper.items():
            self._helpers[name] = partial(func, self)

    # ----- Capture -----

    def write(self, text: object) -> None:
        """Append *text* to the innermost active capture buffer."""
        if not self._buffers:
            msg = "write() called outside capture()"
            raise RuntimeError(msg)
        self._buffers[-1].append(str(text))

    def capture(self, block: Callable[..., object], *args: Any, **kwargs: Any) -> str:
        """Run *block* against an isolated buffer and return what it produced.

        The result is everything written via :meth:`write` during the block,
        followed by the block's own return value when it is not None.  The
        enclosing buffer is restored even if the block raises.
        """
        self._buffers.append([])
        try:
            result = block(*args, **kwargs)
            written = "".join(self._buffers[-1])
        finally:
            self._buffers.pop()
        if result is None:
            return written
        return written + str(result)

    # ----- Rendering -----

    def render(
        self,
        blob: Renderable,
        layout: Renderable | None = None,
        caller: Callable[[], object] | None = None,
    ) -> str:
        """Render *blob*, optionally wrapped in *layout*.

        *caller* is a block (e.g. the body of a Jinja ``{% call %}``) whose
        captured output the blob can pull in as its yielded content.
        """
        chain = RenderChain(
            body=blob.body,
            path=blob.input_path,
            renderers=blob.renderers,
            view_context=self,
        )
        if caller is not None:
            rendered = chain(lambda: self.capture(caller))
        else:
            rendered = chain()
        rendered = rendered or ""

        if layout is None:
            return rendered

        layout_chain = RenderChain(
            body=layout.body,
            path=layout.input_path,
            renderers=layout.renderers,
            view_context=self,
        )
        return layout_chain(lambda: rendered)

    def namespace(self) -> dict[str, Any]:
        """Variables exposed to templates.

        Input variables come first so the fixed names always win.
        """
        return {
            **self.input,
            **self._helpers,
            "routes": self._routes,
            "layouts": self._layouts,
            "assets": self._assets,
            "contents": self._contents,
            "locals": self._locals,
            "frontmatter": self._frontmatter,
            "input": self.input,
            "render": self.render,
            "capture": self.capture,
            "view": self,
        }

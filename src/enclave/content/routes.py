"""Route identifiers — normalized URL paths bound to content and asset blobs.

The map holds *identifiers*, not necessarily final URLs: an asset assigned to
``/assets/application.js`` keeps that identifier even after the bundler
rewrites its ``url_path`` to a hashed output location.
"""

from __future__ import annotations

from collections.abc import Iterator

from enclave._errors import DuplicateRoute, RouteMapClosed, UndefinedRoute, UnroutableBlob
from enclave._types import RoutePath
from enclave.content.blobs import Asset, Content, Routable
from enclave.paths import normalize_route


class RouteIdentifiers:
    """Append-only, duplicate-free map from route to blob."""

    __slots__ = ("_closed", "_lookup")

    def __init__(self) -> None:
        self._lookup: dict[RoutePath, Content | Asset] = {}
        self._closed = False

    @staticmethod
    def normalize(route: RoutePath) -> RoutePath:
        return normalize_route(route)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Reject further assignments."""
        self._closed = True

    def assign(self, route: RoutePath, blob: Content | Asset) -> Content | Asset:
        """Bind *route* to *blob* and set the blob's ``url_path``.

        Raises:
            RouteMapClosed: If the map has been closed.
            DuplicateRoute: If the normalized route is already bound.
            UnroutableBlob: If *blob* cannot carry a URL path.

        """
        if self._closed:
            msg = f"Can't add route {route!r} after the initial setup"
            raise RouteMapClosed(msg)

        route = normalize_route(route)
        if route in self._lookup:
            msg = f"Route already defined: {route!r}"
            raise DuplicateRoute(msg)

        if not isinstance(blob, Routable):
            msg = f"Can't route {route!r} to a {type(blob).__name__}"
            raise UnroutableBlob(msg)

        blob.url_path = route
        self._lookup[route] = blob
        return blob

    def resolve(self, route: RoutePath) -> Content | Asset:
        """Return the blob bound to *route*.

        Raises:
            UndefinedRoute: If nothing is bound to the normalized route.

        """
        route = normalize_route(route)
        try:
            return self._lookup[route]
        except KeyError:
            msg = f"Route is not defined: {route!r}"
            raise UndefinedRoute(msg) from None

    def __setitem__(self, route: RoutePath, blob: Content | Asset) -> None:
        self.assign(route, blob)

    def __getitem__(self, route: RoutePath) -> Content | Asset:
        return self.resolve(route)

    def __contains__(self, route: object) -> bool:
        return isinstance(route, str) and normalize_route(route) in self._lookup

    def __iter__(self) -> Iterator[RoutePath]:
        return iter(list(self._lookup))

    def __len__(self) -> int:
        return len(self._lookup)

    def items(self) -> list[tuple[RoutePath, Content | Asset]]:
        """``(route, blob)`` pairs in assignment order."""
        return list(self._lookup.items())

    def contents(self) -> list[Content]:
        """Routed content blobs in assignment order."""
        return [blob for blob in self._lookup.values() if isinstance(blob, Content)]

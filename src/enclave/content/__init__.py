"""Content layer — tracked source blobs, their registries and routes.

Handles frontmatter parsing, blob registration by path or pattern, and the
route identifier map that binds URL paths to blobs.
"""

from enclave.content.blobs import GUESS, Asset, Content, Layout
from enclave.content.frontmatter import parse_frontmatter
from enclave.content.registry import BlobRegistry
from enclave.content.routes import RouteIdentifiers

__all__ = [
    "GUESS",
    "Asset",
    "BlobRegistry",
    "Content",
    "Layout",
    "RouteIdentifiers",
    "parse_frontmatter",
]

"""Shared type definitions for enclave."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from pathlib import Path

# Normalized URL path (e.g., "/", "/posts/", "/resume.pdf")
type RoutePath = str

# Absolute path of a tracked source file
type InputPath = Path

# Frontmatter header or content locals
type Variables = dict[str, Any]

# Continuation handed to a renderer: returns the yielded (nested) body
type Continuation = Callable[[], str]

# View-context helper: function name -> function(view_context, *args, **kwargs)
type ViewContextHelper = Mapping[str, Callable[..., Any]]

# Outcome of a single output file during compilation
type WriteStatus = Literal["written", "unchanged", "outside_root", "bundled"]

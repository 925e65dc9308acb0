"""Frontmatter parsing — split a YAML header block from a content body.

A header is recognised only at the very start of the text::

    ---
    title: Hello
    ---

    Body text.

Anything that does not look like a well-formed header is treated as body.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from enclave._errors import FrontmatterParseError

_FRONTMATTER = re.compile(
    r"""\A
    (?:
        (?P<frontmatter>^---\n.*?)
        ^---\n
    )?
    (?P<body>.*)
    \Z""",
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)


def parse_frontmatter(text: str, *, strip: bool = True) -> tuple[dict[str, Any], str]:
    """Return ``(header, body)`` for *text*.

    Without a header the text is returned verbatim as the body.  With a
    header the body is stripped of surrounding whitespace unless *strip* is
    False.  A header that fails to parse is ignored (the whole text becomes
    the body); this function never raises for malformed input.

    """
    match = _FRONTMATTER.match(text)
    if match is None or match["frontmatter"] is None:
        return {}, text

    try:
        header = _load_header(match["frontmatter"])
    except FrontmatterParseError:
        return {}, text

    body = match["body"] or ""
    if strip:
        body = body.strip()

    return header, body


def _load_header(source: str) -> dict[str, Any]:
    """Parse a header block into a mapping with string keys.

    Raises:
        FrontmatterParseError: If the block is not valid YAML or is not a mapping.

    """
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        msg = f"Invalid frontmatter: {exc}"
        raise FrontmatterParseError(msg) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Frontmatter must be a mapping, got {type(data).__name__}"
        raise FrontmatterParseError(msg)

    # Keys that collide once stringified keep the last value, like YAML duplicates
    return {str(key): value for key, value in data.items()}

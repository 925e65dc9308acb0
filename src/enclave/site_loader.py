"""Site loader — import a site's ``site.py`` rules module.

The module lives at the site root and must define::

    def rules(*, assets, layouts, contents, routes):
        ...

It may also export:

    VIEW_CONTEXT_HELPERS: sequence of mappings  — helpers for every view context
    GUESSES: mapping                            — extension -> renderer map
"""

import importlib.util
import inspect
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from enclave._errors import ConfigError
from enclave._types import ViewContextHelper
from enclave.config import EnclaveConfig
from enclave.site import Site

SITE_MODULE = "site.py"

_RULES_KEYWORDS = frozenset({"assets", "layouts", "contents", "routes"})


@dataclass(frozen=True, slots=True)
class SiteDefinition:
    """Everything a ``site.py`` module contributes.

    Attributes:
        rules: Build-phase callable.
        view_context_helpers: Helpers applied to every view context.
        guesses: Renderer guesses, or None for the defaults.
        source: Filesystem path to the module.

    """

    rules: Callable[..., object]
    view_context_helpers: tuple[ViewContextHelper, ...]
    guesses: Mapping[str, Any] | None
    source: Path


def load_site_definition(root: Path) -> SiteDefinition:
    """Import ``root/site.py`` and extract its definition.

    Raises:
        ConfigError: If the module is missing, fails to import, or has no
            usable ``rules`` callable.

    """
    source = root / SITE_MODULE
    if not source.is_file():
        msg = f"No {SITE_MODULE} found in {root}"
        raise ConfigError(msg)

    module = _load_module(source)

    rules = getattr(module, "rules", None)
    if rules is None or not callable(rules):
        msg = f"{source} must define a callable 'rules'"
        raise ConfigError(msg)
    _validate_rules(rules, source)

    helpers = getattr(module, "VIEW_CONTEXT_HELPERS", ())
    if isinstance(helpers, Mapping) or not isinstance(helpers, Sequence):
        msg = f"{source}: VIEW_CONTEXT_HELPERS must be a sequence of mappings"
        raise ConfigError(msg)

    guesses = getattr(module, "GUESSES", None)
    if guesses is not None and not isinstance(guesses, Mapping):
        msg = f"{source}: GUESSES must be a mapping, got {type(guesses).__name__}"
        raise ConfigError(msg)

    return SiteDefinition(
        rules=rules,
        view_context_helpers=tuple(helpers),
        guesses=guesses,
        source=source,
    )


def build_site(config: EnclaveConfig, definition: SiteDefinition) -> Site:
    """Create a site from *definition* and run its rules."""
    site = Site(
        config,
        view_context_helpers=definition.view_context_helpers,
        guesses=definition.guesses,
    )
    site.rules(definition.rules)
    return site


def _load_module(source: Path) -> object:
    """Import a Python file as a module without touching ``sys.path``."""
    module_name = f"enclave_site_{abs(hash(str(source.resolve())))}"

    spec = importlib.util.spec_from_file_location(module_name, source)
    if spec is None or spec.loader is None:
        msg = f"Cannot load site module {source}"
        raise ConfigError(msg)

    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load site module {source}: {exc}"
        raise ConfigError(msg) from exc

    return module


def _validate_rules(rules: Callable[..., object], source: Path) -> None:
    """Check that ``rules`` accepts the four registry keyword arguments."""
    try:
        signature = inspect.signature(rules)
    except (TypeError, ValueError):
        return

    params = signature.parameters.values()
    if any(p.kind is p.VAR_KEYWORD for p in params):
        return

    accepted = {
        p.name for p in params
        if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
    }
    missing = sorted(_RULES_KEYWORDS - accepted)
    if missing:
        msg = f"'rules' in {source} must accept keyword arguments: {', '.join(missing)}"
        raise ConfigError(msg)

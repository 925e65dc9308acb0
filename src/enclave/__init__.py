"""Enclave — a static-site compiler.

Reads content, layout and asset sources, binds them to routes, renders them
through composable renderer chains, and writes a deterministic output tree.
Asset bundling is delegated to an external bundler (Parcel by default).

Quick start::

    import enclave

    enclave.build("my-site/")

Programmatic use::

    from enclave import Compiler, EnclaveConfig, Site

    config = EnclaveConfig(root="my-site/", output_root="public")
    site = Site(config)
    site.rules(my_rules)
    Compiler(config).compile_everything(site)

"""

__version__ = "0.1.0-dev"
__all__ = [
    "Compiler",
    "EnclaveConfig",
    "Site",
    "__version__",
    "build",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import enclave`` fast while providing a clean top-level API.
    """
    if name == "EnclaveConfig":
        from enclave.config import EnclaveConfig

        return EnclaveConfig

    if name == "Site":
        from enclave.site import Site

        return Site

    if name == "Compiler":
        from enclave.export.compiler import Compiler

        return Compiler

    if name == "build":
        from enclave.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

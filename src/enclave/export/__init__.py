"""Export layer — asset bundling and output generation.

Compiles a site's routed contents into static files and reconciles the
external bundler's output with tracked assets.
"""

from enclave.export.bundler import BundledFile, build_command, parse_bundler_report
from enclave.export.compiler import CompiledFile, CompileResult, Compiler

__all__ = [
    "BundledFile",
    "CompileResult",
    "CompiledFile",
    "Compiler",
    "build_command",
    "parse_bundler_report",
]

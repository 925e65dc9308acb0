"""Compiler — bundle assets, render contents, write the output tree.

Pipeline order (``compile_everything``):
    1. Ensure the output root exists
    2. Run the asset bundler and reconcile its report with tracked assets
    3. Render every routed content (with its layout) and write it out

Assets go first because content templates usually reference the compiled
asset URLs.

Thread Safety:
    ``compile_everything`` holds one lock for the whole run, so concurrent
    calls on the same compiler serialise.  Use separate compilers for
    separate sites.

"""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from enclave._errors import CompileError, EnclaveError, PathDoesNotExist
from enclave.content.blobs import renderer_names
from enclave.export.bundler import build_command, parse_bundler_report, run_bundler
from enclave.observability.collector import BuildCollector
from enclave.paths import clean, concat, contains
from enclave.rendering.view_context import ViewContext

if TYPE_CHECKING:
    from enclave._types import WriteStatus
    from enclave.config import EnclaveConfig
    from enclave.content.blobs import Content
    from enclave.site import Site


@dataclass(frozen=True, slots=True)
class CompiledFile:
    """Record of a single output file handled during a compile.

    Attributes:
        source_path: Route (contents) or absolute input path (assets).
        output_path: Absolute filesystem path of the output file.
        source_type: Category of the file.
        status: ``written``, ``unchanged``, ``outside_root`` or ``bundled``.
        size_bytes: Size of the rendered or bundled output.
        duration_ms: Time taken to render/reconcile and write this file.

    """

    source_path: str
    output_path: Path
    source_type: Literal["content", "asset"]
    status: WriteStatus
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Aggregate result of a full compile.

    Attributes:
        files: All files handled during the compile.
        total_pages: Number of routed contents processed.
        total_assets: Number of tracked assets reconciled with bundler output.
        written: Number of files written to disk.
        duration_ms: Total wall-clock time for the compile.
        output_dir: Absolute path to the output root.

    """

    files: tuple[CompiledFile, ...]
    total_pages: int
    total_assets: int
    written: int
    duration_ms: float
    output_dir: Path


class Compiler:
    """Compiles a :class:`~enclave.site.Site` into its output root.

    Args:
        config: Frozen site configuration.
        collector: Event collector; a fresh one is created when omitted.
        verbose: Print progress to stderr (only used when creating the
            collector).

    """

    def __init__(
        self,
        config: EnclaveConfig,
        *,
        collector: BuildCollector | None = None,
        verbose: bool = False,
    ) -> None:
        self._config = config
        self._collector = collector if collector is not None else BuildCollector(verbose=verbose)
        self._lock = threading.Lock()

    @property
    def collector(self) -> BuildCollector:
        return self._collector

    def compile_everything(self, site: Site) -> CompileResult:
        """Compile assets, then contents.  Any error aborts the whole run.

        Raises:
            PathDoesNotExist: If the output root's parent is missing.
            AssetCompilationFailed: If the bundler fails.
            AssetReportUnparseable: If the bundler's report cannot be parsed.
            CompileError: If a content fails to render.

        """
        with self._lock:
            start = time.perf_counter()

            asset_files = self.compile_assets(site)
            content_files = self.compile_contents(site)

            files = (*asset_files, *content_files)
            written = sum(1 for f in content_files if f.status == "written")
            elapsed = (time.perf_counter() - start) * 1000

            self._collector.record_compile(
                pages=len(content_files),
                assets=len(asset_files),
                written=written,
                duration_ms=elapsed,
            )

            return CompileResult(
                files=files,
                total_pages=len(content_files),
                total_assets=len(asset_files),
                written=written,
                duration_ms=elapsed,
                output_dir=self._config.output_root_path,
            )

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def compile_assets(self, site: Site) -> list[CompiledFile]:
        """Run the bundler over entrypoint assets and reconcile its report.

        Tracked assets named as inputs in the report get their ``url_path``,
        ``output_path`` and ``body`` set; all other report lines are ignored.
        Nothing runs when no asset is an entrypoint.

        """
        self._create_destination_directory()

        entrypoints = [asset.input_path for asset in site.asset_blobs if asset.entrypoint]
        if not entrypoints:
            return []

        t0 = time.perf_counter()
        command = build_command(self._config, entrypoints)
        report = run_bundler(command, cwd=self._config.root)
        bundled = parse_bundler_report(report)

        root = self._config.root
        output_root = self._config.output_root_path
        results: list[CompiledFile] = []

        for bundle in bundled:
            output_path = clean(concat(root, bundle.output))
            url_path = Path(os.path.relpath(output_path, output_root)).as_posix()

            for reported_input in bundle.inputs:
                asset = site.asset_blobs.get(clean(concat(root, reported_input)))
                if asset is None:
                    continue

                t1 = time.perf_counter()
                asset.url_path = url_path
                asset.output_path = output_path
                asset.body = output_path.read_text(encoding="utf-8", errors="replace")

                results.append(CompiledFile(
                    source_path=str(asset.input_path),
                    output_path=output_path,
                    source_type="asset",
                    status="bundled",
                    size_bytes=output_path.stat().st_size,
                    duration_ms=(time.perf_counter() - t1) * 1000,
                ))
                self._collector.record_asset(
                    str(asset.input_path), str(output_path), asset.url_path or "",
                )

        self._collector.record_bundle(
            command,
            entrypoints=len(entrypoints),
            outputs=len(bundled),
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

        return results

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def compile_contents(self, site: Site) -> list[CompiledFile]:
        """Render and write every routed content, in route order."""
        self._create_destination_directory()
        return [self._compile_content(site, content) for content in site.route_identifiers.contents()]

    def _compile_content(self, site: Site, content: Content) -> CompiledFile:
        t0 = time.perf_counter()
        route = content.url_path or "/"

        try:
            view_context = ViewContext(
                routes=site.route_identifiers,
                layouts=site.layout_blobs,
                assets=site.asset_blobs,
                contents=site.content_blobs,
                locals=content.locals,
                frontmatter=content.frontmatter,
            )
            for helper in site.view_context_helpers:
                view_context.extend(helper)
            rendered = view_context.render(content, layout=content.layout)
        except EnclaveError:
            raise
        except Exception as exc:
            msg = f"Failed to render content {route!r} ({content.input_path}): {exc}"
            raise CompileError(msg) from exc

        self._collector.record_render(
            route,
            str(content.input_path),
            renderers=renderer_names(content.renderers),
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

        content.output_path = self._destination_for(route)
        status, size = self._write(content.output_path, rendered)
        elapsed = (time.perf_counter() - t0) * 1000

        kind = "write" if status == "written" else f"skip_{status}"
        self._collector.record_build(
            kind, route, str(content.output_path), duration_ms=elapsed,
        )

        return CompiledFile(
            source_path=route,
            output_path=content.output_path,
            source_type="content",
            status=status,
            size_bytes=size,
            duration_ms=elapsed,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _destination_for(self, url_path: str) -> Path:
        """Map a URL path to an output file.

        ``/``          -> ``output/index.html``
        ``/about/``    -> ``output/about/index.html``
        ``/resume.pdf`` -> ``output/resume.pdf``

        """
        output_root = self._config.output_root_path
        if url_path.endswith("/"):
            return concat(output_root, url_path, self._config.output_directory_index)
        return concat(output_root, url_path)

    def _write(self, destination: Path, rendered: str) -> tuple[WriteStatus, int]:
        """Write *rendered* unless it would escape the output root or is unchanged."""
        data = rendered.encode("utf-8", errors="surrogateescape")

        if not contains(self._config.output_root_path, destination):
            return "outside_root", 0

        if destination.is_file() and destination.read_bytes() == data:
            return "unchanged", len(data)

        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
        return "written", len(data)

    def _create_destination_directory(self) -> None:
        destination = self._config.output_root_path
        if destination.exists():
            return

        if not destination.parent.exists():
            msg = f"Destination's parent path does not exist: {destination.parent}"
            raise PathDoesNotExist(msg)

        destination.mkdir()

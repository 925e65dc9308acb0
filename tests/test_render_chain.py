"""Tests for render chains, view contexts and the built-in renderers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2
import pytest

from enclave._errors import CompileError
from enclave.content.blobs import GUESS, Asset, Content, Layout
from enclave.content.registry import BlobRegistry
from enclave.content.routes import RouteIdentifiers
from enclave.rendering.chain import RenderChain
from enclave.rendering.renderers import JinjaRenderer, MarkdownRenderer, template_cache_key
from enclave.rendering.view_context import ViewContext


class Suffix:
    """Renderer that appends a marker and records what it saw."""

    def __init__(self, marker: str) -> None:
        self.marker = marker
        self.callers: list[Any] = []

    def __call__(self, source: str, view_context: Any, *, path: Any = None, caller: Any = None) -> str:
        self.callers.append(caller)
        return source + self.marker


def _view(tmp_path: Path, **variables: Any) -> ViewContext:
    return ViewContext(
        routes=RouteIdentifiers(),
        layouts=BlobRegistry(tmp_path / "layouts", Layout),
        assets=BlobRegistry(tmp_path / "assets", Asset),
        contents=BlobRegistry(tmp_path / "contents", Content),
        **variables,
    )


@pytest.fixture
def view(tmp_path: Path) -> ViewContext:
    return _view(tmp_path)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# RenderChain
# ---------------------------------------------------------------------------


class TestRenderChain:
    def test_applies_renderers_first_to_last(self, view: ViewContext) -> None:
        chain = RenderChain(
            body="body", path=None, renderers=[Suffix("-a"), Suffix("-b")], view_context=view,
        )
        assert chain() == "body-a-b"

    def test_empty_chain_returns_body(self, view: ViewContext) -> None:
        assert RenderChain(body="as is", path=None, renderers=[], view_context=view)() == "as is"

    def test_every_renderer_receives_the_continuation(self, view: ViewContext) -> None:
        first, second = Suffix("1"), Suffix("2")
        chain = RenderChain(body="", path=None, renderers=[first, second], view_context=view)

        def continuation() -> str:
            return "inner"

        chain(continuation)
        assert first.callers == [continuation]
        assert second.callers == [continuation]

    def test_chain_is_restartable(self, view: ViewContext) -> None:
        chain = RenderChain(body="x", path=None, renderers=[Suffix("!")], view_context=view)
        assert chain() == chain() == "x!"

    def test_unresolved_guess_is_a_compile_error(self, view: ViewContext) -> None:
        chain = RenderChain(body="x", path=Path("/a.txt"), renderers=[GUESS], view_context=view)
        with pytest.raises(CompileError, match="guess"):
            chain()


# ---------------------------------------------------------------------------
# ViewContext capture and helpers
# ---------------------------------------------------------------------------


class TestCapture:
    def test_collects_writes_and_return_value(self, view: ViewContext) -> None:
        def block() -> str:
            view.write("a")
            view.write(1)
            return "b"

        assert view.capture(block) == "a1b"

    def test_none_return_value_is_dropped(self, view: ViewContext) -> None:
        assert view.capture(lambda: view.write("only")) == "only"

    def test_passes_arguments(self, view: ViewContext) -> None:
        assert view.capture(lambda x, *, y: f"{x}{y}", "a", y="b") == "ab"

    def test_nested_captures_are_isolated(self, view: ViewContext) -> None:
        def outer() -> None:
            view.write("<")
            inner = view.capture(lambda: view.write("inner"))
            view.write(inner.upper())
            view.write(">")

        assert view.capture(outer) == "<INNER>"

    def test_buffer_restored_after_error(self, view: ViewContext) -> None:
        def failing() -> None:
            view.write("lost")
            raise ValueError("boom")

        def outer() -> None:
            view.write("kept ")
            with pytest.raises(ValueError, match="boom"):
                view.capture(failing)
            view.write("still")

        assert view.capture(outer) == "kept still"

    def test_write_outside_capture(self, view: ViewContext) -> None:
        with pytest.raises(RuntimeError):
            view.write("nowhere")


class TestHelpers:
    def test_helpers_receive_the_view_context(self, view: ViewContext) -> None:
        def whoami(ctx: ViewContext, suffix: str) -> str:
            return f"{type(ctx).__name__}{suffix}"

        view.extend({"whoami": whoami})
        assert view.whoami("!") == "ViewContext!"
        assert "whoami" in view.helpers

    def test_later_helpers_replace_earlier(self, view: ViewContext) -> None:
        view.extend({"name": lambda ctx: "first"})
        view.extend({"name": lambda ctx: "second"})
        assert view.name() == "second"

    def test_unknown_attribute(self, view: ViewContext) -> None:
        with pytest.raises(AttributeError, match="nope"):
            view.nope  # noqa: B018

    def test_helpers_can_resolve_routes(self, tmp_path: Path) -> None:
        view = _view(tmp_path)
        script = Asset(input_path=tmp_path / "assets" / "app.js")
        view.routes["/assets/app.js"] = script
        script.url_path = "/assets/app.1a2b.js"
        view.extend({"asset_url": lambda ctx, route: ctx.routes[route].url_path})
        assert view.asset_url("assets/app.js") == "/assets/app.1a2b.js"


class TestNamespace:
    def test_locals_win_over_frontmatter(self, tmp_path: Path) -> None:
        view = _view(tmp_path, locals={"title": "local"}, frontmatter={"title": "fm", "tag": "x"})
        assert view.input == {"title": "local", "tag": "x"}
        namespace = view.namespace()
        assert namespace["title"] == "local"
        assert namespace["tag"] == "x"

    def test_fixed_names_win_over_input(self, tmp_path: Path) -> None:
        view = _view(tmp_path, locals={"routes": "shadowed"})
        namespace = view.namespace()
        assert namespace["routes"] is view.routes
        assert namespace["locals"] == {"routes": "shadowed"}
        assert namespace["view"] is view


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


class TestJinjaRenderer:
    def test_renders_input_variables(self, tmp_path: Path) -> None:
        view = _view(tmp_path, locals={"name": "world"})
        assert JinjaRenderer()("hello {{ name }}\n", view, path=None) == "hello world\n"

    def test_no_autoescape(self, tmp_path: Path) -> None:
        view = _view(tmp_path, locals={"html": "<b>bold</b>"})
        assert JinjaRenderer()("{{ html }}", view, path=None) == "<b>bold</b>"

    def test_undefined_names_raise(self, view: ViewContext) -> None:
        with pytest.raises(jinja2.UndefinedError):
            JinjaRenderer()("{{ missing }}", view, path=None)

    def test_continuation_is_exposed_as_caller(self, view: ViewContext) -> None:
        rendered = JinjaRenderer()("<main>{{ caller() }}</main>", view, path=None, caller=lambda: "hi")
        assert rendered == "<main>hi</main>"

    def test_compiles_identical_source_once(
        self, view: ViewContext, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        renderer = JinjaRenderer()
        compiled: list[str] = []
        original = renderer.environment.from_string

        def counting(source: str, *args: Any, **kwargs: Any) -> jinja2.Template:
            compiled.append(source)
            return original(source, *args, **kwargs)

        monkeypatch.setattr(renderer.environment, "from_string", counting)
        path = Path("/site/contents/index.html.j2")
        for _ in range(3):
            assert renderer("{{ 1 + 1 }}", view, path=path) == "2"

        assert compiled == ["{{ 1 + 1 }}"]
        assert len(view.compiled_templates) == 1

    def test_cache_key_includes_path(self) -> None:
        key = template_cache_key("src", Path("/a/b.j2"))
        assert key.startswith("_")
        assert key.endswith("___a_b_j_")
        assert key != template_cache_key("src", Path("/a/c.j2"))
        assert template_cache_key("src") == template_cache_key("src")


class TestMarkdownRenderer:
    def test_converts_markdown(self, view: ViewContext) -> None:
        assert MarkdownRenderer()("# Hello", view, path=None) == "<h1>Hello</h1>"

    def test_fenced_code(self, view: ViewContext) -> None:
        rendered = MarkdownRenderer()("```\ncode\n```", view, path=None)
        assert "<code>code" in rendered


# ---------------------------------------------------------------------------
# ViewContext.render
# ---------------------------------------------------------------------------


class TestRender:
    def test_jinja_then_markdown(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "contents" / "post.md.j2", "# {{ title }}")
        blob = Content(input_path=path, renderers=[JinjaRenderer(), MarkdownRenderer()])
        view = _view(tmp_path, locals={"title": "Chained"})
        assert view.render(blob) == "<h1>Chained</h1>"

    def test_layout_wraps_content_and_shares_variables(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "contents" / "page.html.j2", "---\ntitle: Hi\n---\n<p>{{ title }}</p>")
        layout_path = _write(
            tmp_path / "layouts" / "default.html.j2",
            "<title>{{ frontmatter.title }}</title>{{ caller() }}",
        )
        blob = Content(input_path=path, renderers=[JinjaRenderer()])
        layout = Layout(input_path=layout_path, renderers=[JinjaRenderer()])
        view = _view(tmp_path, frontmatter=blob.frontmatter)

        assert view.render(blob, layout) == "<title>Hi</title><p>Hi</p>"

    def test_caller_block_is_captured(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "contents" / "_box.html.j2", "[{{ caller() }}]")
        blob = Content(input_path=path, renderers=[JinjaRenderer()])
        view = _view(tmp_path)

        def block() -> None:
            view.write("inside")

        assert view.render(blob, caller=block) == "[inside]"

    def test_empty_output_is_empty_string(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "contents" / "empty.txt", "")
        blob = Content(input_path=path, renderers=[])
        assert _view(tmp_path).render(blob) == ""

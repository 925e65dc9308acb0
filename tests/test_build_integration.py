"""Integration tests for ``enclave.build``.

Builds a realistic site from disk: ``enclave.yaml``, a ``site.py`` rules
module, layouts, Markdown posts with frontmatter, a partial and a bundled
asset (the bundler subprocess is replaced by a fake).
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from enclave._errors import ConfigError
from enclave.app import build


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def full_site(tmp_site: Path) -> Path:
    """Create a site with config, rules, layouts, posts and one asset."""
    (tmp_site / "enclave.yaml").write_text("output_root: public\nenv: test\n")

    (tmp_site / "site.py").write_text(textwrap.dedent("""
        def asset_url(view, route):
            return view.routes[route].url_path

        VIEW_CONTEXT_HELPERS = [{"asset_url": asset_url}]

        def rules(*, assets, layouts, contents, routes):
            routes["/assets/application.js"] = assets.register("application.js", entrypoint=True)

            default = layouts.register("default.html.j2")
            contents.register("_footer.html.j2")
            routes["/"] = contents.register("index.html.j2", layout=default)

            for post in contents.register_many(r"^posts/.*\\.md$"):
                post.layout = default
                routes[f"/posts/{post.input_path.stem}/"] = post
    """))

    (tmp_site / "layouts" / "default.html.j2").write_text(
        "<html><head><script src=\"{{ asset_url('/assets/application.js') }}\"></script>"
        "<title>{{ title }}</title></head>"
        "<body>{{ caller() }}"
        "{% call render(contents['_footer.html.j2']) %}{{ title }}{% endcall %}"
        "</body></html>\n"
    )
    (tmp_site / "contents" / "_footer.html.j2").write_text("<footer>{{ caller() }}</footer>")
    (tmp_site / "contents" / "index.html.j2").write_text(
        "---\ntitle: Home\n---\n<h1>{{ title }}</h1>"
    )
    posts = tmp_site / "contents" / "posts"
    posts.mkdir()
    (posts / "hello.md").write_text("---\ntitle: Hello\n---\n# Hello world\n")
    (posts / "second.md").write_text("---\ntitle: Second\n---\nJust *text*.\n")

    (tmp_site / "assets" / "application.js").write_text("console.log('hi')\n")
    return tmp_site


@pytest.fixture(autouse=True)
def fake_parcel(
    tmp_site: Path,
    report: Callable[..., str],
    bundler: Callable[..., Any],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("enclave.export.bundler.subprocess.run", bundler(
        tmp_site,
        report(("public/assets/application.9f86.js", ["assets/application.js"])),
        {"public/assets/application.9f86.js": "console.log('hi')"},
    ))


# ---------------------------------------------------------------------------
# Full pipeline tests
# ---------------------------------------------------------------------------


class TestBuild:
    def test_writes_every_route(self, full_site: Path) -> None:
        result = build(full_site)

        public = full_site / "public"
        assert (public / "index.html").is_file()
        assert (public / "posts" / "hello" / "index.html").is_file()
        assert (public / "posts" / "second" / "index.html").is_file()
        assert (public / "assets" / "application.9f86.js").is_file()
        assert not (public / "_footer.html").exists()

        assert result.total_pages == 3
        assert result.total_assets == 1
        assert result.written == 3
        assert result.output_dir == public

    def test_home_page(self, full_site: Path) -> None:
        build(full_site)
        html = (full_site / "public" / "index.html").read_text()
        assert html == (
            '<html><head><script src="/assets/application.9f86.js"></script>'
            "<title>Home</title></head>"
            "<body><h1>Home</h1><footer>Home</footer></body></html>\n"
        )

    def test_markdown_post(self, full_site: Path) -> None:
        build(full_site)
        html = (full_site / "public" / "posts" / "second" / "index.html").read_text()
        assert "<title>Second</title>" in html
        assert "<p>Just <em>text</em>.</p>" in html
        assert "<footer>Second</footer>" in html

    def test_rebuild_writes_nothing(self, full_site: Path) -> None:
        build(full_site)
        result = build(full_site)
        assert result.written == 0
        assert {f.status for f in result.files if f.source_type == "content"} == {"unchanged"}

    def test_overrides_beat_config_file(self, full_site: Path) -> None:
        result = build(full_site, output_root="dist")
        assert result.output_dir == full_site / "dist"
        assert (full_site / "dist" / "index.html").is_file()

    def test_summary_on_stderr(self, full_site: Path, capsys: pytest.CaptureFixture[str]) -> None:
        build(full_site)
        err = capsys.readouterr().err
        assert "enclave test build" in err
        assert "Compiled 3 pages (3 written)" in err
        assert "Bundled 1 asset" in err

    def test_verbose_lists_routes(self, full_site: Path, capsys: pytest.CaptureFixture[str]) -> None:
        build(full_site, verbose=True)
        err = capsys.readouterr().err
        assert "/posts/hello/" in err
        assert "MarkdownRenderer" in err

    def test_missing_site_module(self, tmp_site: Path) -> None:
        with pytest.raises(ConfigError, match="site.py"):
            build(tmp_site)

"""Tests for enclave.paths — concat, contains and route normalization."""

from pathlib import Path

from enclave.paths import clean, concat, contains, normalize_route


class TestConcat:
    """concat — joins absolute-looking parts below the base."""

    def test_absolute_part_stays_below_base(self) -> None:
        assert concat("/foo", "/bar") == Path("/foo/bar")

    def test_trailing_separator_on_base(self) -> None:
        assert concat(Path("/foo/"), "/bar") == Path("/foo/bar")

    def test_multiple_parts(self) -> None:
        assert concat("/out", "/about/", "index.html") == Path("/out/about/index.html")

    def test_root_base(self) -> None:
        assert concat("/", "x") == Path("/x")

    def test_parent_segments_are_kept(self) -> None:
        assert concat("/out", "/../etc") == Path("/out/../etc")


class TestContains:
    """contains — lexical containment check."""

    def test_child(self) -> None:
        assert contains(Path("/foo"), Path("/foo/bar"))
        assert contains(Path("/foo"), Path("/foo/bar/baz"))

    def test_itself(self) -> None:
        assert contains(Path("/foo"), Path("/foo"))

    def test_parent_and_sibling(self) -> None:
        assert not contains(Path("/foo"), Path("/"))
        assert not contains(Path("/foo"), Path("/bar"))

    def test_escape_through_parent_segments(self, tmp_path: Path) -> None:
        assert not contains(tmp_path, tmp_path / "x/../../y")
        assert contains(tmp_path, tmp_path / "a/b")

    def test_dotdot_prefixed_name_is_inside(self) -> None:
        assert contains(Path("/foo"), Path("/foo/..bar"))


class TestClean:
    def test_resolves_dot_segments(self) -> None:
        assert clean("/a/./b/../c") == Path("/a/c")


class TestNormalizeRoute:
    """normalize_route — leading slash, collapsed separators."""

    def test_equivalent_forms(self) -> None:
        assert normalize_route("foo//bar") == "/foo/bar"
        assert normalize_route("/foo/bar") == "/foo/bar"

    def test_root(self) -> None:
        assert normalize_route("") == "/"
        assert normalize_route("/") == "/"

    def test_trailing_slash_kept(self) -> None:
        assert normalize_route("posts/") == "/posts/"
        assert normalize_route("//posts//") == "/posts/"

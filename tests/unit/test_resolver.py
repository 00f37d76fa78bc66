"""
Unit tests for path decoding, index substitution and containment.
"""

import os

import pytest

from staticgate.errors import ContainmentError, PathDecodeError
from staticgate.static.resolver import (
    apply_index,
    decode_path,
    is_contained,
    normalize_root,
    resolve_path,
    strip_path_root,
)


@pytest.fixture
def root(fixtures_root) -> str:
    return normalize_root(str(fixtures_root))


class TestStripPathRoot:
    """Tests for strip_path_root()."""

    def test_strips_one_leading_slash(self):
        """Only the first separator is removed."""
        assert strip_path_root("/hello.txt") == "hello.txt"
        assert strip_path_root("//etc/passwd") == "/etc/passwd"

    def test_no_leading_slash(self):
        """Paths without a root token are returned unchanged."""
        assert strip_path_root("hello.txt") == "hello.txt"
        assert strip_path_root("") == ""


class TestDecodePath:
    """Tests for decode_path()."""

    def test_plain_path(self):
        assert decode_path("docs/hello.txt") == "docs/hello.txt"

    def test_percent_escapes(self):
        """Escapes are decoded as UTF-8."""
        assert decode_path("read%20me.txt") == "read me.txt"
        assert decode_path("caf%C3%A9") == "café"
        assert decode_path("%2e%2e/x") == "../x"

    def test_lowercase_hex(self):
        assert decode_path("a%2fb") == "a/b"

    @pytest.mark.parametrize("path", ["%E4", "%zz.txt", "abc%", "%4", "a%g0b", "%C3%28"])
    def test_malformed_raises(self, path):
        """Invalid escapes and invalid UTF-8 are fatal."""
        with pytest.raises(PathDecodeError) as exc_info:
            decode_path(path)

        assert str(exc_info.value) == "Could not decode path"
        assert exc_info.value.status_code == 400
        assert exc_info.value.path == path


class TestApplyIndex:
    """Tests for apply_index()."""

    def test_trailing_slash_gets_index(self):
        assert apply_index("/docs/", "docs/", "index.html") == "docs/index.html"
        assert apply_index("/", "", "index.html") == "index.html"

    def test_no_trailing_slash(self):
        """Only directory-style requests get the index."""
        assert apply_index("/docs", "docs", "index.html") == "docs"

    def test_no_index_configured(self):
        assert apply_index("/docs/", "docs/", None) == "docs/"

    def test_encoded_slash_is_not_a_directory_request(self):
        """The check looks at the raw path, not the decoded one."""
        assert apply_index("/docs%2F", "docs/", "index.html") == "docs/"


class TestIsContained:
    """Tests for is_contained()."""

    def test_root_itself(self, tmp_path):
        root = str(tmp_path)
        assert is_contained(root, root)

    def test_below_root(self, tmp_path):
        root = str(tmp_path)
        assert is_contained(root, os.path.join(root, "a", "b.txt"))

    def test_sibling_with_common_prefix(self, tmp_path):
        """'/srv/www-private' is not inside '/srv/www'."""
        root = str(tmp_path / "www")
        assert not is_contained(root, str(tmp_path / "www-private" / "key"))

    def test_parent(self, tmp_path):
        assert not is_contained(str(tmp_path / "www"), str(tmp_path))

    def test_filesystem_root(self):
        """A root of "/" contains everything without doubling the separator."""
        root = os.path.abspath(os.sep)
        assert is_contained(root, os.path.join(root, "etc"))


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_simple_file(self, root):
        assert resolve_path(root, "hello.txt") == os.path.join(root, "hello.txt")

    def test_empty_path_is_root(self, root):
        assert resolve_path(root, "") == root

    def test_dot_segments_inside_root(self, root):
        """'..' is fine as long as the result stays inside."""
        assert resolve_path(root, "world/../hello.txt") == os.path.join(root, "hello.txt")
        assert resolve_path(root, "./hello.txt") == os.path.join(root, "hello.txt")

    @pytest.mark.parametrize("path", [
        "../secret.txt",
        "../../etc/passwd",
        "world/../../secret.txt",
        "..",
    ])
    def test_escaping_paths_raise(self, root, path):
        with pytest.raises(ContainmentError) as exc_info:
            resolve_path(root, path)
        assert exc_info.value.reason == "outside root"

    def test_sibling_directory_raises(self, tmp_path):
        root = normalize_root(str(tmp_path / "www"))
        with pytest.raises(ContainmentError):
            resolve_path(root, "../www-private/key")

    def test_absolute_path_raises(self, root):
        """Absolute paths are not joined onto the root."""
        with pytest.raises(ContainmentError) as exc_info:
            resolve_path(root, "/etc/passwd")
        assert exc_info.value.reason == "absolute path"

    def test_null_byte_raises(self, root):
        with pytest.raises(ContainmentError) as exc_info:
            resolve_path(root, "hello.txt\x00.png")
        assert exc_info.value.reason == "null byte"

    def test_trailing_separator_is_kept(self, root):
        """'world/' stays a directory-style path."""
        assert resolve_path(root, "world/") == os.path.join(root, "world") + os.sep
        assert resolve_path(root, "hello.txt/") == os.path.join(root, "hello.txt") + os.sep

    def test_trailing_separator_on_root(self, root):
        """The root itself never gets an extra separator."""
        assert resolve_path(root, "world/../") == root

    def test_result_always_contained(self, root):
        for path in ["a/b/c", "a/../b", "./.", "x/y/../../z", "..a", "a..b/c"]:
            assert is_contained(root, resolve_path(root, path))

    def test_idempotent(self, root):
        """Same input, same output; nothing depends on the filesystem."""
        first = resolve_path(root, "world/../missing/file.txt")
        second = resolve_path(root, "world/../missing/file.txt")
        assert first == second == os.path.join(root, "missing", "file.txt")


class TestNormalizeRoot:
    """Tests for normalize_root()."""

    def test_relative_root(self, in_tmp_cwd):
        assert normalize_root("public") == os.path.join(os.getcwd(), "public")

    def test_collapses_dots(self, tmp_path):
        assert normalize_root(str(tmp_path / "a" / ".." / "b")) == str(tmp_path / "b")

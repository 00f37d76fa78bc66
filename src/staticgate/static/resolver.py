"""
=============================================================================
PATH RESOLUTION
=============================================================================

Turns the raw request path into a filesystem path that is PROVABLY inside
the configured root, without touching the filesystem.

    Raw path             "/docs/%2e%2e/read%20me.txt"
        │
        │  strip_path_root()     drop the leading "/"
        ▼
    "docs/%2e%2e/read%20me.txt"
        │
        │  decode_path()         strict percent-decoding
        ▼
    "docs/../read me.txt"
        │
        │  apply_index()         "/docs/" + index → "docs/index.html"
        ▼
        │  resolve_path()        join + collapse "." / ".." + containment
        ▼
    "/srv/www/read me.txt"

=============================================================================
PATH TRAVERSAL
=============================================================================

The attack this module exists to stop:

    GET /../../../etc/passwd
    GET /%2e%2e/%2e%2e/etc/passwd          (encoded dots)
    GET //etc/passwd                       (absolute path injection)
    GET /images%00.png                     (null byte truncation)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONTAINMENT CHECK                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   root      = /srv/www                                               │
    │                                                                      │
    │   candidate = /srv/www/css/site.css   starts with "/srv/www/"  OK    │
    │   candidate = /srv/www                equals root              OK    │
    │   candidate = /etc/passwd             outside                  NO    │
    │   candidate = /srv/www-private/key    "/srv/www" is a string         │
    │                                       prefix but NOT a path    NO    │
    │                                       prefix: compare against        │
    │                                       root + "/"                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The check is LEXICAL. We do not call realpath() or resolve(): symlinks
inside the root are the operator's business, and the verdict must be
reached before any filesystem access so it cannot depend on what exists.

=============================================================================
"""

import os
import re
from typing import Optional
from urllib.parse import unquote

from ..errors import ContainmentError, PathDecodeError


# A "%" that is not followed by exactly two hex digits.
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

URL_SEPARATOR = "/"


def normalize_root(root: str) -> str:
    """Make root absolute and normalized, once, at setup time."""
    return os.path.normpath(os.path.abspath(root))


def strip_path_root(path: str) -> str:
    """
    Drop the leading root token from a request path.

        "/hello.txt"  →  "hello.txt"
        "//etc"       →  "/etc"       (only ONE token; the rest stays
                                       visible to resolve_path())
    """
    if path.startswith(URL_SEPARATOR):
        return path[len(URL_SEPARATOR):]
    return path


def decode_path(path: str) -> str:
    """
    Percent-decode a request path, strictly.

    urllib's unquote() is lenient: it leaves "%zz" alone and replaces
    invalid UTF-8 with U+FFFD. Neither is acceptable here, because the
    decoded string becomes a filename. Both cases raise PathDecodeError.

        >>> decode_path("read%20me.txt")
        'read me.txt'
        >>> decode_path("caf%C3%A9")
        'café'
        >>> decode_path("%E4")
        Traceback (most recent call last):
        ...
        staticgate.errors.PathDecodeError: Could not decode path
    """
    if _MALFORMED_ESCAPE.search(path):
        raise PathDecodeError(path)
    try:
        return unquote(path, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        raise PathDecodeError(path)


def apply_index(request_path: str, decoded_path: str, index: Optional[str]) -> str:
    """
    Append the index filename to directory-style requests.

    The trailing-separator test looks at the ORIGINAL request path, not the
    decoded one: "/docs%2F" names a file called "docs/" in URL terms and is
    not a directory request.

        apply_index("/docs/", "docs/", "index.html")   →  "docs/index.html"
        apply_index("/docs",  "docs",  "index.html")   →  "docs"
        apply_index("/docs/", "docs/", None)           →  "docs/"
    """
    if index and request_path.endswith(URL_SEPARATOR):
        return decoded_path + index
    return decoded_path


def is_contained(root: str, path: str) -> bool:
    """
    Segment-aligned prefix test: is path equal to root or below it?
    """
    root = os.path.normcase(root)
    path = os.path.normcase(path)
    if path == root:
        return True
    # "/" must not become "//" when used as a prefix.
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def resolve_path(root: str, decoded_path: str) -> str:
    """
    Join a decoded request path onto root and prove it stays inside.

    Args:
        root: Absolute, normalized root (see normalize_root()).
        decoded_path: Output of decode_path(), optionally via apply_index().

    Returns:
        Absolute filesystem path equal to root or below it. A trailing
        separator on the request is kept, so "hello.txt/" still names a
        directory and will not match the plain file "hello.txt".

    Raises:
        ContainmentError: null byte, absolute or drive-qualified path, or a
                          result outside root after collapsing "..".
    """
    if "\x00" in decoded_path:
        raise ContainmentError(decoded_path, "null byte")

    drive, _ = os.path.splitdrive(decoded_path)
    if drive or os.path.isabs(decoded_path):
        raise ContainmentError(decoded_path, "absolute path")

    candidate = os.path.normpath(os.path.join(root, decoded_path))
    if not is_contained(root, candidate):
        raise ContainmentError(decoded_path, "outside root")

    if decoded_path.endswith((URL_SEPARATOR, os.sep)) and candidate != root:
        candidate += os.sep
    return candidate

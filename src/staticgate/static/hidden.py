"""
Hidden-path detection.

A path is hidden when any segment BELOW the root starts with ".":

    root = /srv/www

    /srv/www/.env               hidden
    /srv/www/.git/config        hidden
    /srv/www/css/.cache/a.css   hidden
    /srv/www/css/site.css       visible
    /home/me/.sites/www/a.txt   visible when root is /home/me/.sites/www
                                (segments of the root itself do not count)

This is a plain string check. Platform "hidden" attributes are never
consulted, so the same request gets the same answer on every OS.
"""

import os

from .resolver import is_contained


HIDDEN_MARKER = "."


def is_hidden(root: str, path: str) -> bool:
    """
    Return True if any segment of path below root starts with ".".

    Only call this with a path that resolve_path() already accepted.
    """
    if not is_contained(root, path):
        raise ValueError(f"{path!r} is not inside {root!r}")

    tail = path[len(root):]
    return any(segment.startswith(HIDDEN_MARKER) for segment in tail.split(os.sep))

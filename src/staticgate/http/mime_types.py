"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to the Content-Type the file sender puts on a
delivered file.

    page.html   →  text/html; charset=utf-8
    app.js      →  text/javascript; charset=utf-8
    logo.png    →  image/png
    blob.xyz    →  application/octet-stream   (unknown: treat as binary)

Detection is by extension only. The file's bytes are never sniffed.

=============================================================================
"""

from pathlib import Path
from typing import Optional


MIME_TYPES = {
    # Text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".map": "application/json",    # Source maps
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".avif": "image/avif",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Media
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",

    # Documents and archives
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".wasm": "application/wasm",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

_TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

        >>> get_mime_type("/srv/www/LOGO.PNG")
        'image/png'
        >>> get_mime_type("notes.xyz", default="text/plain")
        'text/plain'
    """
    extension = Path(path).suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """Text types get a charset parameter; binary types do not."""
    return mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES


def get_content_type(path: str | Path, charset: str = "utf-8") -> str:
    """
    Get the full Content-Type header value for a file.

        >>> get_content_type("index.txt")
        'text/plain; charset=utf-8'
        >>> get_content_type("image.png")
        'image/png'
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type

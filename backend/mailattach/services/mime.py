"""
MIME type / file extension lookup.

Thin layer over the stdlib mimetypes registry with the fallbacks a mail
composer needs: unknown names map to application/octet-stream and unknown
types map to the "bin" extension, so callers always get a usable value.
"""

import mimetypes
from urllib.parse import urlsplit

DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = "bin"

# mimetypes.guess_extension() picks whatever extension was registered first,
# which for several common types is not the one people expect.
_PREFERRED_EXTENSIONS = {
    "application/octet-stream": "bin",
    "application/javascript": "js",
    "application/json": "json",
    "application/pdf": "pdf",
    "application/zip": "zip",
    "image/gif": "gif",
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/svg+xml": "svg",
    "message/rfc822": "eml",
    "text/calendar": "ics",
    "text/csv": "csv",
    "text/html": "html",
    "text/plain": "txt",
    "text/xml": "xml",
}

# Types the mimetypes registry does not know on every platform
_EXTRA_TYPES = {
    "eml": "message/rfc822",
    "ics": "text/calendar",
    "md": "text/markdown",
    "webp": "image/webp",
}


def _last_segment(hint: str) -> str:
    """Return the final path segment of a file name, path or URL."""
    if "://" in hint:
        hint = urlsplit(hint).path
    hint = hint.replace("\\", "/")
    return hint.rstrip("/").rsplit("/", 1)[-1]


def detect_mime_type(hint: str | None) -> str:
    """
    Guess a MIME type from a file name, path, URL or bare extension.

    Examples:
        "report.pdf"                      -> "application/pdf"
        "/tmp/test.txt"                   -> "text/plain"
        "https://example.com/a/logo.png"  -> "image/png"
        "txt"                             -> "text/plain"
        "bin"                             -> "application/octet-stream"
        "LICENSE"                         -> "application/octet-stream"
    """
    if not hint:
        return DEFAULT_MIME_TYPE

    name = _last_segment(str(hint))
    extension = name.rsplit(".", 1)[-1].strip().lower()
    if not extension:
        return DEFAULT_MIME_TYPE

    if extension in _EXTRA_TYPES:
        return _EXTRA_TYPES[extension]

    guessed, _encoding = mimetypes.guess_type(f"file.{extension}", strict=False)
    return guessed or DEFAULT_MIME_TYPE


def detect_extension(content_type: str | None) -> str:
    """
    Guess a file extension (without the leading dot) for a MIME type.

    Parameters such as "; charset=utf-8" are ignored.
    Unknown or empty types return "bin".
    """
    if not content_type:
        return DEFAULT_EXTENSION

    base_type = content_type.split(";", 1)[0].strip().lower()
    if base_type in _PREFERRED_EXTENSIONS:
        return _PREFERRED_EXTENSIONS[base_type]

    for extension, mime_type in _EXTRA_TYPES.items():
        if mime_type == base_type:
            return extension

    guessed = mimetypes.guess_extension(base_type, strict=False)
    if not guessed:
        return DEFAULT_EXTENSION
    return guessed.lstrip(".")

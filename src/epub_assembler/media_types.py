"""Media type lookup for publication resources."""

import mimetypes
import posixpath

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Core media types of EPUB 3 and the types reading systems expect for
# formats the system registry reports differently.
MEDIA_TYPES = {
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".jpe": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".htm": "application/xhtml+xml",
    ".html": "application/xhtml+xml",
    ".xhtm": "application/xhtml+xml",
    ".xhtml": "application/xhtml+xml",
    ".ncx": "application/x-dtbncx+xml",
    ".otf": "application/vnd.ms-opentype",
    ".ttf": "font/ttf",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".smil": "application/smil+xml",
    ".smi": "application/smil+xml",
    ".sml": "application/smil+xml",
    ".pls": "application/pls+xml",
    ".mp3": "audio/mpeg",
    ".mp4": "audio/mp4",
    ".aac": "audio/mp4",
    ".m4a": "audio/mp4",
    ".m4v": "audio/mp4",
    ".m4b": "audio/mp4",
    ".m4p": "audio/mp4",
    ".m4r": "audio/mp4",
    ".css": "text/css",
    ".js": "text/javascript",
}


def type_by_filename(filename: str) -> str:
    """Get the media type for a resource path.

    Looks up the extension in MEDIA_TYPES, then in the system registry,
    and falls back to application/octet-stream.

    Args:
        filename: Resource path with forward slashes

    Returns:
        Media type string
    """
    ext = posixpath.splitext(filename)[1].lower()
    if not ext:
        return DEFAULT_MEDIA_TYPE
    media_type = MEDIA_TYPES.get(ext)
    if media_type:
        return media_type
    media_type, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return media_type or DEFAULT_MEDIA_TYPE

"""HTTP header parsing utilities."""

from __future__ import annotations

from urllib.parse import unquote


def parse_content_disposition_filename(header: str | None) -> str | None:
    """Extract the file name from a Content-Disposition header.

    ``filename*`` (RFC 5987) takes precedence over ``filename``.

    Args:
        header: The raw header value.

    Returns:
        The file name, or None if the header carries none.
    """
    if not header:
        return None

    filename = None
    for part in header.split(";"):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()
        if key == "filename*":
            if "''" in value:
                value = value.split("''", 1)[1]
            return unquote(value.strip('"'))
        if key == "filename":
            filename = value.strip('"').strip("'")
    return filename

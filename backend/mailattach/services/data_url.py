"""
RFC 2397 data URL parsing.

    data:[<mediatype>][;base64],<data>

parse_data_url() only checks syntax and splits the URL into its parts. It
returns None for anything that is not a well-formed data URL so callers can
fall back to treating the string as an ordinary path or link. Turning the
payload into bytes is left to the caller.
"""

import re
from typing import Optional

from pydantic import BaseModel, computed_field

# RFC 2397: an omitted media type means text/plain;charset=US-ASCII
DEFAULT_MEDIA_TYPE = "text/plain;charset=US-ASCII"

_TOKEN = r"[a-z0-9\-.!#$%*+{}|~`^_']+"

_DATA_URL_RE = re.compile(
    r"data:"
    r"(?P<media_type>[a-z]+/[a-z0-9\-+.]+(?:;" + _TOKEN + "=" + _TOKEN + r")*)?"
    r"(?P<base64>;base64)?"
    r",(?P<data>[a-z0-9!$&',()*+;=\-._~:@/?%\s<>\[\]]*)",
    re.IGNORECASE,
)

_BASE64_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")
_WHITESPACE_RE = re.compile(r"\s+")


class DataUrl(BaseModel):
    """A syntactically valid data URL, split into its parts."""
    model_config = {"frozen": True}

    media_type: str             # type/subtype plus any ;param=value pairs
    is_base64: bool
    data: str                   # payload exactly as it will be decoded

    @computed_field
    @property
    def content_type(self) -> str:
        return self.media_type.split(";", 1)[0].strip().lower()

    @computed_field
    @property
    def charset(self) -> Optional[str]:
        for param in self.media_type.split(";")[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "charset" and value:
                return value.strip()
        return None


def parse_data_url(uri: Optional[str]) -> Optional[DataUrl]:
    """
    Split a data URL into media type, base64 flag and payload.

    Returns None when uri is not a string or is not a valid data URL, e.g.
    "data:text" (no comma) or a base64 payload containing characters outside
    the base64 alphabet.

    For base64 payloads whitespace is removed and missing "=" padding is
    restored, so the returned data can be handed straight to
    base64.b64decode().
    """
    if not isinstance(uri, str):
        return None

    match = _DATA_URL_RE.fullmatch(uri.strip())
    if match is None:
        return None

    media_type = match.group("media_type") or DEFAULT_MEDIA_TYPE
    is_base64 = match.group("base64") is not None
    data = match.group("data")

    if is_base64:
        data = _WHITESPACE_RE.sub("", data)
        if not _BASE64_RE.fullmatch(data):
            return None
        unpadded = data.rstrip("=")
        if len(unpadded) % 4 == 1:
            return None
        data = unpadded + "=" * (-len(unpadded) % 4)

    return DataUrl(media_type=media_type, is_base64=is_base64, data=data)

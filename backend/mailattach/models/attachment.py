"""
Pydantic models for attachment descriptors.

Models:
  AttachmentHeader      — a single {key, value} header pair
  RawAttachment         — caller-supplied descriptor, every field optional
  PathSource            — content to be read later from a local path
  HrefSource            — content to be fetched later from a URL
  NormalizedAttachment  — canonical descriptor handed to a MIME builder
  ParsedAttachments     — normalizer result, split into attached / related

Field names are snake_case in Python. On the wire the camelCase names used by
mail composers (contentType, contentDisposition, contentTransferEncoding) are
accepted and emitted via aliases; either spelling is accepted on input.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


_WIRE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


class AttachmentHeader(BaseModel):
    """Extra MIME header attached to a single part."""
    key: str
    value: str


class RawAttachment(BaseModel):
    """
    Attachment descriptor as supplied by the caller.

    filename is tri-state:
      a string   — use it verbatim
      False      — do not infer a filename
      None       — infer one from path / href / content type

    path and href become False once a data URI has been resolved out of them.
    Whether they were supplied at all (even as None) is tracked through
    model_fields_set.
    """
    model_config = _WIRE_CONFIG

    content_type: Optional[str] = None
    content_disposition: Optional[str] = None
    content_transfer_encoding: Optional[str] = None
    filename: Union[str, Literal[False], None] = None
    path: Union[str, Literal[False], None] = None
    href: Union[str, Literal[False], None] = None
    cid: Optional[str] = None
    raw: Any = None
    content: Any = None        # str, bytes or a readable stream — never decoded here
    encoding: Optional[str] = None
    headers: Optional[list[AttachmentHeader]] = None


class PathSource(BaseModel):
    """Content lives on the local filesystem."""
    path: str


class HrefSource(BaseModel):
    """Content lives behind an http(s) URL."""
    href: str


class NormalizedAttachment(BaseModel):
    """
    Canonical attachment descriptor.

    content_type and content_disposition are always set. Exactly one content
    source is populated: raw, or content (a PathSource, an HrefSource, or the
    literal inline value).
    """
    model_config = _WIRE_CONFIG

    content_type: str
    content_disposition: str
    content_transfer_encoding: Optional[str] = None
    filename: Optional[str] = None
    cid: Optional[str] = None
    raw: Any = None
    content: Any = None
    encoding: Optional[str] = None
    headers: Optional[list[AttachmentHeader]] = None


class ParsedAttachments(BaseModel):
    """Normalized attachments split into regular and inline (cid) groups."""
    attached: list[NormalizedAttachment] = []
    related: list[NormalizedAttachment] = []

"""
Attachment normalization service.

Turns the loose attachment descriptors a caller supplies when composing a
message into NormalizedAttachment records that a MIME builder can consume
without any further guessing:

  - content type, disposition and filename are always inferred when missing
  - data URIs in path / href are decoded into inline bytes
  - http(s) URLs given as path are moved to href
  - exactly one content source is kept (raw > path > href > inline content)
  - results are optionally split into attached / related (cid) groups

Nothing here reads files or touches the network: a PathSource or HrefSource
only records where the content should be fetched from later.

Usage:
    result = normalize_attachments(
        [{"path": "/tmp/report.pdf"}, {"cid": "logo@mail", "path": "logo.png"}],
        find_related=True,
    )
    result.attached[0].filename   # "report.pdf"
    result.related[0].cid         # "logo@mail"
"""

import base64
import logging
import re
from typing import Any, Callable, Iterable, Mapping, Optional, Union
from urllib.parse import unquote_to_bytes

from mailattach.models.attachment import (
    HrefSource,
    NormalizedAttachment,
    ParsedAttachments,
    PathSource,
    RawAttachment,
)
from mailattach.services.data_url import DataUrl, parse_data_url
from mailattach.services.mime import detect_extension, detect_mime_type

logger = logging.getLogger(__name__)

AttachmentInput = Union[RawAttachment, Mapping[str, Any]]
DataUrlParser = Callable[[str], Optional[DataUrl]]

_MESSAGE_TYPE_RE = re.compile(r"^message/", re.IGNORECASE)
_DATA_URL_RE = re.compile(r"^data:", re.IGNORECASE)
_HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_BARE_MIME_TYPE_RE = re.compile(r"^\w+/[^/]+$")


# ---------------------------------------------------------------------------
# Pattern matchers
# ---------------------------------------------------------------------------

def is_message_type(value: Any) -> bool:
    """True for message/* content types (embedded e-mails, partials, ...)."""
    return isinstance(value, str) and bool(_MESSAGE_TYPE_RE.match(value))


def is_data_url(value: Any) -> bool:
    """True when value starts with the data: scheme. Syntax is not checked."""
    return isinstance(value, str) and bool(_DATA_URL_RE.match(value))


def is_http_url(value: Any) -> bool:
    """True for absolute http:// or https:// URLs."""
    return isinstance(value, str) and bool(_HTTP_URL_RE.match(value))


def is_bare_mime_type(value: Any) -> bool:
    """True for a bare "type/subtype" with no parameters, e.g. "image/png"."""
    return isinstance(value, str) and bool(_BARE_MIME_TYPE_RE.match(value))


# ---------------------------------------------------------------------------
# Data URI resolution
# ---------------------------------------------------------------------------

def _decode_payload(parsed: DataUrl) -> bytes:
    if parsed.is_base64:
        return base64.b64decode(parsed.data)
    return unquote_to_bytes(parsed.data)


def resolve_data_url(
    attachment: RawAttachment,
    parser: DataUrlParser = parse_data_url,
) -> RawAttachment:
    """
    Decode a data URI held in path (or href) into inline content.

    Returns a new RawAttachment; the one passed in is never modified. If the
    candidate string is not a valid data URI the same object is returned.

    On success the copy has:
      content       — the decoded bytes
      path / href   — False, for whichever of the two was supplied at all
      content_type  — taken from the URI's media type unless already set
    """
    candidate = attachment.path or attachment.href or ""
    parsed = parser(candidate) if isinstance(candidate, str) else None
    if parsed is None:
        logger.debug("Not a valid data URI, leaving attachment unchanged: %.40r", candidate)
        return attachment

    update: dict[str, Any] = {"content": _decode_payload(parsed)}

    if "path" in attachment.model_fields_set:
        update["path"] = False
    if "href" in attachment.model_fields_set:
        update["href"] = False

    content_type = attachment.content_type
    for item in parsed.media_type.split(";"):
        if is_bare_mime_type(item):
            content_type = content_type or item.lower()
    update["content_type"] = content_type

    return attachment.model_copy(update=update)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def _as_list(attachments: Any) -> list:
    if not attachments:
        return []
    if isinstance(attachments, (RawAttachment, Mapping)):
        return [attachments]
    return list(attachments)


def _coerce(attachment: AttachmentInput) -> RawAttachment:
    if isinstance(attachment, RawAttachment):
        return attachment
    return RawAttachment.model_validate(attachment)


class AttachmentsParser:
    """
    Normalizes attachment descriptors.

    find_related — when True, attachments carrying a cid are returned in the
    "related" group (for multipart/related inline parts) instead of
    "attached".

    The MIME lookups and the data URI parser can be swapped out, mainly so
    tests can observe how they are consulted.
    """

    def __init__(
        self,
        find_related: bool = False,
        *,
        mime_type_detector: Callable[[str], str] = detect_mime_type,
        extension_detector: Callable[[str], str] = detect_extension,
        data_url_parser: DataUrlParser = parse_data_url,
    ) -> None:
        self.find_related = find_related
        self._detect_mime_type = mime_type_detector
        self._detect_extension = extension_detector
        self._parse_data_url = data_url_parser

    def parse(
        self,
        attachments: Union[AttachmentInput, Iterable[AttachmentInput], None] = None,
    ) -> ParsedAttachments:
        """
        Normalize attachments, preserving their order.

        Accepts None, a single descriptor, or a sequence of descriptors; a
        descriptor is a RawAttachment or a mapping using either camelCase or
        snake_case keys.
        """
        normalized = [
            self.normalize_one(_coerce(attachment), index)
            for index, attachment in enumerate(_as_list(attachments))
        ]

        if not self.find_related:
            return ParsedAttachments(attached=normalized, related=[])

        return ParsedAttachments(
            attached=[item for item in normalized if not item.cid],
            related=[item for item in normalized if item.cid],
        )

    def resolve_data_url(self, attachment: RawAttachment) -> RawAttachment:
        return resolve_data_url(attachment, parser=self._parse_data_url)

    def normalize_one(self, attachment: RawAttachment, index: int = 0) -> NormalizedAttachment:
        """Normalize a single descriptor; index is its 0-based input position."""
        is_message_node = is_message_type(attachment.content_type)

        if is_data_url(attachment.path or attachment.href):
            attachment = self.resolve_data_url(attachment)

        content_type = attachment.content_type or self._detect_mime_type(
            attachment.filename or attachment.path or attachment.href or "bin"
        )
        data: dict[str, Any] = {
            "content_type": content_type,
            "content_disposition": attachment.content_disposition
            or ("inline" if is_message_node else "attachment"),
            "content_transfer_encoding": attachment.content_transfer_encoding,
        }

        if attachment.filename:
            data["filename"] = attachment.filename
        elif not is_message_node and attachment.filename is not False:
            location = attachment.path or attachment.href or ""
            filename = location.split("/")[-1] or f"attachment-{index + 1}"
            if "." not in filename:
                filename += "." + self._detect_extension(content_type)
            data["filename"] = filename

        path = attachment.path
        href = attachment.href
        if is_http_url(path):
            href = path
            path = None

        if attachment.cid:
            data["cid"] = attachment.cid

        if attachment.raw:
            data["raw"] = attachment.raw
        elif path:
            data["content"] = PathSource(path=path)
        elif href:
            data["content"] = HrefSource(href=href)
        else:
            data["content"] = attachment.content if attachment.content is not None else ""

        if attachment.encoding:
            data["encoding"] = attachment.encoding

        if attachment.headers is not None:
            data["headers"] = attachment.headers

        return NormalizedAttachment(**data)


def normalize_attachments(
    attachments: Union[AttachmentInput, Iterable[AttachmentInput], None] = None,
    find_related: bool = False,
) -> ParsedAttachments:
    """Normalize attachments with a default-configured AttachmentsParser."""
    return AttachmentsParser(find_related=find_related).parse(attachments)

"""
Attachments router.

Exposes the attachment normalizer over HTTP so that services composing mail
in other languages can reuse the same inference rules.

Environment variables
---------------------
ATTACHMENTS_FIND_RELATED  Default for findRelated when a request omits it.
                          Accepts 1/true/yes/on and 0/false/no/off
                          (default: false).

Endpoints:
  POST /normalize  — normalize a list of attachment descriptors
"""

import base64
import logging
import os

from fastapi import APIRouter, HTTPException

from mailattach.models.attachment import NormalizedAttachment
from mailattach.models.normalize import NormalizeRequest, NormalizeResponse
from mailattach.services.attachments_parser import normalize_attachments

logger = logging.getLogger(__name__)

router = APIRouter()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def get_default_find_related() -> bool:
    """
    Read ATTACHMENTS_FIND_RELATED from the environment.

    Raises ValueError for values that are neither truthy nor falsy so a typo
    in deployment config does not silently change the grouping.
    """
    raw = os.getenv("ATTACHMENTS_FIND_RELATED", "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(
        f"Invalid ATTACHMENTS_FIND_RELATED value {raw!r}. "
        f"Expected one of: {sorted(_TRUE_VALUES | _FALSE_VALUES - {''})}"
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _to_wire(attachment: NormalizedAttachment) -> NormalizedAttachment:
    """
    Make an attachment JSON-safe.

    Binary content (decoded data URIs) is re-encoded as base64 and flagged
    with encoding="base64", which mail composers already understand.
    """
    if isinstance(attachment.content, (bytes, bytearray)):
        return attachment.model_copy(
            update={
                "content": base64.b64encode(attachment.content).decode("ascii"),
                "encoding": "base64",
            }
        )
    return attachment


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/normalize")
async def normalize(request: NormalizeRequest) -> dict:
    """
    Normalize attachment descriptors into attached / related groups.

    Every descriptor comes back with contentType and contentDisposition set
    and exactly one content source (raw, content.path, content.href or inline
    content).
    """
    find_related = request.find_related
    if find_related is None:
        try:
            find_related = get_default_find_related()
        except ValueError as exc:
            logger.error(f"Attachment normalization misconfigured: {exc}")
            raise HTTPException(status_code=500, detail=str(exc))

    try:
        result = normalize_attachments(request.attachments, find_related=find_related)
    except Exception:
        logger.exception("Attachment normalization failed")
        raise

    logger.info(
        "Normalized attachments: %d attached, %d related",
        len(result.attached),
        len(result.related),
    )

    response = NormalizeResponse(
        attached=[_to_wire(item) for item in result.attached],
        related=[_to_wire(item) for item in result.related],
    )
    return response.model_dump(by_alias=True, exclude_none=True)

"""
Request / response bodies for POST /api/attachments/normalize.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from mailattach.models.attachment import NormalizedAttachment, RawAttachment


class NormalizeRequest(BaseModel):
    """
    attachments may be a list of descriptors, a single descriptor, or null.

    findRelated overrides the ATTACHMENTS_FIND_RELATED env var when given.
    """
    model_config = {"populate_by_name": True}

    attachments: Union[list[RawAttachment], RawAttachment, None] = None
    find_related: Optional[bool] = Field(default=None, alias="findRelated")


class NormalizeResponse(BaseModel):
    """Normalized attachments in wire form (binary content base64-encoded)."""
    attached: list[NormalizedAttachment] = []
    related: list[NormalizedAttachment] = []

# app/models/schemas.py

from __future__ import annotations

import base64
from dataclasses import dataclass

from pydantic import BaseModel, Field

from app.models.enums import FailureKind


class TextGenerationRequest(BaseModel):
    prompt: str = Field(..., description="Text sent to the model as-is.", examples=["What is AI?"])


class GenerationResponse(BaseModel):
    output: str


class ErrorResponse(BaseModel):
    error: str


@dataclass(frozen=True)
class InlinePart:
    """
    Base64 payload plus media type, sent next to the text of a multimodal request.
    """
    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> InlinePart:
        return cls(data=base64.b64encode(raw).decode("utf-8"), mime_type=mime_type)

    @property
    def raw(self) -> bytes:
        return base64.b64decode(self.data)


class GenerationFailure(Exception):
    """
    Raised by the generation service for anything that went wrong upstream.
    `message` is the provider's text; `kind` says where it came from.
    """

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"GenerationFailure(kind={self.kind.value!r}, message={self.message!r})"

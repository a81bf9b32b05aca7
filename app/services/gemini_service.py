# app/services/gemini_service.py

from __future__ import annotations

import logging
from typing import Sequence, Union

import httpx
from google import genai
from google.genai import errors, types

from app.config.settings import Settings
from app.models.enums import FailureKind
from app.models.schemas import GenerationFailure, InlinePart

logger = logging.getLogger(__name__)

ContentItem = Union[str, InlinePart]


def classify(exc: Exception) -> FailureKind:
    if isinstance(exc, errors.APIError):
        return FailureKind.provider
    if isinstance(exc, httpx.TransportError):
        return FailureKind.transport
    return FailureKind.unknown


def to_sdk_contents(items: Sequence[ContentItem]) -> list[Union[str, types.Part]]:
    """
    Text stays text; inline parts become SDK blobs (the SDK base64-encodes
    them again on the wire).
    """
    contents: list[Union[str, types.Part]] = []
    for item in items:
        if isinstance(item, InlinePart):
            contents.append(types.Part.from_bytes(data=item.raw, mime_type=item.mime_type))
        else:
            contents.append(item)
    return contents


class GeminiService:
    """
    Thin async wrapper over the Gemini client: one call in, text out.
    Every upstream problem leaves as a GenerationFailure.
    """

    def __init__(self, client: genai.Client, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiService:
        return cls(genai.Client(api_key=settings.gemini_api_key), settings.gemini_model)

    async def generate(self, items: Sequence[ContentItem]) -> str:
        """
        Args:
            items: Prompt text and zero or more InlinePart objects, in order.

        Returns:
            str: The model's text answer.

        Raises:
            GenerationFailure: On any SDK, transport or empty-answer error.
        """
        logger.info("Calling %s with %d part(s)", self.model, len(items))
        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=to_sdk_contents(items),
            )
        except Exception as e:
            kind = classify(e)
            logger.error("Generation failed (%s): %s", kind.value, e)
            raise GenerationFailure(kind, str(e)) from e

        text = resp.text
        if text is None:
            logger.error("Generation failed (%s): no text in response", FailureKind.empty.value)
            raise GenerationFailure(FailureKind.empty, "Model returned no text.")
        return text

# app/api/routes.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.config.settings import (
    AUDIO_PROMPT,
    DEFAULT_IMAGE_PROMPT,
    DOCUMENT_PROMPT,
    IMAGE_MIME_TYPE,
    Settings,
    choose_prompt,
)
from app.models.schemas import (
    ErrorResponse,
    GenerationResponse,
    InlinePart,
    TextGenerationRequest,
)
from app.services.gemini_service import ContentItem
from app.utils.file_utils import staged_upload

router = APIRouter()


class Generator(Protocol):
    model: str

    async def generate(self, items: Sequence[ContentItem]) -> str: ...


@dataclass(frozen=True)
class GatewayContext:
    settings: Settings
    generator: Generator


def get_context(request: Request) -> GatewayContext:
    return request.app.state.context


_FAILURE = {500: {"model": ErrorResponse, "description": "Generation failed."}}


async def _generate_from_upload(
    ctx: GatewayContext,
    upload: UploadFile,
    prompt: str,
    mime_type: str | None = None,
) -> GenerationResponse:
    # The staged file is removed when this block exits, whatever happens inside
    async with staged_upload(upload, ctx.settings.upload_dir) as staged:
        raw = await staged.read_bytes()
        part = InlinePart.from_bytes(raw, mime_type or staged.mime_type)
        output = await ctx.generator.generate([prompt, part])
    return GenerationResponse(output=output)


@router.get("/healthz")
def healthz(ctx: GatewayContext = Depends(get_context)):
    return {"ok": True, "model": ctx.generator.model}


@router.post("/generate-text", response_model=GenerationResponse, responses=_FAILURE)
async def generate_text(
    body: TextGenerationRequest,
    ctx: GatewayContext = Depends(get_context),
):
    output = await ctx.generator.generate([body.prompt])
    return GenerationResponse(output=output)


@router.post("/generate-from-image", response_model=GenerationResponse, responses=_FAILURE)
async def generate_from_image(
    image: UploadFile = File(..., description="Image to describe."),
    prompt: str | None = Form(
        None,
        description=f"Instruction for the model. Defaults to '{DEFAULT_IMAGE_PROMPT}'.",
    ),
    ctx: GatewayContext = Depends(get_context),
):
    # Image bytes are always labelled as PNG, whatever the client reported
    return await _generate_from_upload(ctx, image, choose_prompt(prompt), IMAGE_MIME_TYPE)


@router.post("/generate-from-document", response_model=GenerationResponse, responses=_FAILURE)
async def generate_from_document(
    document: UploadFile = File(..., description="Document to analyze (PDF, TXT, etc.)."),
    ctx: GatewayContext = Depends(get_context),
):
    return await _generate_from_upload(ctx, document, DOCUMENT_PROMPT)


@router.post("/generate-from-audio", response_model=GenerationResponse, responses=_FAILURE)
async def generate_from_audio(
    audio: UploadFile = File(..., description="Audio to transcribe or analyze."),
    ctx: GatewayContext = Depends(get_context),
):
    return await _generate_from_upload(ctx, audio, AUDIO_PROMPT)

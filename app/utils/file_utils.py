# app/utils/file_utils.py

from __future__ import annotations

import logging
import mimetypes
import shutil
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

GENERIC_MIME = "application/octet-stream"


@dataclass(frozen=True)
class StagedUpload:
    path: Path
    filename: str
    mime_type: str

    async def read_bytes(self) -> bytes:
        return await run_in_threadpool(self.path.read_bytes)


def reported_mime(upload: UploadFile) -> str:
    """
    Media type as sent by the client. Falls back to a guess from the filename
    when the client sent nothing useful.
    """
    ctype = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if ctype and ctype != GENERIC_MIME:
        return ctype
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed or GENERIC_MIME


def _write_upload(upload: UploadFile, dest: Path) -> None:
    upload.file.seek(0)
    with dest.open("wb") as out:
        shutil.copyfileobj(upload.file, out)


def remove_staged(path: Path) -> None:
    """
    Delete a staged file. Already-gone files are fine; other OS errors are
    logged and do not propagate.
    """
    try:
        path.unlink(missing_ok=True)
        logger.debug("Removed staged upload %s", path)
    except OSError as e:
        logger.warning("Could not remove staged upload %s: %s", path, e)


@asynccontextmanager
async def staged_upload(upload: UploadFile, upload_dir: Path) -> AsyncIterator[StagedUpload]:
    """
    Write `upload` to a uniquely named file under `upload_dir` and yield it.
    The file is removed when the block exits, on success and on error.
    """
    # Random name per request, so concurrent uploads never collide
    dest = upload_dir / uuid.uuid4().hex
    staged = StagedUpload(
        path=dest,
        filename=upload.filename or dest.name,
        mime_type=reported_mime(upload),
    )
    try:
        await run_in_threadpool(_write_upload, upload, dest)
        logger.debug("Staged upload %r at %s (%s)", staged.filename, dest, staged.mime_type)
        yield staged
    finally:
        await run_in_threadpool(remove_staged, dest)

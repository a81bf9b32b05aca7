"""Shared pytest fixtures for the gateway tests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Sequence

import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.main import create_app
from app.services.gemini_service import ContentItem


class FakeGenerator:
    """Stand-in for GeminiService that records every call.

    Attributes:
        calls: Content lists received, in call order.
        staged_during_call: Names of the files present in the upload
            directory at the moment of each call.
        error: Exception to raise instead of answering, if set.
        output: Text returned on success.
    """

    model = "fake-model"

    def __init__(self, upload_dir: Path):
        self.upload_dir = upload_dir
        self.calls: list[list[ContentItem]] = []
        self.staged_during_call: list[list[str]] = []
        self.error: Exception | None = None
        self.output = "generated text"

    async def generate(self, items: Sequence[ContentItem]) -> str:
        self.calls.append(list(items))
        self.staged_during_call.append(sorted(p.name for p in self.upload_dir.iterdir()))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Empty transient-storage directory for one test."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(upload_dir: Path) -> Settings:
    """Settings that ignore the developer's .env file."""
    return Settings(
        gemini_api_key="test-key",
        gemini_model="models/test-model",
        upload_dir=upload_dir,
        expose_error_details=True,
        _env_file=None,
    )


@pytest.fixture
def fake_generator(upload_dir: Path) -> FakeGenerator:
    return FakeGenerator(upload_dir)


@pytest.fixture
def test_client(test_settings: Settings, fake_generator: FakeGenerator) -> Iterator[TestClient]:
    """TestClient wired to the fake generator; no network access."""
    app = create_app(test_settings, fake_generator)
    with TestClient(app) as client:
        yield client

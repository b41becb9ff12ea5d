"""
Unit Tests for Upload Orchestrator

Tests per-file lifecycle, batch isolation and staging cleanup.
"""

import asyncio
import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from portfolio.middleware.error_handler import LocalIOFailedError
from portfolio.models import FileState
from portfolio.services.file_validator import UploadPolicy, ViolationKind
from portfolio.services.upload_orchestrator import UploadOrchestrator

MB = 1024 * 1024


def make_upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def policy():
    return UploadPolicy.from_values(["image/jpeg", "image/png", "image/webp", "image/gif"], 10 * MB)


class TestProcessOne:
    @pytest.mark.asyncio
    async def test_stores_valid_image(self, local_store, staging, policy, jpeg_bytes):
        orchestrator = UploadOrchestrator(local_store, policy, staging)

        result = await orchestrator.process_one(make_upload(jpeg_bytes, "Hero Shot.JPG", "image/jpeg"))

        assert result.success is True
        assert result.state == FileState.STORED
        assert result.storedAsset.identifier.startswith("HeroShot_")
        assert result.storedAsset.identifier.endswith(".jpg")
        assert result.errors is None
        assert list(staging.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_three_mib_jpeg_under_five_mib_limit(self, local_store, staging, image_factory):
        """Padded JPEG is stored with a 200x200 thumbnail"""
        policy = UploadPolicy.from_values(["image/jpeg"], 5 * MB)
        data = image_factory("JPEG", size=(1024, 768), padding=3 * MB)
        orchestrator = UploadOrchestrator(local_store, policy, staging)

        result = await orchestrator.process_one(make_upload(data, "hero.jpg", "image/jpeg"))

        asset = result.storedAsset
        assert result.success is True
        assert asset.byteSize == len(data)
        assert asset.derivedUrls["thumbnail"] == asset.primaryUrl.replace(
            "/uploads/", "/uploads/thumbnails/"
        )

    @pytest.mark.asyncio
    async def test_unsupported_type_has_no_side_effects(self, staging, policy):
        store = MagicMock()
        store.put = AsyncMock()
        orchestrator = UploadOrchestrator(store, policy, staging)

        result = await orchestrator.process_one(make_upload(b"<svg/>", "logo.svg", "image/svg+xml"))

        assert result.success is False
        assert result.state == FileState.REJECTED
        assert result.reasons == [ViolationKind.UNSUPPORTED_MEDIA_TYPE.value]
        store.put.assert_not_called()
        assert list(staging.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_oversized_png_never_reaches_remote(self, remote_store, fake_cloudinary, staging, policy):
        """A 12 MiB PNG under a 10 MiB limit makes zero remote calls"""
        data = b"\x89PNG\r\n\x1a\n" + b"\0" * (12 * MB)
        orchestrator = UploadOrchestrator(remote_store, policy, staging)

        result = await orchestrator.process_one(make_upload(data, "huge.png", "image/png"))

        assert result.state == FileState.REJECTED
        assert result.reasons == [ViolationKind.PAYLOAD_TOO_LARGE.value]
        assert "10MB" in result.errors[0]
        assert fake_cloudinary.requests == []
        assert list(staging.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_file(self, local_store, staging, policy):
        orchestrator = UploadOrchestrator(local_store, policy, staging)

        result = await orchestrator.process_one(None)

        assert result.state == FileState.REJECTED
        assert result.reasons == [ViolationKind.NO_FILE_PROVIDED.value]

    @pytest.mark.asyncio
    async def test_store_failure_is_reported_and_staging_cleaned(self, staging, policy, jpeg_bytes):
        store = MagicMock()
        store.needs_extension = False
        store.store_name = "mock"
        store.put = AsyncMock(side_effect=LocalIOFailedError("/uploads/x", "disk full"))
        orchestrator = UploadOrchestrator(store, policy, staging)

        result = await orchestrator.process_one(make_upload(jpeg_bytes, "a.jpg", "image/jpeg"))

        assert result.success is False
        assert result.state == FileState.FAILED
        assert "disk full" in result.errors[0]
        assert list(staging.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_remote_rejection_is_reported(self, remote_store, fake_cloudinary, staging, policy, jpeg_bytes):
        fake_cloudinary.fail_uploads = True
        orchestrator = UploadOrchestrator(remote_store, policy, staging)

        result = await orchestrator.process_one(make_upload(jpeg_bytes, "a.jpg", "image/jpeg"))

        assert result.state == FileState.FAILED
        assert result.errors == ["Failed to upload image to Cloudinary: Invalid image file"]
        assert list(staging.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_named_once(self, staging, policy, jpeg_bytes):
        store = MagicMock()
        store.needs_extension = False
        store.store_name = "mock"
        store.put = AsyncMock(side_effect=RuntimeError("boom"))
        orchestrator = UploadOrchestrator(store, policy, staging)

        result = await orchestrator.process_one(make_upload(jpeg_bytes, "a.jpg", "image/jpeg"))

        assert result.errors == ["Failed to upload image: boom"]

    @pytest.mark.asyncio
    async def test_cancellation_still_cleans_staging(self, staging, policy, jpeg_bytes):
        store = MagicMock()
        store.needs_extension = False
        store.put = AsyncMock(side_effect=asyncio.CancelledError())
        orchestrator = UploadOrchestrator(store, policy, staging)

        with pytest.raises(asyncio.CancelledError):
            await orchestrator.process_one(make_upload(jpeg_bytes, "a.jpg", "image/jpeg"))

        assert list(staging.base_path.iterdir()) == []


class TestProcessMany:
    @pytest.mark.asyncio
    async def test_middle_file_rejected_others_stored(self, local_store, staging, jpeg_bytes, png_bytes):
        policy = UploadPolicy.from_values(["image/jpeg", "image/png"], 1 * MB)
        orchestrator = UploadOrchestrator(local_store, policy, staging)
        files = [
            make_upload(jpeg_bytes, "first.jpg", "image/jpeg"),
            make_upload(b"\0" * (1 * MB + 1), "second.png", "image/png"),
            make_upload(png_bytes, "third.png", "image/png"),
        ]

        results = await orchestrator.process_many(files)

        assert [r.filename for r in results] == ["first.jpg", "second.png", "third.png"]
        assert [r.success for r in results] == [True, False, True]
        assert results[1].state == FileState.REJECTED
        assert results[1].reasons == [ViolationKind.PAYLOAD_TOO_LARGE.value]
        assert len(list(local_store.root.glob("*.*"))) == 2

    @pytest.mark.asyncio
    async def test_all_rejected_batch(self, local_store, staging, policy):
        orchestrator = UploadOrchestrator(local_store, policy, staging)
        files = [
            make_upload(b"%PDF", "a.pdf", "application/pdf"),
            make_upload(b"text", "b.txt", "text/plain"),
        ]

        results = await orchestrator.process_many(files)

        assert all(r.state == FileState.REJECTED for r in results)
        assert list(local_store.root.glob("*.*")) == []

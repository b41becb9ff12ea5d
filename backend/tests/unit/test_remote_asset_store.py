"""
Unit Tests for RemoteAssetStore

Cloudinary is replaced by an httpx.MockTransport, so no network is used.
"""

import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from portfolio.middleware.error_handler import RemoteUploadFailedError
from portfolio.services.remote_asset_store import (
    RemoteAssetStore,
    RemoteStoreConfig,
    sign_params,
)
from portfolio.services.staging import StagedFile

CONFIG = RemoteStoreConfig(cloud_name="demo", api_key="key123", api_secret="secret456")


def staged_file(tmp_path, data: bytes = b"\xff\xd8\xff fake jpeg") -> StagedFile:
    path = tmp_path / "hero_1718000000000_abc123"
    path.write_bytes(data)
    return StagedFile(
        identifier="hero_1718000000000_abc123",
        original_filename="hero.jpg",
        content_type="image/jpeg",
        size=len(data),
        path=path,
    )


def store_with(handler) -> RemoteAssetStore:
    return RemoteAssetStore(CONFIG, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestSignature:
    def test_sorted_params_with_secret(self):
        params = {"timestamp": "1315060510", "public_id": "sample_image", "folder": "a/b"}
        expected = hashlib.sha1(
            b"folder=a/b&public_id=sample_image&timestamp=1315060510abcd"
        ).hexdigest()

        assert sign_params(params, "abcd") == expected

    def test_unsigned_and_empty_params_are_skipped(self):
        params = {"timestamp": "1", "api_key": "k", "file": "x", "folder": ""}
        assert sign_params(params, "s") == hashlib.sha1(b"timestamp=1s").hexdigest()


class TestPut:
    @pytest.mark.asyncio
    async def test_upload_success(self, remote_store, fake_cloudinary, tmp_path):
        staged = staged_file(tmp_path)
        path = staged.path

        asset = await remote_store.put(staged)

        assert asset.identifier == "portfolio/projects/hero_1718000000000_abc123"
        assert asset.primaryUrl.startswith("https://res.cloudinary.com/demo/")
        assert asset.derivedUrls["thumbnail"] == (
            "https://res.cloudinary.com/demo/image/upload/"
            "c_fill,g_center,h_200,w_200/f_auto,q_auto/"
            "portfolio/projects/hero_1718000000000_abc123"
        )
        assert (asset.width, asset.height, asset.format) == (640, 480, "jpg")
        assert not path.exists()
        assert staged.discarded

    @pytest.mark.asyncio
    async def test_upload_is_signed_without_secret(self, remote_store, fake_cloudinary, tmp_path):
        await remote_store.put(staged_file(tmp_path))

        request = fake_cloudinary.upload_requests()[0]
        body = request.content
        assert request.url.path == "/v1_1/demo/image/upload"
        assert b'name="signature"' in body
        assert b'name="api_key"' in body
        assert b"key123" in body
        assert b"secret456" not in body

    @pytest.mark.asyncio
    async def test_target_folder_override(self, remote_store, tmp_path):
        asset = await remote_store.put(staged_file(tmp_path), target_folder="portfolio/avatars")
        assert asset.identifier.startswith("portfolio/avatars/")

    @pytest.mark.asyncio
    async def test_upload_from_memory_buffer(self, remote_store):
        asset = await remote_store.put(b"\x89PNG data", desired_identifier="logo_1_abcdef")
        assert asset.identifier == "portfolio/projects/logo_1_abcdef"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("wrap", [bytearray, memoryview])
    async def test_upload_from_other_byte_buffers(self, remote_store, fake_cloudinary, wrap):
        data = b"\x89PNG buffered data"

        asset = await remote_store.put(wrap(data), desired_identifier="badge_1_abcdef")

        assert asset.identifier == "portfolio/projects/badge_1_abcdef"
        assert data in fake_cloudinary.upload_requests()[0].read()

    @pytest.mark.asyncio
    async def test_rejected_upload_cleans_staged_file(self, remote_store, fake_cloudinary, tmp_path):
        fake_cloudinary.fail_uploads = True
        staged = staged_file(tmp_path)
        path = staged.path

        with pytest.raises(RemoteUploadFailedError) as exc_info:
            await remote_store.put(staged)

        assert exc_info.value.status_code == 500
        assert "Invalid image file" in exc_info.value.message
        assert not path.exists()
        staged.discard()

    @pytest.mark.asyncio
    async def test_network_error_is_translated(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = store_with(handler)
        staged = staged_file(tmp_path)
        path = staged.path

        with pytest.raises(RemoteUploadFailedError) as exc_info:
            await store.put(staged)

        assert "connection refused" in exc_info.value.message
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_response_without_public_id_fails(self, tmp_path):
        store = store_with(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(RemoteUploadFailedError):
            await store.put(staged_file(tmp_path))


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, remote_store, fake_cloudinary, tmp_path):
        asset = await remote_store.put(staged_file(tmp_path))

        first = await remote_store.delete(asset.identifier)
        second = await remote_store.delete(asset.identifier)

        assert first.success is True
        assert first.result == "ok"
        assert second.success is False
        assert second.result == "not found"

    @pytest.mark.asyncio
    async def test_delete_sends_signed_invalidation(self, remote_store, fake_cloudinary):
        await remote_store.delete("portfolio/projects/x")

        request = fake_cloudinary.requests[-1]
        form = parse_qs(request.content.decode())
        assert form["public_id"] == ["portfolio/projects/x"]
        assert form["invalidate"] == ["true"]
        assert "signature" in form

    @pytest.mark.asyncio
    async def test_delete_transport_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = await store_with(handler).delete("portfolio/projects/x")

        assert result.success is False
        assert result.result.startswith("error:")

    @pytest.mark.asyncio
    async def test_batch_delete_continues_after_failure(self, remote_store, fake_cloudinary):
        fake_cloudinary.resources["a"] = "2024-01-01T00:00:00Z"
        fake_cloudinary.resources["c"] = "2024-01-01T00:00:00Z"

        results = await remote_store.batch_delete(["a", "b", "c"])

        assert [r.identifier for r in results] == ["a", "b", "c"]
        assert [r.success for r in results] == [True, False, True]


def test_derive_url_is_deterministic():
    store = RemoteAssetStore(CONFIG, client=httpx.AsyncClient())
    first = store.derive_url("portfolio/projects/x", 400, 300, "fit")
    second = store.derive_url("portfolio/projects/x", 400, 300, "fit")

    assert first == second
    assert "c_fit,g_center,h_300,w_400" in first


class TestSweep:
    @pytest.mark.asyncio
    async def test_sweep_follows_pagination(self, remote_store, fake_cloudinary):
        fake_cloudinary.page_size = 2
        for i in range(5):
            fake_cloudinary.resources[f"portfolio/projects/old{i}"] = "2020-01-01T00:00:00Z"
        fake_cloudinary.resources["portfolio/projects/fresh"] = "2999-01-01T00:00:00Z"
        fake_cloudinary.resources["elsewhere/old"] = "2020-01-01T00:00:00Z"

        result = await remote_store.sweep_older_than(30)

        assert result.deletedCount == 5
        assert result.errors == []
        assert set(fake_cloudinary.resources) == {"portfolio/projects/fresh", "elsewhere/old"}

        list_requests = [r for r in fake_cloudinary.requests if r.method == "GET"]
        assert len(list_requests) == 3
        assert list_requests[0].headers["authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_listing_stops_on_repeated_cursor(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(
                200,
                json={
                    "resources": [{"public_id": f"portfolio/projects/p{len(calls)}"}],
                    "next_cursor": "stuck",
                },
            )

        resources = await store_with(handler).list_resources("portfolio/projects")

        assert len(calls) == 2
        assert [r["public_id"] for r in resources] == [
            "portfolio/projects/p1",
            "portfolio/projects/p2",
        ]

    @pytest.mark.asyncio
    async def test_sweep_reports_listing_failure(self):
        store = store_with(lambda request: httpx.Response(401, json={"error": {"message": "bad"}}))

        result = await store.sweep_older_than(30)

        assert result.deletedCount == 0
        assert len(result.errors) == 1

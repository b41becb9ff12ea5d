"""
Pytest configuration and fixtures
"""

import io
import re
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from portfolio.main import app
from portfolio.services.contact_repository import ContactRepository
from portfolio.services.local_asset_store import LocalAssetStore
from portfolio.services.project_repository import ProjectRepository
from portfolio.services.remote_asset_store import RemoteAssetStore, RemoteStoreConfig
from portfolio.services.skill_repository import SkillRepository
from portfolio.services.staging import StagingArea
from portfolio.services.store_factory import (
    get_asset_store,
    get_contact_repository,
    get_project_repository,
    get_skill_repository,
    get_staging_area,
)


def make_image_bytes(fmt: str = "JPEG", size=(640, 480), padding: int = 0) -> bytes:
    """Render a solid-colour image with Pillow, optionally padded with trailing bytes."""
    buffer = io.BytesIO()
    mode = "RGBA" if fmt == "PNG" else "RGB"
    Image.new(mode, size, (200, 40, 40)).save(buffer, format=fmt)
    return buffer.getvalue() + b"\0" * padding


class FakeCloudinary:
    """
    In-memory stand-in for the Cloudinary Upload and Admin APIs.

    Mounted on an httpx.MockTransport; records every request it receives.
    """

    def __init__(self, cloud_name: str = "demo"):
        self.cloud_name = cloud_name
        self.resources = {}
        self.requests = []
        self.fail_uploads = False
        self.page_size = None

    def _form_value(self, body: bytes, name: str):
        match = re.search(
            rb'name="' + name.encode() + rb'"\r\n\r\n([^\r]*)\r\n', body
        )
        return match.group(1).decode() if match else None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/image/upload") and request.method == "POST":
            if self.fail_uploads:
                return httpx.Response(400, json={"error": {"message": "Invalid image file"}})
            body = request.read()
            folder = self._form_value(body, "folder")
            public_id = self._form_value(body, "public_id")
            full_id = f"{folder}/{public_id}" if folder else public_id
            self.resources[full_id] = "2024-01-01T00:00:00Z"
            return httpx.Response(
                200,
                json={
                    "public_id": full_id,
                    "secure_url": f"https://res.cloudinary.com/{self.cloud_name}/image/upload/v1/{full_id}.jpg",
                    "width": 640,
                    "height": 480,
                    "format": "jpg",
                    "bytes": 1234,
                },
            )

        if path.endswith("/image/destroy"):
            form = parse_qs(request.read().decode())
            public_id = form["public_id"][0]
            if self.resources.pop(public_id, None) is None:
                return httpx.Response(200, json={"result": "not found"})
            return httpx.Response(200, json={"result": "ok"})

        if path.endswith("/resources/image/upload"):
            prefix = request.url.params.get("prefix", "")
            matching = sorted(
                (pid, created) for pid, created in self.resources.items()
                if pid.startswith(prefix)
            )
            start = int(request.url.params.get("next_cursor", "0"))
            size = self.page_size or len(matching) or 1
            page = matching[start:start + size]
            payload = {
                "resources": [{"public_id": pid, "created_at": created} for pid, created in page]
            }
            if start + size < len(matching):
                payload["next_cursor"] = str(start + size)
            return httpx.Response(200, json=payload)

        return httpx.Response(404, json={"error": {"message": "Unknown endpoint"}})

    def upload_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/image/upload")]


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG", size=(300, 500))


@pytest.fixture
def local_store(tmp_path):
    store = LocalAssetStore(
        root=str(tmp_path / "uploads"),
        base_url="http://testserver",
        public_prefix="uploads",
        thumbnail_size=200,
    )
    store.ensure_directories()
    return store


@pytest.fixture
def staging(tmp_path):
    area = StagingArea(str(tmp_path / "staging"))
    area.ensure()
    return area


@pytest.fixture
def repository(tmp_path):
    repo = ProjectRepository(base_path=str(tmp_path / "data"))
    repo.ensure()
    return repo


@pytest.fixture
def skill_repository(tmp_path):
    return SkillRepository(base_path=str(tmp_path / "data"))


@pytest.fixture
def contact_repository(tmp_path):
    return ContactRepository(base_path=str(tmp_path / "data"))


@pytest.fixture
def fake_cloudinary():
    return FakeCloudinary()


@pytest.fixture
def remote_store(fake_cloudinary):
    config = RemoteStoreConfig(
        cloud_name="demo",
        api_key="key123",
        api_secret="secret456",
        folder="portfolio/projects",
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_cloudinary.handler))
    return RemoteAssetStore(config, client=client)


def _client_for(store, staging, repository, skills=None, contacts=None):
    app.dependency_overrides[get_asset_store] = lambda: store
    app.dependency_overrides[get_staging_area] = lambda: staging
    app.dependency_overrides[get_project_repository] = lambda: repository
    if skills is not None:
        app.dependency_overrides[get_skill_repository] = lambda: skills
    if contacts is not None:
        app.dependency_overrides[get_contact_repository] = lambda: contacts
    return TestClient(app)


@pytest.fixture
def client(local_store, staging, repository, skill_repository, contact_repository):
    """FastAPI test client wired to a local store under tmp_path"""
    yield _client_for(local_store, staging, repository, skill_repository, contact_repository)
    app.dependency_overrides.clear()


@pytest.fixture
def remote_client(remote_store, staging, repository):
    """FastAPI test client wired to the fake Cloudinary store"""
    yield _client_for(remote_store, staging, repository)
    app.dependency_overrides.clear()


@pytest.fixture
def image_factory():
    """Build image bytes: image_factory(fmt, size, padding)"""
    return make_image_bytes

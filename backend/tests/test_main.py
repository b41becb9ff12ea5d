"""
Test cases for main API endpoints
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from portfolio.main import app


def test_root_endpoint(client):
    """Test root endpoint returns correct response"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "service" in data
    assert "version" in data


def test_health_check_endpoint(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["storageBackend"] in ("local", "remote")
    assert "timestamp" in data
    assert "version" in data


def test_api_health_endpoint(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Server is running"


def test_storage_health_reports_backend_without_secrets(remote_client):
    """Storage health names the backend and never echoes credentials"""
    with patch("portfolio.routes.health.settings") as mock_settings:
        mock_settings.CLOUDINARY_CLOUD_NAME = "demo"
        mock_settings.CLOUDINARY_API_KEY = "key123"
        mock_settings.CLOUDINARY_API_SECRET = "secret456"
        response = remote_client.get("/api/storage/health")

    assert response.status_code == 200
    data = response.json()
    assert data["backend"] == "remote"
    assert data["cloudName"] == "demo"
    assert data["hasApiKey"] is True
    assert data["hasApiSecret"] is True
    assert "key123" not in response.text
    assert "secret456" not in response.text


def test_docs_accessible(client):
    """Test that API documentation is accessible"""
    response = client.get("/docs")
    assert response.status_code == 200


def test_unexpected_error_hides_details(client):
    """Unhandled exceptions become a generic 500 outside debug mode"""
    with patch(
        "portfolio.services.project_repository.ProjectRepository.list",
        side_effect=RuntimeError("disk on fire"),
    ):
        response = client.get("/api/projects")

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Internal server error"
    assert "disk on fire" not in response.text


def test_lifespan_prepares_directories(tmp_path):
    """Startup creates the staging and document directories"""
    with patch("portfolio.main.get_staging_area") as mock_staging, \
            patch("portfolio.main.get_project_repository") as mock_repo, \
            patch("portfolio.main.get_skill_repository") as mock_skills, \
            patch("portfolio.main.get_contact_repository") as mock_contacts, \
            patch("portfolio.main.get_asset_store") as mock_store, \
            patch("portfolio.main.reset_store") as mock_reset:
        with TestClient(app) as client:
            assert client.get("/").status_code == 200

    mock_staging.return_value.ensure.assert_called_once()
    mock_repo.return_value.ensure.assert_called_once()
    mock_skills.return_value.ensure.assert_called_once()
    mock_contacts.return_value.ensure.assert_called_once()
    mock_store.assert_called_once()
    mock_reset.assert_awaited_once()

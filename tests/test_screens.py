"""
Tests for screen image upload and serving
"""

from conftest import JPEG_1X1, PNG_HEADER, TEST_DEVICE_ID


def _upload(client, content, content_type, device_id=TEST_DEVICE_ID):
    return client.post(
        f"/api/screens/{device_id}/image",
        content=content,
        headers={"Content-Type": content_type},
    )


def test_upload_image(client):
    """Test that an upload returns the normalized id and image path."""
    response = _upload(client, JPEG_1X1, "image/jpeg")
    assert response.status_code == 200
    data = response.json()
    screen_id = TEST_DEVICE_ID.lower()
    assert data == {"id": screen_id, "path": f"/screens/{screen_id}.jpg"}


def test_upload_png_image(client):
    response = _upload(client, PNG_HEADER, "image/png")
    assert response.status_code == 200
    assert response.json()["path"].endswith(".png")


def test_upload_rejects_non_image(client):
    """Test that a non-image Content-Type is a client error."""
    response = _upload(client, b"hello", "text/plain")
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_content_type"


def test_rejected_upload_keeps_existing_image(client):
    _upload(client, JPEG_1X1, "image/jpeg")
    assert _upload(client, b"hello", "text/plain").status_code == 400

    response = client.get(f"/screens/{TEST_DEVICE_ID}.jpg")
    assert response.status_code == 200
    assert response.content == JPEG_1X1


def test_serve_uploaded_image(client):
    """Test the 1x1 JPEG scenario with a MAC-address device id."""
    _upload(client, JPEG_1X1, "image/jpeg")

    response = client.get("/screens/aa:bb:cc:dd:ee:ff.jpg")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert len(response.content) == len(JPEG_1X1)
    assert response.content == JPEG_1X1


def test_serve_is_case_insensitive(client):
    _upload(client, JPEG_1X1, "image/jpeg")

    response = client.get(f"/screens/{TEST_DEVICE_ID}.jpg")
    assert response.status_code == 200
    assert response.content == JPEG_1X1


def test_serve_image_with_wrong_format_returns_404(client):
    """Test that a stored JPEG is not served under .png."""
    _upload(client, JPEG_1X1, "image/jpeg")

    response = client.get(f"/screens/{TEST_DEVICE_ID}.png")
    assert response.status_code == 404


def test_png_upload_replaces_jpg(client):
    """Test that switching formats leaves a single stored file."""
    _upload(client, JPEG_1X1, "image/jpeg")
    _upload(client, PNG_HEADER, "image/png")

    assert client.get(f"/screens/{TEST_DEVICE_ID}.jpg").status_code == 404
    response = client.get(f"/screens/{TEST_DEVICE_ID}.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == PNG_HEADER


def test_serve_without_extension(client):
    """Test the jpg-then-png lookup for extensionless paths."""
    _upload(client, PNG_HEADER, "image/png")

    response = client.get(f"/screens/{TEST_DEVICE_ID}")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"


def test_serve_unknown_screen_returns_404(client):
    assert client.get("/screens/nobody.jpg").status_code == 404
    assert client.get("/screens/nobody.png").status_code == 404
    assert client.get("/screens/nobody").status_code == 404


def test_upload_before_setup_is_served(client):
    """Test that uploads work for screens the devices never announced."""
    _upload(client, JPEG_1X1, "image/jpeg", device_id="fresh")

    assert client.get("/screens/fresh.jpg").status_code == 200
    screen = client.app.state.registry.get("fresh")
    assert screen.image_path == "/screens/fresh.jpg"


def test_health_check(client):
    """Test health check endpoint."""
    for path in ("/", "/health"):
        response = client.get(path)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "trmnl" in data["service"]


def _deny_open(*args, **kwargs):
    raise PermissionError("denied")


def test_upload_storage_failure_returns_500(client, monkeypatch):
    """Test that a failed write surfaces as a generic storage error."""
    monkeypatch.setattr("aiofiles.open", _deny_open)

    response = _upload(client, JPEG_1X1, "image/jpeg")
    assert response.status_code == 500
    assert response.json() == {
        "error": "storage_error",
        "message": "Image storage operation failed",
    }
    assert client.app.state.registry.get(TEST_DEVICE_ID) is None


def test_serve_read_failure_returns_500(client, monkeypatch):
    _upload(client, JPEG_1X1, "image/jpeg")
    monkeypatch.setattr("aiofiles.open", _deny_open)

    response = client.get(f"/screens/{TEST_DEVICE_ID}.jpg")
    assert response.status_code == 500
    assert response.json()["error"] == "storage_error"


def test_upload_rejects_unsafe_screen_id(client):
    """Test that ids which are not plain file names are a client error."""
    response = _upload(client, JPEG_1X1, "image/jpeg", device_id="a%5Cb")
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_screen_id"
    assert list(client.app.state.image_store.data_root.iterdir()) == []

# =============================================================================
# tests/test_upload.py - Image Upload Tests
# =============================================================================
# Tests for /api/v1/upload and the files it serves under /uploads.
#
# Run with: pytest tests/test_upload.py -v
# =============================================================================

import re
from unittest.mock import patch

import pytest

from core.services.storage_service import StorageService

UPLOAD_URL = "/api/v1/upload"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestFileNames:
    """Generated names are unique and keep an image extension."""

    def test_generated_name_shape(self):
        name = StorageService.generate_file_name("photo.PNG", "image/png")
        assert re.fullmatch(r"\d+_[0-9a-f]{13}\.png", name)

    def test_extension_from_mime_when_name_has_none(self):
        assert StorageService.generate_file_name("blob", "image/webp").endswith(".webp")

    def test_non_image_extension_replaced(self):
        assert StorageService.generate_file_name("evil.php", "image/gif").endswith(".gif")

    def test_names_differ(self):
        names = {StorageService.generate_file_name("a.jpg", "image/jpeg") for _ in range(20)}
        assert len(names) == 20

    @pytest.mark.parametrize("name", ["", ".", "..", "../secret.png", "a/b.png", "a\\b.png"])
    def test_unsafe_names_rejected(self, name):
        from app.exceptions import InvalidFileNameError

        with pytest.raises(InvalidFileNameError):
            StorageService.validate_file_name(name)


class TestUploadImage:
    """POST /upload"""

    def test_upload_and_serve(self, client, upload_dir):
        response = client.post(UPLOAD_URL, files={"file": ("photo.png", PNG_BYTES, "image/png")})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["url"] == f"/uploads/{body['file_name']}"
        assert body["size"] == len(PNG_BYTES)
        assert body["type"] == "image/png"
        assert (upload_dir / body["file_name"]).read_bytes() == PNG_BYTES

        served = client.get(body["url"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_invalid_type(self, client, upload_dir):
        response = client.post(UPLOAD_URL, files={"file": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"
        assert list(upload_dir.iterdir()) == []

    def test_too_large(self, client, upload_dir):
        content = b"\x00" * (5 * 1024 * 1024 + 1)

        response = client.post(UPLOAD_URL, files={"file": ("big.jpg", content, "image/jpeg")})

        assert response.status_code == 400
        assert response.json()["detail"] == "File size too large. Maximum size is 5MB."
        assert response.json()["code"] == "FILE_TOO_LARGE"
        assert list(upload_dir.iterdir()) == []

    def test_exactly_max_size_accepted(self, client, upload_dir):
        content = b"\x00" * (5 * 1024 * 1024)

        response = client.post(UPLOAD_URL, files={"file": ("max.jpg", content, "image/jpeg")})

        assert response.status_code == 201

    def test_missing_file(self, client):
        response = client.post(UPLOAD_URL)

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields: file"

    def test_write_failure(self, client, upload_dir):
        with patch("pathlib.Path.write_bytes", side_effect=OSError("disk full")):
            response = client.post(UPLOAD_URL, files={"file": ("a.png", PNG_BYTES, "image/png")})

        assert response.status_code == 500
        assert response.json()["code"] == "STORAGE_ERROR"


class TestDeleteImage:
    """DELETE /upload"""

    def test_delete(self, client, upload_dir):
        uploaded = client.post(UPLOAD_URL, files={"file": ("a.gif", b"GIF89a", "image/gif")}).json()

        response = client.delete(UPLOAD_URL, params={"file_name": uploaded["file_name"]})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert not (upload_dir / uploaded["file_name"]).exists()

    def test_delete_missing(self, client, upload_dir):
        response = client.delete(UPLOAD_URL, params={"file_name": "123_abc.png"})

        assert response.status_code == 404
        assert response.json()["detail"] == "File not found"

    def test_path_traversal_rejected(self, client, upload_dir):
        response = client.delete(UPLOAD_URL, params={"file_name": "../conftest.py"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid file name"

"""
Integration tests for the product image (blob container) pages.
"""

from azure.core.exceptions import HttpResponseError


class TestListBlobs:
    def test_empty_listing(self, client):
        response = client.get("/blob")

        assert response.status_code == 200
        assert "Nothing uploaded yet." in response.text

    def test_listing_links_rename(self, client, container_client):
        container_client.blobs["red shoe.png"] = b"x"

        response = client.get("/blob")

        assert "red shoe.png" in response.text
        assert "name=red%20shoe.png" in response.text


class TestUploadBlob:
    def test_upload(self, client, container_client):
        response = client.post(
            "/blob/upload",
            files={"file": ("shoe.png", b"\x89PNG-data", "image/png")},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"].endswith("/blob")
        assert container_client.blobs == {"shoe.png": b"\x89PNG-data"}

    def test_upload_overwrites(self, client, container_client):
        container_client.blobs["shoe.png"] = b"old"

        client.post("/blob/upload", files={"file": ("shoe.png", b"new", "image/png")})

        assert container_client.blobs["shoe.png"] == b"new"

    def test_empty_upload_is_ignored(self, client, container_client):
        response = client.post(
            "/blob/upload",
            files={"file": ("empty.png", b"", "image/png")},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert "upload_blob" not in container_client.calls

    def test_missing_file_is_ignored(self, client, container_client):
        response = client.post("/blob/upload", data={}, follow_redirects=False)

        assert response.status_code == 303
        assert container_client.blobs == {}


class TestDeleteBlob:
    def test_delete(self, client, container_client):
        container_client.blobs["shoe.png"] = b"x"

        response = client.post("/blob/delete", data={"name": "shoe.png"}, follow_redirects=False)

        assert response.status_code == 303
        assert container_client.blobs == {}

    def test_delete_missing_is_ignored(self, client):
        response = client.post("/blob/delete", data={"name": "ghost.png"}, follow_redirects=False)

        assert response.status_code == 303


class TestRenameBlob:
    def test_rename_form(self, client):
        response = client.get("/blob/rename", params={"name": "shoe.png"})

        assert response.status_code == 200
        assert 'value="shoe.png"' in response.text
        assert "copies the blob" in response.text

    def test_rename_form_blank_name(self, client):
        assert client.get("/blob/rename").status_code == 404

    def test_rename(self, client, container_client):
        container_client.blobs["a.png"] = b"img"

        response = client.post(
            "/blob/rename",
            data={"oldName": "a.png", "newName": "b.png"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert container_client.blobs == {"b.png": b"img"}

    def test_rename_with_blank_new_name_is_ignored(self, client, container_client):
        container_client.blobs["a.png"] = b"img"

        response = client.post("/blob/rename", data={"oldName": "a.png", "newName": " "}, follow_redirects=False)

        assert response.status_code == 303
        assert "start_copy_from_url" not in container_client.calls

    def test_failed_copy_shows_error_page(self, client, container_client):
        container_client.blobs["a.png"] = b"img"
        container_client.copy_script = ["failed"]

        response = client.post("/blob/rename", data={"oldName": "a.png", "newName": "b.png"})

        assert response.status_code == 502
        assert "BlobCopyFailed" in response.text
        assert container_client.blobs == {"a.png": b"img"}


class TestStorageFailures:
    def test_listing_failure_renders_error_page(self, client, container_client):
        error = HttpResponseError(message="This request is not authorized")
        error.status_code = 403
        container_client.failures["list_blob_names"] = error

        response = client.get("/blob", headers={"x-correlation-id": "req-789"})

        assert response.status_code == 502
        assert "StorageOperationFailed" in response.text
        assert "req-789" in response.text
        assert response.headers["x-correlation-id"] == "req-789"

"""
Tests for the local resume store
"""
import pytest

from core.exceptions import ValidationException
from infrastructure.storage.local_file_store import LocalFileStore


class TestLocalFileStore:
    """Test suite for LocalFileStore"""

    @pytest.mark.asyncio
    async def test_save_generates_unique_names(self, file_store):
        first = await file_store.save("My Resume.pdf", b"%PDF-1.4 one", "application/pdf")
        second = await file_store.save("My Resume.pdf", b"%PDF-1.4 two", "application/pdf")

        assert first.file_name != second.file_name
        assert first.file_name.startswith("My-Resume-")
        assert first.file_name.endswith(".pdf")
        assert first.url == f"/uploads/applications/{first.file_name}"
        assert first.size == len(b"%PDF-1.4 one")
        assert file_store.resolve(first.url).read_bytes() == b"%PDF-1.4 one"

    @pytest.mark.asyncio
    async def test_rejects_extension(self, file_store):
        with pytest.raises(ValidationException) as exc_info:
            await file_store.save("payload.exe", b"MZ")
        assert exc_info.value.field == "cv"

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, tmp_path):
        store = LocalFileStore(base_path=str(tmp_path), max_size_bytes=10)
        with pytest.raises(ValidationException):
            await store.save("cv.pdf", b"x" * 11)

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self, file_store):
        with pytest.raises(ValidationException):
            await file_store.save("cv.pdf", b"")

    @pytest.mark.asyncio
    async def test_delete_existing_file(self, file_store):
        stored = await file_store.save("cv.docx", b"content")

        result = await file_store.delete(stored.url)

        assert result.ok
        assert result.value is True
        assert file_store.resolve(stored.url) is None

    @pytest.mark.asyncio
    async def test_delete_missing_file_is_success(self, file_store):
        result = await file_store.delete("/uploads/applications/never-existed.pdf")
        assert result.ok
        assert result.value is False

    @pytest.mark.asyncio
    async def test_delete_invalid_reference_fails(self, file_store):
        result = await file_store.delete("")
        assert not result.ok

    def test_resolve_stays_inside_upload_dir(self, file_store, tmp_path):
        outside = tmp_path / "secret.txt"
        outside.write_text("secret")

        assert file_store.resolve("/uploads/applications/../secret.txt") is None
        assert file_store.resolve("..") is None

import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from freelance_api.services.file_service import FileService
from conftest import make_freelancer


def make_upload(content=b"\x89PNG....", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(content),
        filename="avatar.png",
        headers=Headers({"content-type": content_type}),
    )


def test_upload_stores_file_under_owner_directory(tmp_path):
    service = FileService(upload_dir=tmp_path)
    result = asyncio.run(service.upload_file(make_freelancer(), make_upload()))

    assert result["key"].startswith("freelancers/f-1/")
    assert result["key"].endswith(".png")
    assert result["link"].endswith(result["key"])
    assert (tmp_path / result["key"]).read_bytes() == b"\x89PNG...."


def test_upload_rejects_unsupported_type(tmp_path):
    service = FileService(upload_dir=tmp_path)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.upload_file(make_freelancer(), make_upload(content_type="application/pdf")))
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["type"] == "INVALID_MIMETYPE"


def test_upload_rejects_large_file(tmp_path, monkeypatch):
    monkeypatch.setattr("freelance_api.services.file_service.settings.UPLOAD_MAX_SIZE", 4)
    service = FileService(upload_dir=tmp_path)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.upload_file(make_freelancer(), make_upload(content=b"12345")))
    assert exc_info.value.detail["type"] == "FILE_SIZE"


def test_delete_own_file(tmp_path):
    service = FileService(upload_dir=tmp_path)
    freelancer = make_freelancer()
    result = asyncio.run(service.upload_file(freelancer, make_upload()))

    asyncio.run(service.delete_file(freelancer, result["key"]))
    assert not (tmp_path / result["key"]).exists()


@pytest.mark.parametrize("key", ["freelancers/f-2/1.png", "freelancers/f-1/../f-2/1.png", "../secret.png"])
def test_cannot_delete_files_of_others(tmp_path, key):
    service = FileService(upload_dir=tmp_path)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.delete_file(make_freelancer(), key))
    assert exc_info.value.detail["type"] == "INVALID_PARAMETERS"


def test_delete_missing_file(tmp_path):
    service = FileService(upload_dir=tmp_path)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.delete_file(make_freelancer(), "freelancers/f-1/missing.png"))
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail["type"] == "DELETION_FAILED"

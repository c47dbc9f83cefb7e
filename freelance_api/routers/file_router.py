# freelance_api/routers/file_router.py
from fastapi import APIRouter, Depends, File, UploadFile
from freelance_api.core.security import get_current_freelancer
from freelance_api.models.freelancer import Freelancer
from freelance_api.services.file_service import FileService
from freelance_api.schemas.file_schema import FileUploadOut, FileDeleteRequest

router = APIRouter(
    prefix="/file",
    tags=["File"],
)

@router.post("", response_model=FileUploadOut)
async def upload_file(
    file: UploadFile = File(...),
    current_freelancer: Freelancer = Depends(get_current_freelancer)
):
    """
    上傳圖片 (jpeg / png / gif / webp，最大 5 MB)，回傳 {link, key}
    """
    service = FileService()
    return await service.upload_file(current_freelancer, file)

@router.delete("")
async def delete_file(
    data: FileDeleteRequest,
    current_freelancer: Freelancer = Depends(get_current_freelancer)
):
    """
    刪除自己上傳的檔案 (fileName 即上傳時回傳的 key)
    """
    service = FileService()
    await service.delete_file(current_freelancer, data.file_name)
    return {"status": "success"}

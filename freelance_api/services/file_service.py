# freelance_api/services/file_service.py
# 工作者頭像等圖片的上傳 / 刪除
import logging
import os
import time
from pathlib import Path
import aiofiles
import aiofiles.os
from fastapi import HTTPException, UploadFile, status
from freelance_api.core.config import settings
from freelance_api.models.freelancer import Freelancer

logger = logging.getLogger(__name__)

# --- 檔案上傳設定 ---
UPLOAD_DIR = Path(settings.UPLOAD_DIR).resolve()
os.makedirs(UPLOAD_DIR, exist_ok=True)

ALLOWED_MIMETYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


class FileService:
    def __init__(self, upload_dir: Path = UPLOAD_DIR):
        self.upload_dir = upload_dir

    def _key_prefix(self, freelancer: Freelancer) -> str:
        # 每位工作者只能存取自己的目錄
        return f"freelancers/{freelancer.freelancer_id}/"

    async def upload_file(self, freelancer: Freelancer, file: UploadFile) -> dict:
        """
        儲存上傳的圖片，回傳 {link, key}
        - 僅支援 jpeg / png / gif / webp
        - 大小上限 UPLOAD_MAX_SIZE (預設 5 MB)
        """
        if file is None:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, {"type": "NO_FILE", "message": "請選擇檔案"})
        if file.content_type not in ALLOWED_MIMETYPES:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, {"type": "INVALID_MIMETYPE", "message": "檔案格式不支援"})

        content = await file.read()
        if len(content) > settings.UPLOAD_MAX_SIZE:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, {"type": "FILE_SIZE", "message": "檔案過大"})

        extension = file.content_type.split("/")[1]
        key = f"{self._key_prefix(freelancer)}{int(time.time() * 1000)}.{extension}"
        file_path = self.upload_dir / key

        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"檔案儲存失敗: {e}", exc_info=True)
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"type": "UPLOAD_FAILED", "message": "檔案上傳失敗"}
            )

        logger.info(f"File uploaded: {key}")
        return {"link": f"{settings.UPLOAD_URL_PREFIX}/{key}", "key": key}

    async def delete_file(self, freelancer: Freelancer, key: str) -> None:
        """
        刪除自己上傳過的檔案 (key 必須在自己的目錄下)
        """
        file_path = (self.upload_dir / key).resolve()
        own_dir = (self.upload_dir / self._key_prefix(freelancer)).resolve()
        if own_dir not in file_path.parents:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, {"type": "INVALID_PARAMETERS", "message": "無效的檔案名稱"})

        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            logger.error(f"檔案刪除失敗: {e}", exc_info=True)
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"type": "DELETION_FAILED", "message": "無法刪除檔案"}
            )

        logger.info(f"File deleted: {key}")

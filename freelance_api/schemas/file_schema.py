# freelance_api/schemas/file_schema.py
from pydantic import Field
from freelance_api.schemas.common_schema import CamelModel

class FileUploadOut(CamelModel):
    link: str
    key: str

class FileDeleteRequest(CamelModel):
    file_name: str = Field(..., min_length=1, description="上傳時回傳的 key")

# freelance_api/routers/search_router.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.database import get_db
from freelance_api.services.search_service import SearchService
from freelance_api.schemas.search_schema import FreelancerSearchOut

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/search",
    tags=["Search"]
)

@router.get("/freelancer", response_model=FreelancerSearchOut, summary="搜尋公開的工作者")
async def search_freelancers(
    db: AsyncSession = Depends(get_db),
    # 關鍵字 (必填)
    query: str = Query(..., min_length=1),
    # 頁碼 (從 1 開始，每頁 20 筆)
    page: int = Query(1, ge=1),
    # 國家代碼，以逗號分隔 (e.g. FR,BE)
    locations: Optional[str] = Query(None),
    # 時薪區間 (含邊界)
    min_hourly_rate: Optional[float] = Query(None, alias="minHourlyRate", ge=0),
    max_hourly_rate: Optional[float] = Query(None, alias="maxHourlyRate", ge=0),
    # 語言代碼，以逗號分隔 (e.g. fr,en)
    languages: Optional[str] = Query(None),
):
    """
    依關鍵字搜尋「公開」的工作者 (資料不完整或未確認的帳號不會出現)。
    """
    if not query.strip():
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, "請輸入搜尋關鍵字")

    service = SearchService(db)
    return await service.search_freelancers(
        query=query,
        page=page,
        locations=locations,
        min_hourly_rate=min_hourly_rate,
        max_hourly_rate=max_hourly_rate,
        languages=languages,
    )

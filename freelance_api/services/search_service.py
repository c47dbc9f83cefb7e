# freelance_api/services/search_service.py
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.repositories.search_repo import (
    FreelancerSearchQuery, SearchRepository, page_count
)

logger = logging.getLogger(__name__)

def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """'FR,de , ' -> ['FR', 'de']；空值回傳 None"""
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None

class SearchService:
    def __init__(self, db: AsyncSession):
        self.repo = SearchRepository(db)

    async def search_freelancers(
        self,
        query: str,
        page: int = 1,
        locations: Optional[str] = None,
        min_hourly_rate: Optional[float] = None,
        max_hourly_rate: Optional[float] = None,
        languages: Optional[str] = None,
    ) -> dict:
        """
        (核心功能) 搜尋公開的工作者
        1. 公開條件 (資料完整 + 已確認) 永遠套用
        2. 關鍵字 (query): 必填
        3. 地區 (locations)、時薪區間、語言 (languages): 有傳入才套用
        """
        country_codes = split_csv(locations)
        if country_codes:
            country_codes = [code.upper() for code in country_codes]
        language_codes = split_csv(languages)
        if language_codes:
            language_codes = [code.lower() for code in language_codes]

        search_query = (
            FreelancerSearchQuery(query)
            .with_locations(country_codes)
            .with_hourly_rate(min_hourly_rate, max_hourly_rate)
            .with_languages(language_codes)
        )
        logger.info(
            f"Searching freelancers: terms={search_query.terms}, page={page}, "
            f"locations={country_codes}, rate=[{min_hourly_rate}, {max_hourly_rate}], languages={language_codes}"
        )

        rows, total = await self.repo.search_freelancers(search_query, page)

        freelancers = [
            {
                "freelancer_id": row["freelancer_id"],
                "image": row["image"],
                "first_name": row["first_name"],
                "last_name": row["last_name"],
                "title": row["title"],
                "presentation_text": row["presentation_text"],
                "hourly_rate": row["hourly_rate"],
                "location": {"country_code": row["location_country_code"]},
                "skills": row["skills"] or [],
            }
            for row in rows
        ]

        return {
            "freelancers": freelancers,
            "total_freelancers": total,
            "nb_pages": page_count(total),
        }

# freelance_api/repositories/search_repo.py
# 工作者搜尋：組合「公開條件 + 關鍵字 + 選填篩選條件」的查詢
import logging
import math
from typing import List, Optional, Tuple
from sqlalchemy import String, and_, case, cast, func, literal, or_, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.language import FreelancerLanguage
from freelance_api.utils.visibility import public_profile_conditions

logger = logging.getLogger(__name__)

PAGE_SIZE = 20

# 關鍵字比對的欄位
TEXT_SEARCH_COLUMNS = (
    Freelancer.title,
    Freelancer.presentation_text,
    Freelancer.first_name,
    Freelancer.last_name,
    cast(Freelancer.skills, String),
)


def page_offset(page: int) -> int:
    """第 1 頁 => offset 0"""
    return (page - 1) * PAGE_SIZE


def page_count(total: int) -> int:
    return math.ceil(total / PAGE_SIZE)


def split_terms(text: str) -> List[str]:
    # 以空白切開關鍵字，轉小寫並去除重複
    terms = []
    for term in text.lower().split():
        if term not in terms:
            terms.append(term)
    return terms


class FreelancerSearchQuery:
    """
    搜尋條件累加器：
    一開始就帶入「必要」條件 (公開條件 + 關鍵字)，
    其餘篩選 (地區、時薪、語言) 只有在有傳入值時才會加上 (AND)。
    """

    def __init__(self, text: str):
        self.terms = split_terms(text)
        self.conditions = [*public_profile_conditions(), self._text_condition()]

    def _term_matches(self, column, term: str):
        return func.lower(column).contains(term, autoescape=True)

    def _text_condition(self):
        # 任一關鍵字出現在任一欄位即符合
        if not self.terms:
            return true()
        return or_(*[
            self._term_matches(column, term)
            for term in self.terms
            for column in TEXT_SEARCH_COLUMNS
        ])

    def with_locations(self, country_codes: Optional[List[str]]) -> "FreelancerSearchQuery":
        if country_codes:
            self.conditions.append(Freelancer.location_country_code.in_(country_codes))
        return self

    def with_hourly_rate(
        self, min_rate: Optional[float], max_rate: Optional[float]
    ) -> "FreelancerSearchQuery":
        # 兩者都有時合併成一個區間 (含邊界)
        if min_rate is not None and max_rate is not None:
            self.conditions.append(Freelancer.hourly_rate.between(min_rate, max_rate))
        elif min_rate is not None:
            self.conditions.append(Freelancer.hourly_rate >= min_rate)
        elif max_rate is not None:
            self.conditions.append(Freelancer.hourly_rate <= max_rate)
        return self

    def with_languages(self, language_codes: Optional[List[str]]) -> "FreelancerSearchQuery":
        # 至少會說其中一種語言 (EXISTS 子查詢，不會產生重複列)
        if language_codes:
            self.conditions.append(
                Freelancer.languages.any(FreelancerLanguage.code.in_(language_codes))
            )
        return self

    def relevance(self):
        """相關度 = 命中的 (關鍵字, 欄位) 組合數"""
        hits = [
            case((self._term_matches(column, term), 1), else_=0)
            for term in self.terms
            for column in TEXT_SEARCH_COLUMNS
        ]
        if not hits:
            return literal(0)
        return sum(hits[1:], hits[0])

    def where_clause(self):
        return and_(*self.conditions)

    def count_statement(self):
        return select(func.count()).select_from(Freelancer).where(self.where_clause())

    def page_statement(self, page: int):
        """
        只取列表需要的欄位。
        排序：相關度高到低 -> 建立時間新到舊 -> ID，確保翻頁時順序固定
        """
        relevance = self.relevance().label("relevance")
        return (
            select(
                Freelancer.freelancer_id,
                Freelancer.image,
                Freelancer.first_name,
                Freelancer.last_name,
                Freelancer.title,
                Freelancer.presentation_text,
                Freelancer.hourly_rate,
                Freelancer.location_country_code,
                Freelancer.skills,
                relevance,
            )
            .where(self.where_clause())
            .order_by(
                relevance.desc(),
                Freelancer.created_at.desc(),
                Freelancer.freelancer_id.asc(),
            )
            .offset(page_offset(page))
            .limit(PAGE_SIZE)
        )


class SearchRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_freelancers(self, query: FreelancerSearchQuery, page: int) -> Tuple[list, int]:
        """
        回傳 (該頁資料列, 符合條件的總筆數)
        """
        total = (await self.db.execute(query.count_statement())).scalar_one()
        if total == 0:
            return [], 0

        result = await self.db.execute(query.page_statement(page))
        return result.mappings().all(), total

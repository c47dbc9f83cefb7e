# freelance_api/utils/timeline.py
from datetime import date, datetime, timezone
from typing import List, TypeVar

T = TypeVar("T")


def utc_now() -> datetime:
    # 資料庫中的 DATETIME 欄位一律存 naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def sort_by_end_date_desc(items: List[T]) -> List[T]:
    """
    經歷 / 學歷依結束日期由新到舊排序。
    沒有結束日期 (仍在進行中) 的項目視為最新，排在最前面。
    """
    ongoing = [item for item in items if _end_date(item) is None]
    finished = [item for item in items if _end_date(item) is not None]
    finished.sort(key=_end_date, reverse=True)
    return ongoing + finished


def _end_date(item) -> date | None:
    if isinstance(item, dict):
        return item.get("end_date")
    return getattr(item, "end_date", None)

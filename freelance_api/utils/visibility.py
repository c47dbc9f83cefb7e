# freelance_api/utils/visibility.py
"""
工作者 Profile 的公開條件 (是否可出現在搜尋 / 公開頁面)

一份 Profile 必須「同時」滿足以下六項才算完整：
1. location.town 有值
2. location.countryCode 有值
3. hourlyRate 有值 (且不為 0)
4. title 有值
5. presentationText 有值
6. contact 的 email 或 phone 至少一項有值

另外，帶有 register-confirm 權杖 (尚未確認) 的帳號永遠不公開。

同一組條件有兩種寫法：
- Python 端判斷 (is_freelancer_public / get_missing_fields)：用於單筆資料
- 資料庫端條件 (public_profile_conditions)：用於搜尋與公開查詢的 WHERE
"""
from typing import Any, Dict, List
from sqlalchemy import or_, and_, func
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.token import FreelancerToken, TokenTypeEnum


def _has_value(value: Any) -> bool:
    # None、空字串 (含只有空白)、0 都視為未填
    # 只去除半形空白，與資料庫端 TRIM() 的行為一致
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip(" ") != ""
    return bool(value)


def is_freelancer_public(profile) -> bool:
    """六項完整度條件是否全部成立"""
    return (
        _has_value(profile.location_town)
        and _has_value(profile.location_country_code)
        and _has_value(profile.hourly_rate)
        and _has_value(profile.title)
        and _has_value(profile.presentation_text)
        and (_has_value(profile.contact_email) or _has_value(profile.contact_phone))
    )


def is_freelancer_confirmed(profile) -> bool:
    """沒有任何 register-confirm 權杖即為已確認"""
    return not any(
        token.token_type == TokenTypeEnum.register_confirm
        for token in (profile.tokens or [])
    )


def get_missing_fields(profile) -> Dict[str, Any]:
    """
    回傳「還缺哪些欄位」的清單 (給 Profile 擁有者看)。
    已填寫的欄位不會出現在結果中；location / contact 會再細分子欄位。
    這個函式不會拋出例外。
    """
    missing: Dict[str, Any] = {}

    location_missing = {}
    if not _has_value(profile.location_town):
        location_missing["town"] = True
    if not _has_value(profile.location_country_code):
        location_missing["countryCode"] = True
    if location_missing:
        missing["location"] = location_missing

    if not _has_value(profile.hourly_rate):
        missing["hourlyRate"] = True
    if not _has_value(profile.title):
        missing["title"] = True
    if not _has_value(profile.presentation_text):
        missing["presentationText"] = True

    # email 與 phone 只要有一項即可，兩項都缺才列出
    if not (_has_value(profile.contact_email) or _has_value(profile.contact_phone)):
        missing["contact"] = {"email": True, "phone": True}

    return missing


def _filled(column):
    # 與 _has_value 相同：只有空白的字串視為未填
    return and_(column.isnot(None), func.trim(column) != "")


def public_profile_conditions() -> List:
    """
    與 is_freelancer_public + is_freelancer_confirmed 等價的 SQLAlchemy 條件，
    讓資料庫直接過濾，不必逐筆在應用程式端判斷。
    """
    return [
        _filled(Freelancer.location_town),
        _filled(Freelancer.location_country_code),
        and_(Freelancer.hourly_rate.isnot(None), Freelancer.hourly_rate != 0),
        _filled(Freelancer.title),
        _filled(Freelancer.presentation_text),
        or_(_filled(Freelancer.contact_email), _filled(Freelancer.contact_phone)),
        ~Freelancer.tokens.any(FreelancerToken.token_type == TokenTypeEnum.register_confirm),
    ]

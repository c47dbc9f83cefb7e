# freelance_api/schemas/common_schema.py
import re
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# 前端使用 camelCase (firstName, hourlyRate...)，後端維持 snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True, # 同時接受 snake_case
        from_attributes=True,  # 可直接由 ORM 物件建立
    )


def validate_password_strength(v: str, min_length: int) -> str:
    """
    驗證密碼長度，且必須同時包含英文和數字
    """
    if len(v) < min_length:
        raise ValueError(f'密碼長度至少為 {min_length} 個字元')
    if not re.search(r'(?=.*[a-zA-Z])(?=.*[0-9])', v):
        raise ValueError('密碼必須包含英文和數字')
    return v


def normalize_country_code(v: str | None) -> str | None:
    # 空字串視為清除欄位；其餘必須是兩碼英文字母 (ISO-3166 alpha-2)
    if v is None or v.strip() == "":
        return None
    v = v.strip().upper()
    if not re.fullmatch(r"[A-Z]{2}", v):
        raise ValueError('國家代碼格式錯誤 (ISO-3166 alpha-2)')
    return v


def blank_to_none(v):
    # 文字欄位一律去除前後空白，只有空白時視為清除 (存成 NULL)
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v

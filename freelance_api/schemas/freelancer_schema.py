# freelance_api/schemas/freelancer_schema.py
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, EmailStr, Field, field_validator, model_validator
from freelance_api.core.config import settings
from freelance_api.models.language import LanguageLevelEnum
from freelance_api.schemas.common_schema import (
    CamelModel, validate_password_strength, normalize_country_code, blank_to_none
)
from freelance_api.utils.timeline import sort_by_end_date_desc

# --- 巢狀欄位 ---
class LocationSchema(CamelModel):
    town: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = None

    @field_validator('town', mode='before')
    @classmethod
    def strip_town(cls, v):
        return blank_to_none(v)

    @field_validator('country_code')
    @classmethod
    def validate_country_code(cls, v):
        return normalize_country_code(v)

class ContactSchema(CamelModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator('email', 'phone', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        # 空字串視為清除
        return blank_to_none(v)

class LanguageSchema(CamelModel):
    code: str = Field(..., min_length=2, max_length=8)
    level: LanguageLevelEnum

    @field_validator('code')
    @classmethod
    def lower_code(cls, v: str) -> str:
        return v.strip().lower()

# --- 經歷 (Experience) ---
class ExperienceIn(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    organization: str = Field(..., min_length=1, max_length=255)
    town: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None # 未填表示仍在職
    description: Optional[str] = None

    @field_validator('country_code')
    @classmethod
    def validate_country_code(cls, v):
        return normalize_country_code(v)

    @model_validator(mode='after')
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('結束日期不可早於開始日期')
        return self

class ExperienceOut(CamelModel):
    id: str = Field(validation_alias=AliasChoices('experience_id', 'id'))
    title: Optional[str] = None
    organization: Optional[str] = None
    town: Optional[str] = None
    country_code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None

# 整批覆蓋 (PUT /profile/experiences)
class ExperiencesUpdate(CamelModel):
    experiences: List[ExperienceIn]

# --- 學歷 (Education) ---
class EducationIn(CamelModel):
    school: str = Field(..., min_length=1, max_length=255)
    town: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    description: Optional[str] = None

    @field_validator('country_code')
    @classmethod
    def validate_country_code(cls, v):
        return normalize_country_code(v)

    @model_validator(mode='after')
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('結束日期不可早於開始日期')
        return self

class EducationOut(CamelModel):
    id: str = Field(validation_alias=AliasChoices('education_id', 'id'))
    school: Optional[str] = None
    town: Optional[str] = None
    country_code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None

class EducationsUpdate(CamelModel):
    educations: List[EducationIn]

# --- 帳號設定 ---
class IdentityUpdate(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

class SecurityUpdate(CamelModel):
    password: str
    password_confirmation: str

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v, settings.PASSWORD_MIN_LENGTH)

    @model_validator(mode='after')
    def check_confirmation(self):
        if self.password != self.password_confirmation:
            raise ValueError('兩次輸入的密碼不一致')
        return self

# --- Profile 各區塊更新 ---
class GeneralUpdate(CamelModel):
    """基本資料：頭像、地點、時薪、職稱 (只更新有傳入的欄位)"""
    image: Optional[str] = Field(None, max_length=500)
    location: Optional[LocationSchema] = None
    hourly_rate: Optional[float] = Field(None, ge=5, le=100)
    title: Optional[str] = Field(None, max_length=255)

    @field_validator('image', 'title', mode='before')
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

class PresentationUpdate(CamelModel):
    presentation_text: Optional[str] = None

    @field_validator('presentation_text', mode='before')
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

class SkillsUpdate(CamelModel):
    skills: List[str] = Field(default_factory=list)

    @field_validator('skills')
    @classmethod
    def normalize_skills(cls, v: List[str]) -> List[str]:
        # 一律轉小寫，移除空白項目與大小寫重複 (保留第一次出現的順序)
        normalized = []
        for skill in v:
            skill = skill.strip().lower()
            if skill and skill not in normalized:
                normalized.append(skill)
        return normalized

class LanguagesUpdate(CamelModel):
    languages: List[LanguageSchema] = Field(default_factory=list)

    @field_validator('languages')
    @classmethod
    def unique_codes(cls, v: List[LanguageSchema]) -> List[LanguageSchema]:
        codes = [language.code for language in v]
        if len(codes) != len(set(codes)):
            raise ValueError('語言代碼不可重複')
        return v

class ContactUpdate(ContactSchema):
    pass

# --- 回應格式 ---
class GeneralOut(CamelModel):
    image: Optional[str] = None
    location: LocationSchema
    hourly_rate: Optional[float] = None
    title: Optional[str] = None

class PresentationOut(CamelModel):
    presentation_text: Optional[str] = None

class SkillsOut(CamelModel):
    skills: List[str] = []

class FreelancerPublicOut(CamelModel):
    """公開頁面用：不含帳號 email、密碼與權杖"""
    id: str = Field(validation_alias=AliasChoices('freelancer_id', 'id'))
    first_name: str
    last_name: str
    image: Optional[str] = None
    location: LocationSchema
    hourly_rate: Optional[float] = None
    title: Optional[str] = None
    presentation_text: Optional[str] = None
    skills: List[str] = []
    experiences: List[ExperienceOut] = []
    educations: List[EducationOut] = []
    languages: List[LanguageSchema] = []
    contact: ContactSchema
    created_at: Optional[datetime] = None

    @field_validator('skills', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return v or []

    @field_validator('experiences', 'educations')
    @classmethod
    def sort_timeline(cls, v):
        # 進行中 (無結束日期) 在前，其餘依結束日期由新到舊
        return sort_by_end_date_desc(v)

class FreelancerMeOut(FreelancerPublicOut):
    """登入者自己的 Profile：多了帳號 email"""
    email: EmailStr

class VisibilityOut(CamelModel):
    visible: bool
    missing: Dict[str, Any] = {}

# freelance_api/schemas/auth_schema.py
from pydantic import EmailStr, Field, field_validator, model_validator
from freelance_api.core.config import settings
from freelance_api.schemas.common_schema import CamelModel, validate_password_strength

# 註冊請求 Body
class RegisterRequest(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
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

# 登入請求 Body
class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# 忘記密碼
class ForgotPasswordRequest(CamelModel):
    email: EmailStr

# 重設密碼 (新密碼 + 確認)
class ResetPasswordRequest(CamelModel):
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

# Token 回應的格式
class TokenOut(CamelModel):
    token: str

# Token 內的資料
class TokenData(CamelModel):
    freelancer_id: str

# freelance_api/core/security.py
# 負責密碼雜湊、一次性權杖與 JWT 權杖的產生與驗證
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from passlib.context import CryptContext
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.config import settings
from freelance_api.core.database import get_db
from freelance_api.schemas.auth_schema import TokenData
from freelance_api.repositories.freelancer_repo import FreelancerRepository
from freelance_api.models.freelancer import Freelancer

# 1. 密碼雜湊設定 (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. Token 可以從 Authorization Header 來，也可以從 Cookie 來
#    (auto_error=False：沒有 Header 時不要直接回 401，改由下方再檢查 Cookie)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """驗證明文密碼是否與雜湊值相符"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """產生密碼的雜湊值"""
    return pwd_context.hash(password)

# 3. 一次性權杖 (註冊確認 / 重設密碼)
def hash_token(plain_token: str) -> str:
    """資料庫只存 SHA-256 雜湊值"""
    return hashlib.sha256(plain_token.encode("utf-8")).hexdigest()

def generate_one_time_token() -> Tuple[str, str]:
    """
    產生一組一次性權杖，回傳 (明文, 雜湊值)。
    明文放進信件連結，雜湊值存進資料庫。
    """
    plain_token = secrets.token_urlsafe(32)
    return plain_token, hash_token(plain_token)

# 4. JWT 權杖產生與驗證
def create_access_token(data: dict) -> str:
    """
    根據傳入的 data (e.g., freelancer id) 產生 JWT access token
    """
    to_encode = data.copy() # 避免修改原始資料
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt

def verify_access_token(token: str) -> TokenData | None:
    """
    驗證 JWT，回傳 TokenData (Pydantic Model) 或 None
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        freelancer_id = payload.get("id")
        if freelancer_id is None:
            return None

        return TokenData(freelancer_id=freelancer_id)

    except JWTError:
        return None

async def get_current_freelancer(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Freelancer:
    """
    FastAPI 依賴項：驗證 Token 並回傳 Freelancer Model
    優先使用 Authorization Header，其次是 Cookie
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="無法驗證憑證",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = bearer_token or request.cookies.get(settings.JWT_COOKIE_NAME)
    if not token:
        raise credentials_exception

    token_data = verify_access_token(token)
    if token_data is None:
        raise credentials_exception

    repo = FreelancerRepository(db)
    freelancer = await repo.get_freelancer_by_id(token_data.freelancer_id)

    if freelancer is None:
        raise credentials_exception

    return freelancer

import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.config import settings
from freelance_api.core.database import get_db
from freelance_api.core.security import get_current_freelancer
from freelance_api.services.auth_service import AuthService
from freelance_api.schemas.auth_schema import (
    RegisterRequest, LoginRequest, ForgotPasswordRequest, ResetPasswordRequest, TokenOut
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth", # 路由前綴
    tags=["Auth"]    # API 文件分類標籤
)

def _set_token_cookie(response: Response, token: str) -> None:
    # 除了回傳 body，也把 JWT 放進 Cookie
    response.set_cookie(
        key=settings.JWT_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest, # Request Body 會被 Pydantic 驗證
    db: AsyncSession = Depends(get_db)
):
    """
    註冊新的工作者帳號，並寄出確認信

    - 密碼需至少8碼，且包含英文和數字。
    - 完成確認前無法登入，也不會出現在搜尋結果中。
    """
    auth_service = AuthService(db)
    # 服務層中的 HTTPException 會自動被 FastAPI 捕捉並回傳
    await auth_service.register_freelancer(data)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/register/confirm/{confirmation_token}", response_model=TokenOut)
async def register_confirm(
    confirmation_token: str,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    以信件中的確認權杖完成註冊，並直接登入
    """
    auth_service = AuthService(db)
    token = await auth_service.confirm_registration(confirmation_token)
    _set_token_cookie(response, token)
    return {"token": token}


@router.post("/login", response_model=TokenOut)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    以 Email 與密碼登入
    """
    auth_service = AuthService(db)
    freelancer = await auth_service.authenticate_freelancer(
        email=data.email,
        password=data.password
    )
    logger.info(f"Freelancer logged in: {freelancer.freelancer_id}")

    token = auth_service.create_login_token(freelancer.freelancer_id)
    _set_token_cookie(response, token)
    return {"token": token}


@router.get("/logout")
async def logout(response: Response):
    """
    清除 Cookie 中的 JWT
    """
    response.delete_cookie(settings.JWT_COOKIE_NAME)
    return {"status": "success"}


@router.post("/password/forgot")
async def forgot_password(
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    寄出重設密碼連結 (同一時間只能有一個進行中的重設流程)
    """
    auth_service = AuthService(db)
    await auth_service.request_password_reset(data.email)
    return {"status": "success"}


@router.post("/password/reset/{reset_password_token}", response_model=TokenOut)
async def reset_password(
    reset_password_token: str,
    data: ResetPasswordRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    以重設權杖設定新密碼，並直接登入
    """
    auth_service = AuthService(db)
    token = await auth_service.reset_password(reset_password_token, data.password)
    _set_token_cookie(response, token)
    return {"token": token}


@router.get("/authorized", dependencies=[Depends(get_current_freelancer)])
async def authorized():
    """
    檢查目前的 Token 是否有效
    """
    return {"status": "success"}

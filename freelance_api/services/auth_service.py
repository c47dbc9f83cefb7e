# freelance_api/services/auth_service.py
import logging
import uuid
from datetime import timedelta
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.config import settings
from freelance_api.core.security import (
    verify_password, create_access_token, get_password_hash,
    generate_one_time_token, hash_token
)
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.token import FreelancerToken, TokenTypeEnum
from freelance_api.repositories.freelancer_repo import FreelancerRepository
from freelance_api.repositories.token_repo import TokenRepository
from freelance_api.schemas.auth_schema import RegisterRequest
from freelance_api.services.mail_service import MailService, MailDeliveryError
from freelance_api.utils.timeline import utc_now
from freelance_api.utils.visibility import is_freelancer_confirmed

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: AsyncSession, mail_service: Optional[MailService] = None):
        self.freelancer_repo = FreelancerRepository(db)
        self.token_repo = TokenRepository(db)
        self.mail_service = mail_service or MailService()

    async def register_freelancer(self, data: RegisterRequest) -> Freelancer:
        """
        處理工作者註冊：
        1. 檢查 Email 是否已被註冊
        2. 建立帳號並附上 register-confirm 權杖
        3. 寄出確認信；寄送失敗時刪除剛建立的帳號
        """
        if await self.freelancer_repo.email_in_use(data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"type": "EMAIL_IN_USE", "message": "此 Email 已經被註冊"},
            )

        plain_token, hashed_token = generate_one_time_token()
        freelancer_id = str(uuid.uuid4())
        new_freelancer = Freelancer(
            freelancer_id=freelancer_id,
            email=data.email,
            password_hash=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            skills=[],
            tokens=[
                FreelancerToken(
                    token_id=str(uuid.uuid4()),
                    freelancer_id=freelancer_id,
                    value=hashed_token,
                    expire=utc_now() + timedelta(minutes=settings.REGISTER_TOKEN_EXPIRE_MINUTES),
                    token_type=TokenTypeEnum.register_confirm
                )
            ]
        )
        created = await self.freelancer_repo.create_freelancer(new_freelancer)

        try:
            await self.mail_service.send(
                "welcome",
                to=created.email,
                first_name=created.first_name,
                confirmation_link=f"{settings.APP_URL}/auth/register/confirm/{plain_token}"
            )
        except MailDeliveryError:
            await self.freelancer_repo.delete_freelancer(created)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"type": "ACCOUNT_CREATION", "message": "帳號建立失敗"},
            )

        logger.info(f"Freelancer registered: {created.freelancer_id}")
        return created

    async def confirm_registration(self, plain_token: str) -> str:
        """
        驗證註冊確認權杖，成功後清除權杖並回傳登入用 JWT
        """
        token = await self.token_repo.get_live_token(
            hash_token(plain_token), TokenTypeEnum.register_confirm, utc_now()
        )
        if token is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"type": "INVALID_TOKEN", "message": "無效的權杖"},
            )

        freelancer_id = token.freelancer_id
        await self.token_repo.delete_tokens(freelancer_id, TokenTypeEnum.register_confirm)
        logger.info(f"Freelancer confirmed: {freelancer_id}")
        return self.create_login_token(freelancer_id)

    async def authenticate_freelancer(self, email: str, password: str) -> Freelancer:
        """
        驗證帳號密碼。
        帳密錯誤 -> 401 INVALID；尚未確認 -> 401 UNCONFIRMED
        """
        freelancer = await self.freelancer_repo.get_freelancer_by_email(email)

        if freelancer is None or not verify_password(
            plain_password=password, hashed_password=freelancer.password_hash
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"type": "INVALID", "message": "不正確的帳號或密碼"},
            )

        if not is_freelancer_confirmed(freelancer):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"type": "UNCONFIRMED", "message": "帳號尚未完成確認"},
            )

        return freelancer

    async def request_password_reset(self, email: str) -> None:
        """
        忘記密碼：產生 password-reset 權杖並寄出重設連結。
        同一時間只允許一個有效的重設權杖。
        """
        freelancer = await self.freelancer_repo.get_freelancer_by_email(email)
        if freelancer is None:
            # 不透露帳號是否存在
            logger.info("Password reset requested for unknown email")
            return

        if not is_freelancer_confirmed(freelancer):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"type": "UNCONFIRMED", "message": "帳號尚未完成確認"},
            )

        now = utc_now()
        # 已過期的舊權杖先移除，再檢查是否仍有有效的
        await self.token_repo.delete_tokens(
            freelancer.freelancer_id, TokenTypeEnum.password_reset, expired_before=now
        )
        if await self.token_repo.has_live_token(freelancer.freelancer_id, TokenTypeEnum.password_reset, now):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"type": "ALREADY_RECOVERING", "message": "已有進行中的密碼重設流程"},
            )

        plain_token, hashed_token = generate_one_time_token()
        await self.token_repo.add_token(
            freelancer,
            TokenTypeEnum.password_reset,
            hashed_token,
            now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)
        )

        try:
            await self.mail_service.send(
                "passwordForgotten",
                to=freelancer.email,
                first_name=freelancer.first_name,
                reset_link=f"{settings.APP_URL}/auth/password/reset/{plain_token}"
            )
        except MailDeliveryError:
            # 信沒寄出去，權杖也不該留著擋住下一次申請
            await self.token_repo.delete_tokens(freelancer.freelancer_id, TokenTypeEnum.password_reset)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"type": "EMAIL_SENDING_FAILED", "message": "無法寄出信件"},
            )

        logger.info(f"Password reset requested: {freelancer.freelancer_id}")

    async def reset_password(self, plain_token: str, new_password: str) -> str:
        """
        使用重設權杖設定新密碼，成功後權杖失效並回傳登入用 JWT
        """
        token = await self.token_repo.get_live_token(
            hash_token(plain_token), TokenTypeEnum.password_reset, utc_now()
        )
        if token is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"type": "INVALID_TOKEN", "message": "無效的權杖"},
            )

        freelancer = await self.freelancer_repo.get_freelancer_by_id(token.freelancer_id)
        if freelancer is None:
            # 帳號在查詢權杖後被刪除
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"type": "INVALID_TOKEN", "message": "無效的權杖"},
            )
        await self.token_repo.delete_tokens(freelancer.freelancer_id, TokenTypeEnum.password_reset)
        await self.freelancer_repo.update_freelancer(
            freelancer, {"password_hash": get_password_hash(new_password)}
        )
        logger.info(f"Password reset done: {freelancer.freelancer_id}")
        return self.create_login_token(freelancer.freelancer_id)

    def create_login_token(self, freelancer_id: str) -> str:
        """
        為指定工作者建立 access token
        """
        return create_access_token(data={"id": str(freelancer_id)})

# freelance_api/repositories/token_repo.py
# 一次性權杖 (register-confirm / password-reset) 的資料庫操作
import logging
import uuid
from datetime import datetime
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.token import FreelancerToken, TokenTypeEnum

logger = logging.getLogger(__name__)

class TokenRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_token(
        self,
        freelancer: Freelancer,
        token_type: TokenTypeEnum,
        hashed_value: str,
        expire: datetime
    ) -> FreelancerToken:
        token = FreelancerToken(
            token_id=str(uuid.uuid4()),
            freelancer_id=freelancer.freelancer_id,
            value=hashed_value,
            expire=expire,
            token_type=token_type
        )
        try:
            self.db.add(token)
            await self.db.commit()
            await self.db.refresh(freelancer)
            return token
        except Exception as e:
            await self.db.rollback()
            logger.error(f"新增權杖失敗: {e}", exc_info=True)
            raise

    async def get_live_token(
        self, hashed_value: str, token_type: TokenTypeEnum, now: datetime
    ) -> FreelancerToken | None:
        """依雜湊值找出「尚未過期」的權杖"""
        stmt = select(FreelancerToken).where(
            FreelancerToken.value == hashed_value,
            FreelancerToken.token_type == token_type,
            FreelancerToken.expire > now
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def has_live_token(
        self, freelancer_id: str, token_type: TokenTypeEnum, now: datetime
    ) -> bool:
        stmt = select(FreelancerToken.token_id).where(
            FreelancerToken.freelancer_id == freelancer_id,
            FreelancerToken.token_type == token_type,
            FreelancerToken.expire > now
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def delete_tokens(
        self, freelancer_id: str, token_type: TokenTypeEnum, expired_before: datetime | None = None
    ) -> int:
        """
        刪除某位工作者某一種類的權杖
        有傳 expired_before 時只刪除已過期的
        """
        stmt = delete(FreelancerToken).where(
            FreelancerToken.freelancer_id == freelancer_id,
            FreelancerToken.token_type == token_type
        )
        if expired_before is not None:
            stmt = stmt.where(FreelancerToken.expire < expired_before)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    # --- 清理排程使用 ---
    async def delete_expired_unconfirmed_freelancers(self, now: datetime) -> int:
        """
        刪除所有「註冊確認權杖已過期」的工作者 (子資料由 ON DELETE CASCADE 一併刪除)
        """
        stmt = delete(Freelancer).where(
            Freelancer.tokens.any(
                (FreelancerToken.token_type == TokenTypeEnum.register_confirm)
                & (FreelancerToken.expire < now)
            )
        ).execution_options(synchronize_session=False)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except Exception:
            await self.db.rollback()
            raise

    async def delete_expired_password_reset_tokens(self, now: datetime) -> int:
        """
        移除所有已過期的重設密碼權杖 (不刪除工作者本身)
        """
        stmt = delete(FreelancerToken).where(
            FreelancerToken.token_type == TokenTypeEnum.password_reset,
            FreelancerToken.expire < now
        ).execution_options(synchronize_session=False)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except Exception:
            await self.db.rollback()
            raise

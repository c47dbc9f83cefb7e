# freelance_api/services/token_sweeper.py
# 定期清理過期權杖的排程
import asyncio
import logging
from typing import Callable
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.database import AsyncSessionLocal
from freelance_api.repositories.token_repo import TokenRepository
from freelance_api.utils.timeline import utc_now

logger = logging.getLogger(__name__)

class TokenSweeper:
    """
    每次執行做兩件互不相關的事：
    1. 刪除「註冊確認權杖已過期」的工作者 (從未完成註冊)
    2. 移除所有已過期的重設密碼權杖 (工作者保留)
    兩者都是冪等的，重複執行不會有副作用。
    """

    def __init__(self, db: AsyncSession):
        self.repo = TokenRepository(db)

    async def sweep(self) -> dict:
        now = utc_now()
        deleted_freelancers = await self.repo.delete_expired_unconfirmed_freelancers(now)
        pulled_tokens = await self.repo.delete_expired_password_reset_tokens(now)

        logger.info(
            f"Token sweep done: {deleted_freelancers} unconfirmed freelancers deleted, "
            f"{pulled_tokens} password-reset tokens removed"
        )
        return {
            "deleted_freelancers": deleted_freelancers,
            "pulled_tokens": pulled_tokens,
        }


async def run_token_sweeper(
    interval_seconds: int,
    session_factory: Callable = AsyncSessionLocal,
) -> None:
    """
    背景迴圈：每 interval_seconds 執行一次清理。
    單次失敗只記錄 log，不在同一輪重試，等下一輪自然會再處理。
    """
    logger.info(f"Token sweeper started (every {interval_seconds}s)")
    while True:
        try:
            async with session_factory() as session:
                await TokenSweeper(session).sweep()
        except Exception as e:
            logger.error(f"Token sweep failed: {e}", exc_info=True)

        await asyncio.sleep(interval_seconds)

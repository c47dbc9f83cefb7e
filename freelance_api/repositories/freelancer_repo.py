# freelance_api/repositories/freelancer_repo.py
# 負責與工作者 (Freelancer) 及其子資料 (經歷 / 學歷 / 語言) 相關的資料庫操作
import logging
import uuid
from typing import Any, Dict, List, Optional, Type
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.experience import Experience
from freelance_api.models.education import Education
from freelance_api.models.language import FreelancerLanguage
from freelance_api.utils.visibility import public_profile_conditions

logger = logging.getLogger(__name__)

class FreelancerRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- 查詢 ---
    async def get_freelancer_by_id(self, freelancer_id: str) -> Freelancer | None:
        """
        透過 freelancer_id 查詢 (不論是否公開)
        子資料皆為 lazy="selectin"，會一併載入
        """
        stmt = select(Freelancer).where(Freelancer.freelancer_id == freelancer_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_freelancer_by_email(self, email: str) -> Freelancer | None:
        stmt = select(Freelancer).where(Freelancer.email == email)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_public_freelancer_by_id(self, freelancer_id: str) -> Freelancer | None:
        """
        只有「公開」(資料完整且已確認) 的工作者才會被查到
        """
        stmt = select(Freelancer).where(
            Freelancer.freelancer_id == freelancer_id,
            *public_profile_conditions()
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    # --- 新增 / 更新 / 刪除 ---
    async def create_freelancer(self, freelancer: Freelancer) -> Freelancer:
        """
        新增工作者 (連同已掛上的 tokens 一起寫入)
        """
        try:
            self.db.add(freelancer)
            await self.db.commit()
            await self.db.refresh(freelancer)
            return freelancer
        except Exception as e:
            await self.db.rollback()
            logger.error(f"建立工作者失敗: {e}", exc_info=True)
            raise

    async def update_freelancer(self, freelancer: Freelancer, update_dict: Dict[str, Any]) -> Freelancer:
        """
        只更新 update_dict 中出現的欄位
        """
        for key, value in update_dict.items():
            setattr(freelancer, key, value)

        await self.db.commit()
        await self.db.refresh(freelancer)
        return freelancer

    async def delete_freelancer(self, freelancer: Freelancer) -> None:
        await self.db.delete(freelancer)
        await self.db.commit()

    # --- 子資料 (經歷 / 學歷)：依子資料 ID 單筆操作 ---
    async def get_experience(self, freelancer_id: str, experience_id: str) -> Experience | None:
        # (重要) 同時比對 freelancer_id，避免操作到別人的資料
        stmt = select(Experience).where(
            Experience.experience_id == experience_id,
            Experience.freelancer_id == freelancer_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_education(self, freelancer_id: str, education_id: str) -> Education | None:
        stmt = select(Education).where(
            Education.education_id == education_id,
            Education.freelancer_id == freelancer_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def add_child(self, child):
        """新增一筆子資料 (Experience / Education)"""
        self.db.add(child)
        await self.db.commit()
        await self.db.refresh(child)
        return child

    async def update_child(self, child, update_dict: Dict[str, Any]):
        for key, value in update_dict.items():
            setattr(child, key, value)
        await self.db.commit()
        await self.db.refresh(child)
        return child

    async def delete_child(self, child) -> None:
        await self.db.delete(child)
        await self.db.commit()

    # --- 子資料：整批覆蓋 ---
    async def _replace_children(
        self,
        freelancer: Freelancer,
        model: Type,
        id_field: str,
        items: List[Dict[str, Any]]
    ) -> Freelancer:
        """
        先刪除該工作者所有舊資料，再寫入新的列表
        """
        stmt_delete = delete(model).where(model.freelancer_id == freelancer.freelancer_id)
        await self.db.execute(stmt_delete)
        await self.db.flush() # 確保 DELETE 執行

        new_children = [
            model(
                **item,
                **{id_field: str(uuid.uuid4())},
                freelancer_id=freelancer.freelancer_id
            )
            for item in items
        ]
        self.db.add_all(new_children)

        await self.db.commit() # 確保 INSERT 執行
        # 重新載入 (selectin) 關聯，取得最新的子資料列表
        await self.db.refresh(freelancer)
        return freelancer

    async def replace_experiences(self, freelancer: Freelancer, items: List[Dict[str, Any]]) -> Freelancer:
        return await self._replace_children(freelancer, Experience, "experience_id", items)

    async def replace_educations(self, freelancer: Freelancer, items: List[Dict[str, Any]]) -> Freelancer:
        return await self._replace_children(freelancer, Education, "education_id", items)

    async def replace_languages(self, freelancer: Freelancer, items: List[Dict[str, Any]]) -> Freelancer:
        return await self._replace_children(freelancer, FreelancerLanguage, "freelancer_language_id", items)

    async def email_in_use(self, email: str, exclude_freelancer_id: Optional[str] = None) -> bool:
        """Email 是否已被其他工作者使用"""
        stmt = select(Freelancer.freelancer_id).where(Freelancer.email == email)
        if exclude_freelancer_id:
            stmt = stmt.where(Freelancer.freelancer_id != exclude_freelancer_id)
        result = await self.db.execute(stmt)
        return result.first() is not None

# freelance_api/services/freelancer_service.py
import logging
import uuid
from typing import Any, Dict
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.security import get_password_hash
from freelance_api.models.freelancer import Freelancer
from freelance_api.models.experience import Experience
from freelance_api.models.education import Education
from freelance_api.repositories.freelancer_repo import FreelancerRepository
from freelance_api.schemas.freelancer_schema import (
    IdentityUpdate, SecurityUpdate, GeneralUpdate, PresentationUpdate,
    SkillsUpdate, ExperienceIn, ExperiencesUpdate, EducationIn, EducationsUpdate,
    LanguagesUpdate, ContactUpdate
)
from freelance_api.utils.visibility import (
    is_freelancer_public, is_freelancer_confirmed, get_missing_fields
)

logger = logging.getLogger(__name__)

# 不存在 / 未公開 一律回相同訊息，不透露帳號是否存在
FREELANCER_NOT_FOUND = "工作者不存在"

class FreelancerService:
    def __init__(self, db: AsyncSession):
        self.repo = FreelancerRepository(db)
        self.db = db

    # --- 公開查詢 ---
    async def get_public_freelancer(self, freelancer_id: str) -> Freelancer:
        """
        獲取指定 ID 的工作者公開 Profile
        1. 資料庫端以公開條件過濾
        2. 取回後再以同一組規則檢查一次 (資料可能在查詢後被修改)
        兩種情況都回 404，不區分「不存在」與「未公開」
        """
        freelancer = await self.repo.get_public_freelancer_by_id(freelancer_id)
        if (
            freelancer is None
            or not is_freelancer_public(freelancer)
            or not is_freelancer_confirmed(freelancer)
        ):
            raise HTTPException(status.HTTP_404_NOT_FOUND, FREELANCER_NOT_FOUND)
        return freelancer

    async def get_freelancer_visibility(self, freelancer_id: str) -> Dict[str, Any]:
        """
        回傳 {visible, missing}
        (注意) 這個查詢會透露帳號是否存在，僅供 Profile 擁有者檢查完整度
        """
        freelancer = await self.repo.get_freelancer_by_id(freelancer_id)
        if freelancer is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, FREELANCER_NOT_FOUND)

        return {
            "visible": is_freelancer_public(freelancer) and is_freelancer_confirmed(freelancer),
            "missing": get_missing_fields(freelancer),
        }

    # --- 帳號設定 ---
    async def update_identity(self, freelancer: Freelancer, data: IdentityUpdate) -> Freelancer:
        # Email 不可與其他工作者重複
        if await self.repo.email_in_use(data.email, exclude_freelancer_id=freelancer.freelancer_id):
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                {"type": "EMAIL_IN_USE", "message": "此 Email 已經被使用"}
            )
        return await self.repo.update_freelancer(freelancer, data.model_dump())

    async def update_security(self, freelancer: Freelancer, data: SecurityUpdate) -> Freelancer:
        return await self.repo.update_freelancer(
            freelancer, {"password_hash": get_password_hash(data.password)}
        )

    async def delete_account(self, freelancer: Freelancer) -> None:
        await self.repo.delete_freelancer(freelancer)
        logger.info(f"Freelancer deleted: {freelancer.freelancer_id}")

    # --- Profile 各區塊 ---
    async def update_general(self, freelancer: Freelancer, data: GeneralUpdate) -> Freelancer:
        """
        只更新有傳入的欄位 (exclude_unset，巢狀的 location 也一樣)
        location 拆成 location_town / location_country_code 兩個欄位：
        只傳 town 時保留原本的 countryCode；location 傳 null 則兩者都清除
        """
        update_dict = data.model_dump(exclude_unset=True)
        if "location" in update_dict:
            location = update_dict.pop("location")
            if location is None:
                location = {"town": None, "country_code": None}
            if "town" in location:
                update_dict["location_town"] = location["town"]
            if "country_code" in location:
                update_dict["location_country_code"] = location["country_code"]
        return await self.repo.update_freelancer(freelancer, update_dict)

    async def update_presentation(self, freelancer: Freelancer, data: PresentationUpdate) -> Freelancer:
        return await self.repo.update_freelancer(
            freelancer, {"presentation_text": data.presentation_text}
        )

    async def update_skills(self, freelancer: Freelancer, data: SkillsUpdate) -> Freelancer:
        # SkillsUpdate 已經轉成小寫並去除重複
        return await self.repo.update_freelancer(freelancer, {"skills": data.skills})

    async def update_contact(self, freelancer: Freelancer, data: ContactUpdate) -> Freelancer:
        return await self.repo.update_freelancer(
            freelancer, {"contact_email": data.email, "contact_phone": data.phone}
        )

    async def update_languages(self, freelancer: Freelancer, data: LanguagesUpdate) -> Freelancer:
        return await self.repo.replace_languages(
            freelancer, [language.model_dump() for language in data.languages]
        )

    # --- 經歷：單筆 ---
    async def create_experience(self, freelancer: Freelancer, data: ExperienceIn) -> Experience:
        experience = Experience(
            **data.model_dump(),
            experience_id=str(uuid.uuid4()),
            freelancer_id=freelancer.freelancer_id
        )
        return await self.repo.add_child(experience)

    async def update_experience(self, freelancer: Freelancer, experience_id: str, data: ExperienceIn) -> Experience:
        experience = await self.repo.get_experience(freelancer.freelancer_id, experience_id)
        if not experience:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "經歷不存在")
        return await self.repo.update_child(experience, data.model_dump())

    async def delete_experience(self, freelancer: Freelancer, experience_id: str) -> None:
        experience = await self.repo.get_experience(freelancer.freelancer_id, experience_id)
        if not experience:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "經歷不存在")
        await self.repo.delete_child(experience)

    # --- 經歷：整批覆蓋 ---
    async def replace_experiences(self, freelancer: Freelancer, data: ExperiencesUpdate) -> Freelancer:
        return await self.repo.replace_experiences(
            freelancer, [experience.model_dump() for experience in data.experiences]
        )

    # --- 學歷：單筆 ---
    async def create_education(self, freelancer: Freelancer, data: EducationIn) -> Education:
        education = Education(
            **data.model_dump(),
            education_id=str(uuid.uuid4()),
            freelancer_id=freelancer.freelancer_id
        )
        return await self.repo.add_child(education)

    async def update_education(self, freelancer: Freelancer, education_id: str, data: EducationIn) -> Education:
        education = await self.repo.get_education(freelancer.freelancer_id, education_id)
        if not education:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "學歷不存在")
        return await self.repo.update_child(education, data.model_dump())

    async def delete_education(self, freelancer: Freelancer, education_id: str) -> None:
        education = await self.repo.get_education(freelancer.freelancer_id, education_id)
        if not education:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "學歷不存在")
        await self.repo.delete_child(education)

    # --- 學歷：整批覆蓋 ---
    async def replace_educations(self, freelancer: Freelancer, data: EducationsUpdate) -> Freelancer:
        return await self.repo.replace_educations(
            freelancer, [education.model_dump() for education in data.educations]
        )

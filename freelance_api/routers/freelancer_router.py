# freelance_api/routers/freelancer_router.py
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from freelance_api.core.database import get_db
from freelance_api.core.security import get_current_freelancer
from freelance_api.models.freelancer import Freelancer
from freelance_api.services.freelancer_service import FreelancerService
from freelance_api.schemas.freelancer_schema import (
    FreelancerMeOut, FreelancerPublicOut, VisibilityOut,
    GeneralOut, PresentationOut, SkillsOut, ContactSchema, LanguageSchema,
    ExperienceIn, ExperienceOut, ExperiencesUpdate,
    EducationIn, EducationOut, EducationsUpdate,
    IdentityUpdate, SecurityUpdate, GeneralUpdate, PresentationUpdate,
    SkillsUpdate, LanguagesUpdate, ContactUpdate
)
from freelance_api.utils.timeline import sort_by_end_date_desc

import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/freelancer",
    tags=["Freelancer"],
)

# =====================================================
# 登入者自己的 Profile (需登入)
# (注意) 固定路徑必須寫在 /{freelancer_id} 之前
# =====================================================

@router.get("", response_model=FreelancerMeOut)
async def get_me(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    """
    獲取當前登入者的完整 Profile
    """
    return current_freelancer

@router.get("/general", response_model=GeneralOut)
async def get_general(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return current_freelancer

@router.get("/presentation", response_model=PresentationOut)
async def get_presentation(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return current_freelancer

@router.get("/skills", response_model=SkillsOut)
async def get_skills(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return {"skills": current_freelancer.skills or []}

@router.get("/experiences", response_model=List[ExperienceOut])
async def get_experiences(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return sort_by_end_date_desc(current_freelancer.experiences)

@router.get("/education", response_model=List[EducationOut])
async def get_education(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return sort_by_end_date_desc(current_freelancer.educations)

@router.get("/languages", response_model=List[LanguageSchema])
async def get_languages(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return current_freelancer.languages

@router.get("/contact", response_model=ContactSchema)
async def get_contact(current_freelancer: Freelancer = Depends(get_current_freelancer)):
    return current_freelancer.contact

# --- 帳號設定 ---
@router.put("/settings/identity", response_model=FreelancerMeOut)
async def update_identity(
    data: IdentityUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    更新 Email 與姓名 (Email 不可與其他帳號重複)
    """
    service = FreelancerService(db)
    return await service.update_identity(current_freelancer, data)

@router.put("/settings/security")
async def update_security(
    data: SecurityUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    await service.update_security(current_freelancer, data)
    return {"status": "success"}

@router.delete("")
async def delete_account(
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    刪除帳號 (經歷、學歷、語言、權杖一併刪除)
    """
    service = FreelancerService(db)
    await service.delete_account(current_freelancer)
    return {"status": "success"}

# --- Profile 各區塊 ---
@router.put("/profile/general", response_model=GeneralOut)
async def update_general(
    data: GeneralUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    更新頭像、地點、時薪 (5 ~ 100)、職稱
    """
    service = FreelancerService(db)
    return await service.update_general(current_freelancer, data)

@router.put("/profile/presentation", response_model=PresentationOut)
async def update_presentation(
    data: PresentationUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    return await service.update_presentation(current_freelancer, data)

@router.put("/profile/skills", response_model=SkillsOut)
async def update_skills(
    data: SkillsUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    覆蓋技能列表 (一律存成小寫)
    """
    service = FreelancerService(db)
    updated = await service.update_skills(current_freelancer, data)
    return {"skills": updated.skills or []}

# --- 經歷 ---
@router.post("/profile/experience", response_model=ExperienceOut, status_code=status.HTTP_201_CREATED)
async def create_experience(
    data: ExperienceIn,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    return await service.create_experience(current_freelancer, data)

@router.put("/profile/experience/{experience_id}", response_model=ExperienceOut)
async def update_experience(
    experience_id: str,
    data: ExperienceIn,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    return await service.update_experience(current_freelancer, experience_id, data)

@router.delete("/profile/experience/{experience_id}")
async def delete_experience(
    experience_id: str,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    await service.delete_experience(current_freelancer, experience_id)
    return {"status": "success"}

@router.put("/profile/experiences", response_model=List[ExperienceOut])
async def replace_experiences(
    data: ExperiencesUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    整批覆蓋經歷列表 (舊資料全部刪除後重建)
    """
    service = FreelancerService(db)
    updated = await service.replace_experiences(current_freelancer, data)
    return sort_by_end_date_desc(updated.experiences)

# --- 學歷 ---
@router.post("/profile/education", response_model=EducationOut, status_code=status.HTTP_201_CREATED)
async def create_education(
    data: EducationIn,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    return await service.create_education(current_freelancer, data)

@router.put("/profile/education/{education_id}", response_model=EducationOut)
async def update_education(
    education_id: str,
    data: EducationIn,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    return await service.update_education(current_freelancer, education_id, data)

@router.put("/profile/education", response_model=List[EducationOut])
async def replace_educations(
    data: EducationsUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    """
    整批覆蓋學歷列表
    """
    service = FreelancerService(db)
    updated = await service.replace_educations(current_freelancer, data)
    return sort_by_end_date_desc(updated.educations)

@router.delete("/profile/education/{education_id}")
async def delete_education(
    education_id: str,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    await service.delete_education(current_freelancer, education_id)
    return {"status": "success"}

# --- 語言 / 聯絡方式 ---
@router.put("/profile/languages", response_model=List[LanguageSchema])
async def update_languages(
    data: LanguagesUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    updated = await service.update_languages(current_freelancer, data)
    return updated.languages

@router.put("/profile/contact", response_model=ContactSchema)
async def update_contact(
    data: ContactUpdate,
    current_freelancer: Freelancer = Depends(get_current_freelancer),
    db: AsyncSession = Depends(get_db)
):
    service = FreelancerService(db)
    updated = await service.update_contact(current_freelancer, data)
    return updated.contact

# =====================================================
# 公開 API (不需登入)
# =====================================================

@router.get("/{freelancer_id}", response_model=FreelancerPublicOut)
async def get_public_freelancer(
    freelancer_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    獲取指定 ID 的工作者公開 Profile。
    不存在或資料不完整 (未公開) 都回 404。
    """
    service = FreelancerService(db)
    return await service.get_public_freelancer(freelancer_id)

@router.get("/{freelancer_id}/visibility", response_model=VisibilityOut)
async def get_freelancer_visibility(
    freelancer_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    檢查 Profile 是否可公開，以及還缺哪些欄位
    """
    service = FreelancerService(db)
    return await service.get_freelancer_visibility(freelancer_id)

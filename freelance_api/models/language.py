# freelance_api/models/language.py
from sqlalchemy import Column, String, CHAR, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from freelance_api.core.database import Base
import enum

# 語言程度
class LanguageLevelEnum(str, enum.Enum):
    basic = "basic"
    conversational = "conversational"
    fluent = "fluent"
    native_bilingual = "native-bilingual"

class FreelancerLanguage(Base):
    __tablename__ = "freelancer_languages"
    # 同一位工作者的語言代碼不可重複
    __table_args__ = (
        UniqueConstraint("freelancer_id", "code", name="uq_freelancer_language_code"),
    )

    freelancer_language_id = Column(CHAR(36), primary_key=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancers.freelancer_id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(8), nullable=False, index=True)
    level = Column(Enum(LanguageLevelEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)

    freelancer = relationship("Freelancer", back_populates="languages")

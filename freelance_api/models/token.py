# freelance_api/models/token.py
from sqlalchemy import Column, String, CHAR, DATETIME, ForeignKey, Enum
from sqlalchemy.orm import relationship
from freelance_api.core.database import Base
import enum

# 一次性權杖的種類 (封閉集合，清理排程只處理這兩種)
class TokenTypeEnum(str, enum.Enum):
    register_confirm = "register-confirm"
    password_reset = "password-reset"

class FreelancerToken(Base):
    __tablename__ = "freelancer_tokens"

    token_id = Column(CHAR(36), primary_key=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancers.freelancer_id", ondelete="CASCADE"), nullable=False, index=True)
    # 只存 SHA-256 雜湊值，明文只出現在寄出的信件連結中
    value = Column(String(64), nullable=False, index=True)
    expire = Column(DATETIME, nullable=False, index=True) # UTC
    token_type = Column(
        Enum(TokenTypeEnum, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False
    )

    freelancer = relationship("Freelancer", back_populates="tokens")

# freelance_api/models/freelancer.py
from sqlalchemy import Column, String, TEXT, JSON, DECIMAL, CHAR, TIMESTAMP, func
from sqlalchemy.orm import relationship
from freelance_api.core.database import Base

class Freelancer(Base):
    """
    工作者 (Freelancer) 帳號與 Profile。
    身分、密碼、地點、時薪、介紹、技能及聯絡方式都放在同一筆資料，
    經歷 / 學歷 / 語言 / 權杖則是各自有 ID 的子資料表。
    """
    __tablename__ = "freelancers"

    # 基本欄位 (註冊時必填)
    freelancer_id = Column(CHAR(36), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    # Profile 欄位 (皆為選填，但公開列表需要填寫完整)
    image = Column(String(500))
    location_town = Column(String(255))
    location_country_code = Column(CHAR(2), index=True) # ISO-3166 alpha-2
    hourly_rate = Column(DECIMAL(10, 2))
    title = Column(String(255))
    presentation_text = Column(TEXT)
    skills = Column(JSON, default=list) # 小寫字串列表
    contact_email = Column(String(255))
    contact_phone = Column(String(50))

    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    # --- 子資料 (一對多) ---
    # 刪除工作者時一併刪除 (資料庫端亦有 ON DELETE CASCADE)
    experiences = relationship(
        "Experience",
        back_populates="freelancer",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    educations = relationship(
        "Education",
        back_populates="freelancer",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    languages = relationship(
        "FreelancerLanguage",
        back_populates="freelancer",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    tokens = relationship(
        "FreelancerToken",
        back_populates="freelancer",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    # 供 Pydantic Schema 讀取巢狀的 location / contact
    @property
    def location(self) -> dict:
        return {"town": self.location_town, "country_code": self.location_country_code}

    @property
    def contact(self) -> dict:
        return {"email": self.contact_email, "phone": self.contact_phone}


# 子資料的 Model 以字串參照，這裡匯入以確保它們都已向 SQLAlchemy 註冊
from freelance_api.models import experience, education, language, token  # noqa: E402,F401

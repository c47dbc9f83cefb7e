# freelance_api/models/education.py
from sqlalchemy import Column, String, TEXT, DATE, CHAR, ForeignKey
from sqlalchemy.orm import relationship
from freelance_api.core.database import Base

class Education(Base):
    __tablename__ = "educations"

    education_id = Column(CHAR(36), primary_key=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancers.freelancer_id", ondelete="CASCADE"), nullable=False, index=True)
    school = Column(String(255))
    town = Column(String(255))
    country_code = Column(CHAR(2))
    start_date = Column(DATE)
    end_date = Column(DATE, nullable=True) # NULL 表示仍在學
    description = Column(TEXT)

    freelancer = relationship("Freelancer", back_populates="educations")

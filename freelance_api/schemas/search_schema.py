# freelance_api/schemas/search_schema.py
from typing import List, Optional
from pydantic import AliasChoices, Field
from freelance_api.schemas.common_schema import CamelModel

class SearchLocationOut(CamelModel):
    country_code: Optional[str] = None

# 搜尋結果中的單筆工作者 (精簡欄位，不含密碼、權杖、聯絡方式)
class FreelancerSearchItem(CamelModel):
    id: str = Field(validation_alias=AliasChoices('freelancer_id', 'id'))
    image: Optional[str] = None
    first_name: str
    last_name: str
    title: Optional[str] = None
    presentation_text: Optional[str] = None
    hourly_rate: Optional[float] = None
    location: SearchLocationOut
    skills: List[str] = []

class FreelancerSearchOut(CamelModel):
    freelancers: List[FreelancerSearchItem] = []
    total_freelancers: int = 0
    nb_pages: int = 0

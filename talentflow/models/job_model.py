from typing import List

from pydantic import BaseModel, Field


class Job(BaseModel):
    """채용 공고. 평가 빌더의 공고 선택 목록에만 쓰이는 최소 필드."""

    id: str = Field(..., min_length=1)
    title: str
    company: str = ""
    description: str = ""
    location: str = ""
    status: str = "active"
    owner_id: str = Field(..., description="공고를 등록한 채용 담당자 ID")
    tags: List[str] = Field(default_factory=list)
    posted_at: str = ""

    @property
    def is_open(self) -> bool:
        return self.status == "active"

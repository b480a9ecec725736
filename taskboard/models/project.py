from datetime import datetime, timezone
from typing import Optional

from beanie import Document, PydanticObjectId
from pydantic import Field


class Project(Document):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    owner: Optional[PydanticObjectId] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )

    class Settings:
        name = "projects"

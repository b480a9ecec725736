from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class User(Document):
    name: str
    email: Indexed(str, unique=True)
    password: str  # hash, issued by the identity provider
    avatar: Optional[str] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )

    class Settings:
        name = "users"


class UserPublic(BaseModel):
    """User projection without credentials. Used for auth and population."""
    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId = Field(alias="_id")
    name: str
    email: str
    avatar: Optional[str] = None

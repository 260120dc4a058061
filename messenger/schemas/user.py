# Pydantic-схемы для User
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class UserPublic(BaseModel):
    """Пользователь без пароля (для списков и участников диалога)"""
    id: int
    full_name: str = Field(serialization_alias="fullName")
    email: str
    profile_pic: Optional[str] = Field(None, serialization_alias="profilePic")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)

# Pydantic-схемы для Conversation
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime

from messenger.schemas.user import UserPublic

class ConversationOut(BaseModel):
    """Диалог с раскрытыми участниками (без паролей)"""
    id: int
    members: List[UserPublic]
    last_message: str = Field(serialization_alias="lastMessage")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)

# Pydantic-схемы для Notification
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

class NotificationOut(BaseModel):
    id: int
    user_id: int = Field(serialization_alias="userId")
    type: str
    content: str
    is_read: bool = Field(serialization_alias="isRead")
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)

# Pydantic-схемы для Message
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class SendMessageRequest(BaseModel):
    """Тело запроса на отправку. Оба поля необязательны."""
    text: Optional[str] = None
    image: Optional[str] = Field(None, description="base64 data URL или http(s) URL изображения")

class MessageOut(BaseModel):
    id: int
    sender_id: int = Field(serialization_alias="senderId")
    receiver_id: int = Field(serialization_alias="receiverId")
    text: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)

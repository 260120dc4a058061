# messenger/models/message.py
from messenger.core.database import Base
from sqlalchemy import Column, Integer, Text, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime

class Message(Base):
    """Сообщение между двумя пользователями. После создания не изменяется."""
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_pair", "sender_id", "receiver_id"),
    )

    id = Column(Integer, primary_key=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=True)
    image = Column(String, nullable=True)  # публичный URL загруженного изображения
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="sent_messages")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_messages")
    media = relationship("Media", back_populates="message")

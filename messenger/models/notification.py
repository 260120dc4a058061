# Модель уведомления получателя
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from messenger.core.database import Base

class Notification(Base):
    """Уведомление, адресованное пользователю.

    Создаётся на каждое отправленное сообщение независимо от того, есть ли
    у получателя активное соединение. Если соединения нет, это единственный
    след сообщения, который получатель увидит при следующем входе.
    """
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)  # получатель
    type = Column(String, nullable=False, default="message")
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User")

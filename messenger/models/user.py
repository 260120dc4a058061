# Модель пользователя мессенджера
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from messenger.core.database import Base

class User(Base):
    """Модель пользователя мессенджера.

    Учётные записи создаются и изменяются внешним сервисом авторизации,
    подсистема сообщений только читает их: для списка собеседников,
    для разрешения участников диалога и для текста уведомлений.

    Attributes:
        id (int): Уникальный идентификатор пользователя.
        full_name (str): Отображаемое имя пользователя.
        email (str): Email, уникален в системе.
        password (str): Хэш пароля. Никогда не отдаётся наружу.
        profile_pic (str): URL аватара (может отсутствовать).
        created_at (datetime): Дата регистрации.
        sent_messages: Связь с отправленными сообщениями.
        received_messages: Связь с полученными сообщениями.

    Examples:
        >>> user = User(
        ...     full_name="John Doe",
        ...     email="john@example.com",
        ...     password="$2b$10$..."
        ... )
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # хэш, выставляется сервисом авторизации
    profile_pic = Column(String, nullable=True, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    sent_messages = relationship("Message", foreign_keys="Message.sender_id", back_populates="sender")
    received_messages = relationship("Message", foreign_keys="Message.receiver_id", back_populates="receiver")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

# Метаданные загруженных изображений
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from messenger.core.database import Base

class Media(Base):
    """Метаданные файла, загруженного в объектное хранилище.

    Запись создаётся только как побочный эффект отправки сообщения с
    изображением и больше не изменяется. Тело сообщения хранит лишь URL,
    а здесь лежит идентификатор объекта в хранилище (нужен для удаления).

    Attributes:
        id (int): Уникальный идентификатор записи.
        url (str): Публичный URL файла.
        uploaded_by (int): Кто загрузил файл.
        message_id (int): Сообщение, к которому приложен файл (обратная ссылка).
        public_id (str): Ключ объекта в хранилище.
        media_type (str): Тип медиа, сейчас всегда "image".
        created_at (datetime): Дата загрузки.
    """
    __tablename__ = "media"

    id = Column(Integer, primary_key=True)
    url = Column(String, nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=True, index=True)
    public_id = Column(String, nullable=False)
    media_type = Column(String, default="image", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    message = relationship("Message", back_populates="media")

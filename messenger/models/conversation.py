# Модель диалога (пара собеседников)
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from messenger.core.database import Base

class Conversation(Base):
    """Сводка по переписке двух пользователей.

    На каждую неупорядоченную пару участников существует не больше одной
    записи. Пара хранится в каноническом виде (меньший id, больший id) и
    закрыта уникальным ограничением, поэтому два одновременных первых
    сообщения не создадут дубликат.

    Диалог создаётся при первом сообщении пары, а каждое следующее
    сообщение обновляет превью и время активности. Подсистема диалоги
    не удаляет.

    Attributes:
        id (int): Уникальный идентификатор диалога.
        member_low_id (int): Участник с меньшим id.
        member_high_id (int): Участник с большим id.
        last_message (str): Превью последнего сообщения ("Image" для картинки).
        created_at (datetime): Дата первого сообщения.
        updated_at (datetime): Время последней активности.

    Examples:
        >>> conv = Conversation(member_low_id=3, member_high_id=7, last_message="hi")
        >>> conv.member_ids
        [3, 7]
    """
    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("member_low_id", "member_high_id", name="uq_conversation_pair"),
    )

    id = Column(Integer, primary_key=True)
    member_low_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    member_high_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    last_message = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    member_low = relationship("User", foreign_keys=[member_low_id])
    member_high = relationship("User", foreign_keys=[member_high_id])

    @property
    def member_ids(self):
        if self.member_low_id == self.member_high_id:
            return [self.member_low_id]
        return [self.member_low_id, self.member_high_id]

    @property
    def members(self):
        """Участники диалога как объекты User."""
        if self.member_low_id == self.member_high_id:
            return [self.member_low]
        return [self.member_low, self.member_high]

    def __repr__(self):
        return f"<Conversation(id={self.id}, members={self.member_ids}, updated_at={self.updated_at})>"

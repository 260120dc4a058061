# messenger/services/message_store.py
from typing import Optional
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from messenger.models.message import Message

def history(db: Session, user_a: int, user_b: int):
    """Переписка двух пользователей в обе стороны.

    Сортировка по первичному ключу, то есть в порядке вставки.
    """
    return (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                and_(Message.sender_id == user_b, Message.receiver_id == user_a),
            )
        )
        .order_by(Message.id.asc())
        .all()
    )

def create(
    db: Session,
    sender_id: int,
    receiver_id: int,
    text: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Message:
    """Добавляет сообщение в сессию и делает flush, чтобы получить id.

    Commit выполняет вызывающий код (MessageGateway) в конце отправки.
    """
    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text,
        image=image_url,
    )
    db.add(message)
    db.flush()
    return message

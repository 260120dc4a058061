# messenger/services/notification_service.py
from typing import Optional
from sqlalchemy.orm import Session

from messenger.models.notification import Notification

MESSAGE_NOTIFICATION = "message"


def create_message_notification(db: Session, recipient_id: int, sender_name: Optional[str]) -> Notification:
    """Уведомление получателю о новом сообщении (без commit)."""
    notification = Notification(
        user_id=recipient_id,
        type=MESSAGE_NOTIFICATION,
        content=f"New message from {sender_name}",
    )
    db.add(notification)
    db.flush()
    return notification


def list_for_user(db: Session, user_id: int):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def mark_read(db: Session, user_id: int, notification_id: int) -> Optional[Notification]:
    """Отмечает уведомление прочитанным. None, если оно чужое или не найдено."""
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if notification is None:
        return None
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification

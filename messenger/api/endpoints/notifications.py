# Уведомления текущего пользователя
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import logging

from messenger.core.auth import get_current_user
from messenger.core.database import get_db
from messenger.models.user import User
from messenger.schemas.notification import NotificationOut
from messenger.services import notification_service

router = APIRouter(
    tags=["notifications"],
    responses={404: {"description": "Not found"}},
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[NotificationOut])
def list_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Уведомления пользователя, новые первыми.

    Так получатель, который был офлайн в момент отправки, узнаёт
    о новых сообщениях при следующем входе.
    """
    try:
        return notification_service.list_for_user(db, current_user.id)
    except Exception as e:
        logger.error(f"Error fetching notifications: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Отмечает уведомление прочитанным"""
    try:
        notification = notification_service.mark_read(db, current_user.id, notification_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error marking notification {notification_id} as read: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

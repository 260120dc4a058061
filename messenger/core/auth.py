# Идентификация вызывающего пользователя
import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, WebSocket, status
from sqlalchemy.orm import Session

from messenger.core.database import get_db
from messenger.models.user import User

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"

def resolve_user(db: Session, raw_user_id) -> Optional[User]:
    """Пользователь по значению заголовка X-User-Id или None."""
    if raw_user_id is None:
        return None
    try:
        user_id = int(raw_user_id)
    except (TypeError, ValueError):
        logger.warning(f"Malformed {USER_ID_HEADER} header: {raw_user_id!r}")
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"Unknown user id in {USER_ID_HEADER} header: {user_id}")
    return user

def get_current_user(
    x_user_id: Optional[int] = Header(None, alias=USER_ID_HEADER),
    db: Session = Depends(get_db),
) -> User:
    """Возвращает пользователя, которого уже аутентифицировал шлюз.

    Проверка токена/cookie выполняется выше по цепочке (API gateway),
    сюда приходит только заголовок X-User-Id с id пользователя.

    Raises:
        HTTPException: 401 если заголовка нет или пользователь не найден.
    """
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized - No user identity provided")

    user = resolve_user(db, x_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized - User not found")
    return user

def get_websocket_user_id(websocket: WebSocket, db: Session = Depends(get_db)) -> Optional[int]:
    """Тот же заголовок X-User-Id для WebSocket-рукопожатия.

    Сессия закрывается сразу после проверки, чтобы не держать соединение
    с БД всё время жизни сокета.
    """
    try:
        user = resolve_user(db, websocket.headers.get(USER_ID_HEADER))
        return user.id if user else None
    finally:
        db.close()

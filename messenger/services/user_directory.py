# messenger/services/user_directory.py
from sqlalchemy.orm import Session

from messenger.models.user import User

def list_others(db: Session, caller_id: int):
    """Все пользователи, кроме вызывающего, в порядке хранилища.

    Пароль отсекается на уровне схемы ответа (UserPublic).
    """
    return db.query(User).filter(User.id != caller_id).all()
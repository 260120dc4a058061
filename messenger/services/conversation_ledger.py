# Журнал диалогов: поиск пары, upsert при отправке, список для пользователя
import logging
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from messenger.models.conversation import Conversation

logger = logging.getLogger(__name__)

IMAGE_PREVIEW = "Image"


def preview_text(text: Optional[str], image_url: Optional[str]) -> str:
    """Превью последнего сообщения для списка диалогов.

    Args:
        text: Текст сообщения (может быть пустым).
        image_url: URL приложенного изображения (может отсутствовать).

    Returns:
        str: Текст сообщения, иначе "Image" при наличии картинки, иначе "".

    Examples:
        >>> preview_text("hi", None)
        'hi'
        >>> preview_text(None, "https://cdn/x.png")
        'Image'
        >>> preview_text("", None)
        ''
    """
    if text:
        return text
    if image_url:
        return IMAGE_PREVIEW
    return ""


def canonical_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    """Пара участников в порядке (меньший id, больший id)."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def find_by_pair(db: Session, user_a: int, user_b: int) -> Optional[Conversation]:
    """Диалог пары независимо от порядка аргументов."""
    low, high = canonical_pair(user_a, user_b)
    return (
        db.query(Conversation)
        .filter(
            Conversation.member_low_id == low,
            Conversation.member_high_id == high,
        )
        .first()
    )


def upsert_on_send(db: Session, sender_id: int, receiver_id: int, preview: str) -> Conversation:
    """Создаёт диалог пары или обновляет превью и время активности.

    Выполняет следующие действия:
    1. Ищет диалог по канонической паре
    2. Если его нет, вставляет новый внутри SAVEPOINT
    3. Если вставка упала на уникальном ограничении (параллельный запрос
       создал диалог первым), перечитывает запись и обновляет её
    4. Для существующего диалога обновляет last_message и updated_at

    Commit не выполняется: это часть транзакции отправки сообщения.

    Args:
        db (Session): Сессия базы данных.
        sender_id (int): Отправитель.
        receiver_id (int): Получатель.
        preview (str): Превью сообщения (см. preview_text).

    Returns:
        Conversation: Созданный или обновлённый диалог.
    """
    low, high = canonical_pair(sender_id, receiver_id)
    now = datetime.utcnow()

    conversation = find_by_pair(db, low, high)
    if conversation is None:
        try:
            with db.begin_nested():
                conversation = Conversation(
                    member_low_id=low,
                    member_high_id=high,
                    last_message=preview,
                    created_at=now,
                    updated_at=now,
                )
                db.add(conversation)
            logger.info(f"Conversation created for pair ({low}, {high})")
            return conversation
        except IntegrityError:
            logger.info(f"Conversation for pair ({low}, {high}) created concurrently, updating instead")
            conversation = find_by_pair(db, low, high)
            if conversation is None:
                raise

    conversation.last_message = preview
    conversation.updated_at = now
    db.flush()
    return conversation


def list_for_user(db: Session, user_id: int):
    """Диалоги пользователя, самые свежие первыми, с раскрытыми участниками."""
    return (
        db.query(Conversation)
        .options(
            joinedload(Conversation.member_low),
            joinedload(Conversation.member_high),
        )
        .filter(
            or_(
                Conversation.member_low_id == user_id,
                Conversation.member_high_id == user_id,
            )
        )
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
        .all()
    )

# Оркестрация отправки сообщения и чтения переписки
import logging
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from messenger.models.user import User
from messenger.schemas.message import MessageOut
from messenger.schemas.notification import NotificationOut
from messenger.services import (
    conversation_ledger,
    media_store,
    message_store,
    notification_service,
    user_directory,
)
from messenger.services.image_storage import ImageStorage, ImageUploadError, UploadedImage
from messenger.services.realtime import ConnectionRegistry

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "newNotification"
NEW_MESSAGE_EVENT = "newMessage"


class MessageGateway:
    """Сервис сообщений: единственное место со сквозной логикой отправки.

    Отправка выполняется строго последовательно:
    1. Загрузка изображения в хранилище (если есть)
    2. Сохранение сообщения
    3. Метаданные медиа (если было изображение)
    4. Upsert диалога пары
    5. Уведомление получателю
    6. Commit шагов 2-5 одной транзакцией
    7. Доставка newNotification и newMessage, если получатель онлайн

    Ошибка на шагах 1-6 прерывает отправку. Записи 2-5 откатываются целиком,
    а уже загруженный файл удаляется из хранилища. Ошибка доставки на шаге 7
    только логируется: сообщение уже сохранено и вернётся клиенту.

    Attributes:
        db (Session): Сессия БД текущего запроса.
        storage (ImageStorage): Хранилище изображений.
        registry (ConnectionRegistry): Реестр онлайн-соединений.

    Examples:
        >>> gateway = MessageGateway(db, get_image_storage(), get_connection_registry())
        >>> message = await gateway.send_message(current_user, receiver_id=7, text="hi")
    """

    def __init__(self, db: Session, storage: ImageStorage, registry: ConnectionRegistry):
        self.db = db
        self.storage = storage
        self.registry = registry

    # --- Чтение ---------------------------------------------------------------

    def list_users(self, caller_id: int):
        return user_directory.list_others(self.db, caller_id)

    def history(self, caller_id: int, peer_id: int):
        return message_store.history(self.db, caller_id, peer_id)

    def list_conversations(self, user_id: int):
        return conversation_ledger.list_for_user(self.db, user_id)

    # --- Отправка -------------------------------------------------------------

    async def send_message(
        self,
        sender: User,
        receiver_id: int,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> MessageOut:
        uploaded = None
        if image:
            uploaded = await run_in_threadpool(self.storage.upload, image)

        try:
            message, notification = await run_in_threadpool(
                self._persist, sender.id, sender.full_name, receiver_id, text, uploaded
            )
        except Exception:
            if uploaded:
                await self._discard_upload(uploaded)
            raise

        logger.info(f"Message {message.id} sent from user {message.sender_id} to user {receiver_id}")

        await self._fanout(receiver_id, notification, message)
        return message

    def _persist(
        self,
        sender_id: int,
        sender_name: str,
        receiver_id: int,
        text: Optional[str],
        uploaded: Optional[UploadedImage],
    ) -> Tuple[MessageOut, NotificationOut]:
        """Шаги 2-6 в потоке из пула: синхронные вызовы SQLAlchemy не блокируют event loop.

        Ответы собираются до commit: после flush у записей уже есть id и created_at,
        поэтому успешно закоммиченная отправка не зависит от повторного чтения.
        """
        image_url = uploaded.url if uploaded else None
        try:
            message = message_store.create(
                self.db,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=text,
                image_url=image_url,
            )
            if uploaded:
                media_store.record_upload(
                    self.db,
                    url=uploaded.url,
                    uploader_id=sender_id,
                    message_id=message.id,
                    storage_id=uploaded.public_id,
                )
            conversation_ledger.upsert_on_send(
                self.db,
                sender_id=sender_id,
                receiver_id=receiver_id,
                preview=conversation_ledger.preview_text(text, image_url),
            )
            notification = notification_service.create_message_notification(
                self.db,
                recipient_id=receiver_id,
                sender_name=sender_name,
            )
            message_out = MessageOut.model_validate(message)
            notification_out = NotificationOut.model_validate(notification)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return message_out, notification_out

    async def _discard_upload(self, uploaded: UploadedImage) -> None:
        try:
            await run_in_threadpool(self.storage.delete, uploaded.public_id)
        except ImageUploadError as e:
            logger.error(f"Failed to remove orphaned image {uploaded.public_id}: {e}")

    async def _fanout(self, receiver_id: int, notification: NotificationOut, message: MessageOut) -> None:
        """Пуш получателю: сначала уведомление, затем сообщение."""
        handle = self.registry.lookup(receiver_id)
        if handle is None:
            logger.debug(f"User {receiver_id} is offline, push skipped")
            return

        try:
            await handle.emit(NEW_NOTIFICATION_EVENT, notification.model_dump(mode="json", by_alias=True))
            await handle.emit(NEW_MESSAGE_EVENT, message.model_dump(mode="json", by_alias=True))
        except Exception as e:
            logger.warning(f"Realtime delivery to user {receiver_id} failed: {e}")

# Сообщения: собеседники, история, отправка, диалоги
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import logging

from messenger.core.auth import get_current_user
from messenger.core.database import get_db
from messenger.models.user import User
from messenger.schemas.conversation import ConversationOut
from messenger.schemas.message import MessageOut, SendMessageRequest
from messenger.schemas.user import UserPublic
from messenger.services.image_storage import ImageStorage, get_image_storage
from messenger.services.message_gateway import MessageGateway
from messenger.services.realtime import ConnectionRegistry, get_connection_registry

router = APIRouter(
    tags=["messages"],
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def get_message_gateway(
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> MessageGateway:
    return MessageGateway(db, storage, registry)


@router.get("/users", response_model=List[UserPublic])
def get_users_for_sidebar(
    current_user: User = Depends(get_current_user),
    gateway: MessageGateway = Depends(get_message_gateway),
):
    """Все пользователи, кроме текущего, для списка собеседников.

    Returns:
        List[UserPublic]: Пользователи без поля password.

    Raises:
        500 {"error": "Internal server error"} при ошибках базы данных.

    Examples:
        >>> # GET /api/messages/users
        >>> # Response: [{"id": 2, "fullName": "Jane", ...}, ...]
    """
    try:
        return gateway.list_users(current_user.id)
    except Exception as e:
        logger.error(f"Error in get_users_for_sidebar: {str(e)}")
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


@router.get("/conversations", response_model=List[ConversationOut])
def get_conversations(
    current_user: User = Depends(get_current_user),
    gateway: MessageGateway = Depends(get_message_gateway),
):
    """Диалоги текущего пользователя, самые свежие первыми.

    Examples:
        >>> # GET /api/messages/conversations
        >>> # Response: [{"id": 1, "members": [...], "lastMessage": "hi", ...}]
    """
    try:
        return gateway.list_conversations(current_user.id)
    except Exception as e:
        logger.error(f"Error fetching conversations: {str(e)}")
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR})


@router.get("/{peer_id}", response_model=List[MessageOut])
def get_messages(
    peer_id: int,
    current_user: User = Depends(get_current_user),
    gateway: MessageGateway = Depends(get_message_gateway),
):
    """История переписки текущего пользователя с peer_id (в обе стороны)."""
    try:
        return gateway.history(current_user.id, peer_id)
    except Exception as e:
        logger.error(f"Error in get_messages: {str(e)}")
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


@router.post("/send/{receiver_id}", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    receiver_id: int,
    payload: SendMessageRequest,
    current_user: User = Depends(get_current_user),
    gateway: MessageGateway = Depends(get_message_gateway),
):
    """Отправляет сообщение (текст и/или изображение) пользователю receiver_id.

    Args:
        receiver_id (int): Получатель сообщения.
        payload (SendMessageRequest): text и/или image (base64 data URL или URL).

    Returns:
        MessageOut: Созданное сообщение, статус 201. Ответ не зависит от того,
        удалось ли доставить сообщение получателю в реальном времени.

    Raises:
        500 {"error": "Internal server error"} при любой ошибке загрузки или записи.

    Examples:
        >>> # POST /api/messages/send/7
        >>> {"text": "hi"}
        >>> # Response 201: {"id": 1, "senderId": 3, "receiverId": 7, "text": "hi", ...}
    """
    try:
        return await gateway.send_message(
            current_user,
            receiver_id,
            text=payload.text,
            image=payload.image,
        )
    except Exception as e:
        logger.error(f"Error in send_message: {str(e)}")
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})

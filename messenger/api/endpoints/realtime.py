"""
WebSocket-канал для доставки событий в реальном времени.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from messenger.core.auth import get_websocket_user_id
from messenger.services.realtime import ConnectionRegistry, get_connection_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    user_id: Optional[int] = Depends(get_websocket_user_id),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> None:
    """
    Подключение клиента: `/ws` с заголовком `X-User-Id`, как у HTTP-роутов.

    Без известного пользователя рукопожатие отклоняется кодом 1008.

    ### События сервера
    ```json
    {"event": "getOnlineUsers", "data": [1, 2, 3]}
    {"event": "newNotification", "data": {...}}
    {"event": "newMessage", "data": {...}}
    ```

    Входящие сообщения клиента игнорируются: канал односторонний,
    отправка идёт через POST /api/messages/send/{id}.
    """
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await registry.connect(websocket, user_id)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Client {user_id} closed the socket")
    finally:
        await registry.disconnect(websocket)

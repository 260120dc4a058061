"""
Реестр WebSocket-соединений и доставка событий в реальном времени.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from messenger.config import settings

logger = logging.getLogger(__name__)

ONLINE_USERS_EVENT = "getOnlineUsers"


@dataclass
class Connection:
    """Одно WebSocket-соединение пользователя."""

    websocket: WebSocket
    user_id: int


class ConnectionHandle:
    """Адрес онлайн-пользователя, через который отправляются события.

    Событие уходит во все открытые вкладки/устройства пользователя
    в формате {"event": <имя>, "data": <payload>}.
    """

    def __init__(self, registry: "ConnectionRegistry", user_id: int):
        self.registry = registry
        self.user_id = user_id

    async def emit(self, event: str, payload: Any) -> int:
        return await self.registry.send_to_user(self.user_id, event, payload)


class ConnectionRegistry:
    """
    Соответствие user_id -> активные WebSocket-соединения.

    Изменяется только обработчиком /ws (connect/disconnect), отправка
    сообщений лишь читает его через lookup().
    """

    def __init__(self, max_connections_per_user: int = 5):
        self.max_connections_per_user = max_connections_per_user
        self._connections: Dict[int, List[Connection]] = defaultdict(list)
        self._websocket_to_connection: Dict[WebSocket, Connection] = {}
        self._lock = asyncio.Lock()

    def lookup(self, user_id: int) -> Optional[ConnectionHandle]:
        """Handle пользователя, если у него есть хотя бы одно соединение."""
        if self._connections.get(user_id):
            return ConnectionHandle(self, user_id)
        return None

    def online_user_ids(self) -> List[int]:
        return [user_id for user_id, conns in self._connections.items() if conns]

    async def connect(self, websocket: WebSocket, user_id: int) -> Connection:
        """
        Принимает и регистрирует соединение.

        При превышении лимита соединений на пользователя закрывается самое старое.
        """
        async with self._lock:
            user_connections = self._connections[user_id]
            if len(user_connections) >= self.max_connections_per_user:
                oldest = user_connections[0]
                await self._remove_connection(oldest)
                logger.info(f"Closed oldest connection for user {user_id}: connection limit reached")

            await websocket.accept()
            connection = Connection(websocket=websocket, user_id=user_id)
            self._connections[user_id].append(connection)
            self._websocket_to_connection[websocket] = connection
            logger.info(f"WebSocket connected: user {user_id}, connections={len(self._connections[user_id])}")

        await self.broadcast(ONLINE_USERS_EVENT, self.online_user_ids())
        return connection

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            connection = self._websocket_to_connection.get(websocket)
            if connection is None:
                return
            await self._remove_connection(connection, close=False)

        await self.broadcast(ONLINE_USERS_EVENT, self.online_user_ids())

    async def _remove_connection(self, connection: Connection, close: bool = True) -> None:
        """Убирает соединение из реестра (вызывать под self._lock)."""
        user_id = connection.user_id
        websocket = connection.websocket

        if user_id in self._connections:
            self._connections[user_id] = [
                c for c in self._connections[user_id] if c.websocket is not websocket
            ]
            if not self._connections[user_id]:
                del self._connections[user_id]
        self._websocket_to_connection.pop(websocket, None)
        logger.info(f"WebSocket disconnected: user {user_id}")

        if close:
            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"WebSocket for user {user_id} already closed: {e}")

    async def send_to_user(self, user_id: int, event: str, payload: Any) -> int:
        """
        Отправляет событие во все соединения пользователя.

        Returns:
            int: Количество соединений, в которые событие ушло.
        """
        sent_count = 0
        for connection in list(self._connections.get(user_id, [])):
            try:
                await connection.websocket.send_json({"event": event, "data": payload})
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send '{event}' to user {user_id}: {e}")
                async with self._lock:
                    await self._remove_connection(connection)
        return sent_count

    async def broadcast(self, event: str, payload: Any) -> int:
        sent_count = 0
        for user_id in list(self._connections.keys()):
            sent_count += await self.send_to_user(user_id, event, payload)
        return sent_count


_registry: Optional[ConnectionRegistry] = None


def get_connection_registry() -> ConnectionRegistry:
    """Общий для процесса реестр соединений (зависимость FastAPI)."""
    global _registry
    if _registry is None:
        _registry = ConnectionRegistry(max_connections_per_user=settings.WS_MAX_CONNECTIONS_PER_USER)
    return _registry

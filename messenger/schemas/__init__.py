from .user import UserPublic
from .message import SendMessageRequest, MessageOut
from .conversation import ConversationOut
from .notification import NotificationOut

__all__ = [
    "UserPublic",
    "SendMessageRequest",
    "MessageOut",
    "ConversationOut",
    "NotificationOut",
]

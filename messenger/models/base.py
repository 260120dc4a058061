# Базовая модель SQLAlchemy
from messenger.core.database import Base
from messenger.models.user import User
from messenger.models.message import Message
from messenger.models.media import Media
from messenger.models.conversation import Conversation
from messenger.models.notification import Notification

# Этот файл нужен, чтобы при запуске Base.metadata.create_all()
# все модели были зарегистрированы и таблицы были созданы.

__all__ = ["Base", "User", "Message", "Media", "Conversation", "Notification"]

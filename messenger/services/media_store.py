# messenger/services/media_store.py
from sqlalchemy.orm import Session

from messenger.models.media import Media

def record_upload(
    db: Session,
    url: str,
    uploader_id: int,
    message_id: int,
    storage_id: str,
    media_type: str = "image",
) -> Media:
    """Сохраняет метаданные загруженного файла для сообщения."""
    media = Media(
        url=url,
        uploaded_by=uploader_id,
        message_id=message_id,
        public_id=storage_id,
        media_type=media_type,
    )
    db.add(media)
    db.flush()
    return media

# Загрузка изображений сообщений в S3-совместимое хранилище
import base64
import binascii
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from messenger.config import settings

logger = logging.getLogger(__name__)


class ImageUploadError(Exception):
    """Не удалось получить или загрузить изображение."""


@dataclass
class UploadedImage:
    url: str  # публичный URL объекта
    public_id: str  # ключ объекта в бакете


def decode_data_url(image: str) -> Tuple[bytes, str]:
    """Разбирает data URL или «голый» base64.

    Examples:
        >>> decode_data_url("data:image/png;base64,aGk=")
        (b'hi', 'image/png')
    """
    content_type = "application/octet-stream"
    payload = image
    if image.startswith("data:"):
        header, _, payload = image.partition(",")
        media = header[len("data:"):].split(";")[0]
        if media:
            content_type = media
    try:
        return base64.b64decode(payload, validate=True), content_type
    except (binascii.Error, ValueError) as e:
        raise ImageUploadError(f"Invalid base64 image payload: {e}") from e


class ImageStorage:
    """Обёртка над boto3 для загрузки картинок из чата.

    Принимает изображение в трёх видах: data URL, base64 без заголовка
    или http(s) URL (файл скачивается и перезаливается в бакет).
    Возвращает публичный URL и ключ объекта, по которому файл можно удалить.

    Args:
        client: Готовый S3-клиент. Если не передан, создаётся из настроек
            при первой загрузке.
        bucket (str): Имя бакета.
        public_url (str): Базовый URL для публичных ссылок (CDN).

    Examples:
        >>> storage = ImageStorage()
        >>> uploaded = storage.upload("data:image/png;base64,iVBORw0...")
        >>> uploaded.public_id
        'chat-images/3f2a...png'
    """

    def __init__(self, client=None, bucket: Optional[str] = None, public_url: Optional[str] = None,
                 key_prefix: Optional[str] = None):
        self._client = client
        self.bucket = bucket or settings.S3_BUCKET
        self.public_url = public_url or settings.S3_PUBLIC_URL
        self.key_prefix = key_prefix if key_prefix is not None else settings.S3_KEY_PREFIX

    @property
    def client(self):
        if self._client is None:
            if not self.bucket:
                raise ImageUploadError("S3 not configured")
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT,
                region_name=settings.S3_REGION,
                aws_access_key_id=settings.S3_ACCESS_KEY,
                aws_secret_access_key=settings.S3_SECRET_KEY,
            )
        return self._client

    def _fetch_remote(self, url: str) -> Tuple[bytes, str]:
        try:
            response = requests.get(url, timeout=settings.IMAGE_FETCH_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageUploadError(f"Failed to fetch image from {url}: {e}") from e
        content_type = response.headers.get("Content-Type", "application/octet-stream").split(";")[0]
        return response.content, content_type

    def _object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if settings.S3_ENDPOINT:
            return f"{settings.S3_ENDPOINT.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def upload(self, image: str) -> UploadedImage:
        if image.startswith(("http://", "https://")):
            data, content_type = self._fetch_remote(image)
        else:
            data, content_type = decode_data_url(image)

        if not data:
            raise ImageUploadError("Empty image payload")
        if len(data) > settings.MAX_IMAGE_BYTES:
            raise ImageUploadError(f"Image too large: {len(data)} bytes")

        ext = mimetypes.guess_extension(content_type) or ""
        key = f"{self.key_prefix}{uuid.uuid4().hex}{ext}"
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            raise ImageUploadError(f"S3 upload failed: {e}") from e

        logger.info(f"Uploaded image {key} ({len(data)} bytes)")
        return UploadedImage(url=self._object_url(key), public_id=key)

    def delete(self, public_id: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as e:
            raise ImageUploadError(f"S3 delete failed: {e}") from e
        logger.info(f"Deleted image {public_id}")


_storage: Optional[ImageStorage] = None


def get_image_storage() -> ImageStorage:
    """Общий экземпляр хранилища (зависимость FastAPI)."""
    global _storage
    if _storage is None:
        _storage = ImageStorage()
    return _storage

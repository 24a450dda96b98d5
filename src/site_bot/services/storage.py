"""Object storage for uploaded photos (Cloudflare R2 through the S3 API)."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from site_bot.config import settings
from site_bot.services.resilience import with_deadline
from site_bot.services.whatsapp import MessagingTransport

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    url: str
    key: str


class ObjectStorage(ABC):
    @abstractmethod
    async def upload(
        self, data: bytes, filename: str, mime_type: str, namespace: str
    ) -> StoredObject | None:
        """Store *data* under *namespace*; ``None`` on failure."""


def _extension(filename: str, mime_type: str) -> str:
    if "." in filename:
        return filename.rsplit(".", 1)[1].lower()
    guessed = mimetypes.guess_extension(mime_type.split(";")[0].strip())
    return guessed.lstrip(".") if guessed else "jpg"


def object_key(namespace: str, filename: str, mime_type: str) -> str:
    """``<namespace>/<uuid>.<ext>``"""
    return f"{namespace}/{uuid.uuid4()}.{_extension(filename, mime_type)}"


class R2Storage(ObjectStorage):
    """Uploads to an R2 bucket; the boto3 client is created on first use."""

    def __init__(
        self,
        bucket: str | None = None,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_url: str | None = None,
        region: str | None = None,
    ) -> None:
        self._bucket = bucket or settings.r2_bucket
        self._endpoint_url = endpoint_url or settings.r2_endpoint_url
        self._access_key = access_key or settings.r2_access_key
        self._secret_key = secret_key or settings.r2_secret_key
        self._public_url = (public_url or settings.r2_public_url).rstrip("/")
        self._region = region or settings.r2_region
        self._client = None

    @property
    def configured(self) -> bool:
        return bool(self._bucket and self._endpoint_url and self._access_key)

    def _s3(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self._endpoint_url,
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
                region_name=self._region,
            )
        return self._client

    def _put(self, key: str, data: bytes, mime_type: str) -> None:
        self._s3().put_object(Bucket=self._bucket, Key=key, Body=data, ContentType=mime_type)

    async def upload(
        self, data: bytes, filename: str, mime_type: str, namespace: str
    ) -> StoredObject | None:
        if not self.configured:
            logger.warning("R2 storage not configured, dropping upload of %s", filename)
            return None

        key = object_key(namespace, filename, mime_type)
        try:
            await asyncio.to_thread(self._put, key, data, mime_type)
        except (ClientError, BotoCoreError) as exc:
            logger.exception("R2 upload failed for %s: %s", key, exc)
            return None

        logger.info("Uploaded %s (%d bytes)", key, len(data))
        return StoredObject(url=f"{self._public_url}/{key}", key=key)


class MediaUploader:
    """Copies an inbound WhatsApp attachment into object storage."""

    def __init__(
        self,
        transport: MessagingTransport,
        storage: ObjectStorage,
        timeout_ms: int | None = None,
    ) -> None:
        self._transport = transport
        self._storage = storage
        self._timeout_ms = timeout_ms or settings.upload_timeout_ms

    async def store(self, media_id: str, namespace: str) -> StoredObject | None:
        """Fetch *media_id* and upload it, bounded by the upload deadline."""
        outcome = await with_deadline(
            self._fetch_and_upload(media_id, namespace), self._timeout_ms, "image upload"
        )
        return outcome.value if outcome.ok else None

    async def _fetch_and_upload(self, media_id: str, namespace: str) -> StoredObject | None:
        media = await self._transport.fetch_media(media_id)
        if media is None:
            return None
        return await self._storage.upload(media.data, media_id, media.mime_type, namespace)

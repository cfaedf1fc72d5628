# files_manager/worker.py
"""Thumbnail generation, run out-of-band by a Celery worker.

    celery -A files_manager.worker worker --loglevel=info
"""

import io
import logging
from functools import lru_cache

from celery import Celery
from PIL import Image

from files_manager.core.config import get_settings
from files_manager.core.storage import build_content_store
from files_manager.models.database import Database
from files_manager.models.file import IMAGE, FileNode
from files_manager.services.files import THUMBNAIL_SIZES

logger = logging.getLogger(__name__)

settings = get_settings()

celery_app = Celery("files_manager", broker=settings.broker_url)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    enable_utc=True,
    timezone="UTC",
    broker_connection_retry_on_startup=True,
)


@lru_cache
def get_worker_database() -> Database:
    return Database(get_settings().database_url_resolved)


@lru_cache
def get_worker_storage():
    return build_content_store(get_settings())


def make_thumbnail(data: bytes, width: int) -> bytes:
    with Image.open(io.BytesIO(data)) as img:
        height = max(1, round(img.height * width / img.width))
        resized = img.resize((width, height))
        buffer = io.BytesIO()
        resized.save(buffer, format=img.format or "PNG")
        return buffer.getvalue()


def generate_for_node(db, storage, user_id: int, file_id: int) -> list[int]:
    if not file_id:
        raise ValueError("Missing fileId")
    if not user_id:
        raise ValueError("Missing userId")

    node = db.query(FileNode).filter(FileNode.id == int(file_id), FileNode.user_id == int(user_id)).first()
    if not node:
        raise LookupError("File not found")
    if node.type != IMAGE:
        return []

    original = storage.fetch(node.local_path)
    produced = []
    for width in THUMBNAIL_SIZES:
        # one bad size must not stop the others
        try:
            storage.store_derived(node.local_path, str(width), make_thumbnail(original, width))
            produced.append(width)
        except Exception as e:
            logger.error(f"Failed to generate thumbnail ({width}) for file {file_id}: {e}")
    logger.info(f"Generated thumbnails {produced} for file {file_id}")
    return produced


@celery_app.task(name="files_manager.generate_thumbnails")
def generate_thumbnails(user_id, file_id):
    db = get_worker_database().SessionLocal()
    try:
        return generate_for_node(db, get_worker_storage(), user_id, file_id)
    finally:
        db.close()


class CeleryThumbnailQueue:
    def __init__(self, broker_url: str | None = None):
        if broker_url:
            celery_app.conf.broker_url = broker_url

    def enqueue(self, user_id: int, file_id: int) -> None:
        generate_thumbnails.delay(user_id, file_id)

# files_manager/services/files.py
"""Folder/file tree operations.

Every read and write is scoped to the owner except ``read_content``, which
also serves public nodes to anyone. Nodes the caller may not see are reported
exactly like missing ones.
"""

import base64
import binascii
import logging
import mimetypes

from sqlalchemy import update
from sqlalchemy.orm import Session

from files_manager.core.errors import NoContentError, NotFoundError, ValidationError
from files_manager.core.storage import ContentNotFound
from files_manager.models.file import FOLDER, IMAGE, ROOT_PARENT_ID, VALID_TYPES, FileNode

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
THUMBNAIL_SIZES = (500, 250, 100)
DEFAULT_MIME_TYPE = "application/octet-stream"
MAX_ID = 2**63 - 1  # largest value an INTEGER primary key column can hold


def parse_id(value) -> int | None:
    """Return ``value`` as a node id, or None if it can't be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value)
    if isinstance(value, int) and 1 <= value <= MAX_ID:
        return value
    return None


def is_root(parent_id) -> bool:
    return parent_id in (None, ROOT_PARENT_ID, str(ROOT_PARENT_ID))


def decode_content(data: str | None) -> bytes | None:
    if not data:
        return None
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid data")


# --- create ---
def create_node(
    db: Session,
    storage,
    queue,
    owner_id: int,
    name: str | None,
    type: str | None,
    parent_id=ROOT_PARENT_ID,
    is_public: bool = False,
    content: bytes | None = None,
) -> FileNode:
    if not name:
        raise ValidationError("Missing name")
    if type not in VALID_TYPES:
        raise ValidationError("Missing type")
    if type != FOLDER and content is None:
        raise ValidationError("Missing data")

    parent_key = ROOT_PARENT_ID
    if not is_root(parent_id):
        parent_key = parse_id(parent_id)
        parent = db.get(FileNode, parent_key) if parent_key else None
        if not parent:
            raise ValidationError("Parent not found")
        # parent ownership is not checked, only existence and type
        if parent.type != FOLDER:
            raise ValidationError("Parent is not a folder")

    node = FileNode(
        user_id=owner_id,
        name=name,
        type=type,
        is_public=bool(is_public),
        parent_id=parent_key,
    )

    if type == FOLDER:
        db.add(node)
        db.commit()
        return node

    node.local_path = storage.store(content)
    db.add(node)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.discard(node.local_path)
        raise

    logger.info(f"Stored {type} {node.id} for user {owner_id}")

    if type == IMAGE:
        try:
            queue.enqueue(owner_id, node.id)
        except Exception:
            logger.exception(f"Could not enqueue thumbnails for file {node.id}")

    return node


# --- read ---
def get_node(db: Session, owner_id: int, node_id) -> FileNode:
    key = parse_id(node_id)
    if key is None:
        raise NotFoundError()
    node = db.query(FileNode).filter(FileNode.id == key, FileNode.user_id == owner_id).first()
    if not node:
        raise NotFoundError()
    return node


def list_children(db: Session, owner_id: int, parent_id=ROOT_PARENT_ID, page=0) -> list[FileNode]:
    if is_root(parent_id):
        parent_key = ROOT_PARENT_ID
    else:
        parent_key = parse_id(parent_id)
        if parent_key is None:
            return []

    page_number = parse_id(page) or 0
    offset = page_number * PAGE_SIZE
    if offset > MAX_ID:
        return []

    return (
        db.query(FileNode)
        .filter(FileNode.user_id == owner_id, FileNode.parent_id == parent_key)
        .order_by(FileNode.id)
        .offset(offset)
        .limit(PAGE_SIZE)
        .all()
    )


# --- publish / unpublish ---
def set_public(db: Session, owner_id: int, node_id, value: bool) -> FileNode:
    key = parse_id(node_id)
    if key is None:
        raise NotFoundError()

    result = db.execute(
        update(FileNode)
        .where(FileNode.id == key, FileNode.user_id == owner_id)
        .values(is_public=value)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError()
    db.commit()

    return db.get(FileNode, key, populate_existing=True)


# --- content ---
def read_content(db: Session, storage, requester_id: int | None, node_id, size=None) -> tuple[bytes, str]:
    key = parse_id(node_id)
    if key is None:
        raise NotFoundError()
    node = db.get(FileNode, key)
    if not node:
        raise NotFoundError()

    if not node.is_public and (requester_id is None or requester_id != node.user_id):
        raise NotFoundError()

    if node.type == FOLDER:
        raise NoContentError()

    suffix = None
    if size is not None:
        width = parse_id(size)
        if width not in THUMBNAIL_SIZES:
            raise ValidationError("Invalid size")
        suffix = str(width)

    if not node.local_path:
        raise NotFoundError()
    try:
        data = storage.fetch(node.local_path, suffix)
    except ContentNotFound:
        raise NotFoundError()

    mime_type, _ = mimetypes.guess_type(node.name)
    return data, mime_type or DEFAULT_MIME_TYPE

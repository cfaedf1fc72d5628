import io

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from files_manager.dependencies import (
    get_current_user_id,
    get_db,
    get_optional_user_id,
    get_storage,
    get_thumbnail_queue,
)
from files_manager.models.file import ROOT_PARENT_ID
from files_manager.services import files as files_service

router = APIRouter()


class NewFile(BaseModel):
    name: str | None = None
    type: str | None = None
    parentId: int | str | None = ROOT_PARENT_ID
    isPublic: bool = False
    data: str | None = None  # base64, required for file and image


# --- upload a new file or create a folder ---
@router.post("/files", status_code=status.HTTP_201_CREATED)
def post_upload(
    body: NewFile | None = None,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
    queue=Depends(get_thumbnail_queue),
):
    body = body or NewFile()
    node = files_service.create_node(
        db,
        storage,
        queue,
        owner_id=user_id,
        name=body.name,
        type=body.type,
        parent_id=body.parentId,
        is_public=body.isPublic,
        content=files_service.decode_content(body.data),
    )
    return node.to_dict()


# --- list a folder, 20 per page ---
@router.get("/files")
def get_index(
    parentId: str = "0",
    page: str = "0",
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    nodes = files_service.list_children(db, user_id, parent_id=parentId, page=page)
    return [node.to_dict() for node in nodes]


@router.get("/files/{file_id}")
def get_show(file_id: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return files_service.get_node(db, user_id, file_id).to_dict()


@router.put("/files/{file_id}/publish")
def put_publish(file_id: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return files_service.set_public(db, user_id, file_id, True).to_dict()


@router.put("/files/{file_id}/unpublish")
def put_unpublish(file_id: str, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return files_service.set_public(db, user_id, file_id, False).to_dict()


# --- raw content; public files need no token ---
@router.get("/files/{file_id}/data")
def get_file_data(
    file_id: str,
    size: str | None = None,
    user_id: int | None = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    data, mime_type = files_service.read_content(db, storage, user_id, file_id, size=size)
    return StreamingResponse(io.BytesIO(data), media_type=mime_type)

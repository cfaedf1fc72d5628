from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from files_manager.dependencies import get_db
from files_manager.models.file import FileNode
from files_manager.models.user import User

router = APIRouter()


@router.get("/status")
def get_status(request: Request):
    return {
        "redis": request.app.state.sessions.is_alive(),
        "db": request.app.state.database.is_alive(),
    }


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    users = db.scalar(select(func.count()).select_from(User))
    files = db.scalar(select(func.count()).select_from(FileNode))
    return {"users": users, "files": files}

# files_manager/dependencies.py
from fastapi import Depends, Header, Request

from files_manager.core.errors import AuthError
from files_manager.core.sessions import SessionStore
from files_manager.services import auth as auth_service


# --- DB session dependency ---
def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_storage(request: Request):
    return request.app.state.storage


def get_thumbnail_queue(request: Request):
    return request.app.state.thumbnail_queue


def get_settings_from_app(request: Request):
    return request.app.state.settings


# --- helpers: current user id from the X-Token header ---
def get_optional_user_id(
    x_token: str | None = Header(default=None),
    sessions: SessionStore = Depends(get_sessions),
) -> int | None:
    return auth_service.resolve_token(sessions, x_token)


def get_current_user_id(user_id: int | None = Depends(get_optional_user_id)) -> int:
    if user_id is None:
        raise AuthError()
    return user_id


def get_token(x_token: str | None = Header(default=None)) -> str | None:
    return x_token

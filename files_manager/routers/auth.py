from fastapi import APIRouter, Depends, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel
from sqlalchemy.orm import Session

from files_manager.core.sessions import SessionStore
from files_manager.dependencies import get_db, get_sessions, get_settings_from_app, get_token
from files_manager.services import auth as auth_service

router = APIRouter()

basic_auth = HTTPBasic(auto_error=False)


class NewUser(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/users", status_code=status.HTTP_201_CREATED)
def post_new_user(body: NewUser | None = None, db: Session = Depends(get_db), settings=Depends(get_settings_from_app)):
    body = body or NewUser()
    user = auth_service.register_user(db, body.email, body.password, scheme=settings.password_scheme)
    return user.to_dict()


@router.get("/connect")
def connect(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_sessions),
):
    email = credentials.username if credentials else None
    password = credentials.password if credentials else None
    token = auth_service.login(db, sessions, email, password)
    return {"token": token}


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
def disconnect(token: str | None = Depends(get_token), sessions: SessionStore = Depends(get_sessions)):
    auth_service.logout(sessions, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/me")
def get_me(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_sessions),
):
    return auth_service.get_self(db, sessions, token).to_dict()

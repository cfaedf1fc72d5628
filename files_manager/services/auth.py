# files_manager/services/auth.py
import hashlib
import hmac
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from files_manager.core.errors import AuthError, ConflictError, ValidationError
from files_manager.core.sessions import SessionStore
from files_manager.models.user import User

logger = logging.getLogger(__name__)


# --- password hashing ---
def sha1_hex(password: str) -> str:
    return hashlib.sha1(password.encode("utf-8")).hexdigest()


def hash_password(password: str, scheme: str = "sha1") -> str:
    if scheme == "werkzeug":
        return generate_password_hash(password)
    return sha1_hex(password)


def verify_password(stored: str, password: str) -> bool:
    # werkzeug hashes are "method$salt$hash"; bare hex digests are legacy sha1
    if "$" in stored:
        return check_password_hash(stored, password)
    return hmac.compare_digest(stored, sha1_hex(password))


# --- users ---
def register_user(db: Session, email: str | None, password: str | None, scheme: str = "sha1") -> User:
    if not email:
        raise ValidationError("Missing email")
    if not password:
        raise ValidationError("Missing password")

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("Already exist")

    user = User(email=email, password=hash_password(password, scheme))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration of the same email
        db.rollback()
        raise ConflictError("Already exist")

    logger.info(f"Registered user {user.id}")
    return user


# --- sessions ---
def login(db: Session, sessions: SessionStore, email: str | None, password: str | None) -> str:
    if not email or not password:
        raise AuthError()

    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(user.password, password):
        logger.info("Rejected login attempt")
        raise AuthError()

    token = sessions.create(user.id)
    logger.info(f"User {user.id} connected")
    return token


def resolve_token(sessions: SessionStore, token: str | None) -> int | None:
    return sessions.get_user_id(token)


def logout(sessions: SessionStore, token: str | None) -> None:
    user_id = resolve_token(sessions, token)
    if user_id is None:
        raise AuthError()
    sessions.delete(token)
    logger.info(f"User {user_id} disconnected")


def get_self(db: Session, sessions: SessionStore, token: str | None) -> User:
    user_id = resolve_token(sessions, token)
    if user_id is None:
        raise AuthError()
    user = db.get(User, user_id)
    if not user:
        raise AuthError()
    return user

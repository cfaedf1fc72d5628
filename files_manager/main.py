import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from files_manager.core.config import Settings, get_settings
from files_manager.core.errors import register_exception_handlers
from files_manager.core.logging_config import configure_logging
from files_manager.core.sessions import SessionStore
from files_manager.core.storage import build_content_store
from files_manager.models.database import Database
from files_manager.routers import auth, files, status

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    sessions: SessionStore | None = None,
    storage=None,
    thumbnail_queue=None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if thumbnail_queue is None:
        from files_manager.worker import CeleryThumbnailQueue

        thumbnail_queue = CeleryThumbnailQueue(settings.broker_url)

    app = FastAPI(title="files_manager")
    app.state.settings = settings
    app.state.database = database or Database(settings.database_url_resolved)
    app.state.sessions = sessions or SessionStore.from_settings(settings)
    app.state.storage = storage or build_content_store(settings)
    app.state.thumbnail_queue = thumbnail_queue

    try:
        app.state.database.create_all()
    except SQLAlchemyError as e:
        # /status reports db: false until the database comes back
        logger.error(f"Could not create tables: {e}")

    register_exception_handlers(app)

    # include our routers
    app.include_router(status.router)
    app.include_router(auth.router)
    app.include_router(files.router)

    return app

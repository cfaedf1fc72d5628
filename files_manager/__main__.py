import uvicorn

from files_manager.core.config import get_settings
from files_manager.main import create_app


def main():
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

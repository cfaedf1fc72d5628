# files_manager/core/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    root = logging.getLogger("files_manager")
    root.setLevel(level.upper())

    # one handler per process, however often the app is built
    if not any(getattr(h, "_files_manager", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._files_manager = True
        root.addHandler(handler)

    return root

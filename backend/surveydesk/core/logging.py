"""Process-wide logging setup.

Called once from the application factory. Modules keep using
`logging.getLogger(__name__)` and inherit these handlers.
"""
import logging
import os

from surveydesk.core.config import Settings

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(settings: Settings) -> logging.Logger:
    root = logging.getLogger("surveydesk")
    if root.handlers:
        return root

    root.setLevel(settings.log_level.upper())
    root.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(FORMAT))
    root.addHandler(stream)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        handler = logging.FileHandler(
            os.path.join(settings.log_dir, "surveydesk.log"), mode="a", encoding="utf-8", delay=True
        )
        handler.setFormatter(logging.Formatter(FORMAT))
        root.addHandler(handler)

    return root

import logging
import os

# --- Config ---
BASE_DIR = os.path.abspath(os.path.dirname(__file__))

SECRET_KEY = os.environ.get('LIBRARY_SECRET') or "dev-secret-change-me"
DATABASE_URL = os.environ.get('DATABASE_URL') or f"sqlite:///{os.path.join(BASE_DIR, 'library.db')}"
LOG_LEVEL = os.environ.get('LIBRARY_LOG_LEVEL') or "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def default_config():
    return {
        'SECRET_KEY': SECRET_KEY,
        'SQLALCHEMY_DATABASE_URI': DATABASE_URL,
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'LOG_LEVEL': LOG_LEVEL,
    }


def configure_logging(level="INFO"):
    """Attach a stream handler to the package logger (once)."""
    logger = logging.getLogger("locallibrary")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger

import logging
import sys
from settings.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False

def _configure_root():
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("food_delivery")
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    root.propagate = False
    _configured = True

def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger under the application namespace.
    Handlers are attached once, on first use.
    """
    _configure_root()
    return logging.getLogger(f"food_delivery.{name}")

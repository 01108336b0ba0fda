# survey_api/utils/logger.py
import logging
import sys
from survey_api.utils.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("survey_api")
logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

# One stdout handler, even when uvicorn reloads the module.
logger.handlers.clear()
_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter(LOG_FORMAT))
logger.addHandler(_handler)
logger.propagate = False

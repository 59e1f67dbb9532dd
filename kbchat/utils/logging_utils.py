import logging
import os

# One package logger shared by every kbchat module

LOG_LEVEL_ENV = 'KBCHAT_LOG_LEVEL'


def _configured_level():
   return os.environ.get(LOG_LEVEL_ENV, 'INFO').upper()


def get_logger():
   logger = logging.getLogger("kbchat")

   # Re-importing must not stack handlers
   logger.handlers.clear()
   logger.propagate = False

   handler = logging.StreamHandler()
   handler.setFormatter(logging.Formatter("\033[36mKBCHAT\033[0m: %(levelname)-8s %(message)s"))
   logger.addHandler(handler)
   logger.setLevel(_configured_level())
   return logger


def configure_third_party_logging():
   """Quieten libraries that log request-level detail at INFO"""
   logging.getLogger('asyncio').setLevel(logging.CRITICAL)

   if _configured_level() != 'DEBUG':
       for name in ('uvicorn.access', 'uvicorn.error'):
           logging.getLogger(name).setLevel(logging.WARNING)

   for name in ('boto3', 'botocore', 'urllib3', 'httpx', 'google_genai'):
       logging.getLogger(name).setLevel(logging.WARNING)


logger = get_logger()
configure_third_party_logging()

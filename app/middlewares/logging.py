# app/middlewares/logging.py

import logging
import sys
import requests
from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
BETTERSTACK_LOGS_URL = "https://in.logs.betterstack.com"


class BetterStackHandler(logging.Handler):
    """Ships formatted records to BetterStack (Logtail) over HTTP."""

    def __init__(self, api_key: str | None, url: str = BETTERSTACK_LOGS_URL):
        super().__init__()
        self.api_key = api_key
        self.url = url

    def emit(self, record):
        log_entry = self.format(record)
        try:
            response = requests.post(
                self.url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json={
                    "dt": record.created,
                    "level": record.levelname,
                    "logger": record.name,
                    "message": log_entry,
                },
                timeout=3,
            )
            # never log from inside a handler
            if response.status_code >= 300:
                sys.stderr.write(f"❌ BetterStack logging failed: {response.text}\n")
        except Exception as e:
            sys.stderr.write(f"❌ Exception while logging to BetterStack: {e}\n")


def setup_logging(level: int = logging.INFO):
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # the OpenAI SDK logs every request at INFO through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if settings.ENV == "production" and settings.BETTERSTACK_API_KEY:
        betterstack_handler = BetterStackHandler(settings.BETTERSTACK_API_KEY)
        betterstack_handler.setFormatter(formatter)
        # the handler itself posts with requests; keep urllib3 out of the loop
        logging.getLogger("urllib3").propagate = False
        logger.addHandler(betterstack_handler)

    logger.info("✅ Logging system initialized")

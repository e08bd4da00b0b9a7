# gc_app/config/logging.py

import json
import logging
from datetime import datetime, timezone

from gc_app.core.context import get_context


class JsonFormatter(logging.Formatter):
    def format(self, record):
        ctx = get_context()
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "request_id": getattr(record, "request_id", None) or ctx.request_id,
            "user_id": getattr(record, "user_id", None) or ctx.user_id,
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def configure_logging(log_level: str):
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

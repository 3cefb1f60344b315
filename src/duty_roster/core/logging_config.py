"""Central logging setup.

Development gets plain text lines; production emits one JSON object per line so
Cloud Logging can parse severity and fields.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(level: str | int = "INFO", *, json_format: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    # Flask's reloader imports the app twice; don't stack handlers.
    for handler in list(root.handlers):
        if getattr(handler, "_duty_roster", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    handler._duty_roster = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # google-cloud and urllib3 are noisy at DEBUG
    for name in ("urllib3", "google", "twilio.http_client"):
        logging.getLogger(name).setLevel(max(logging.INFO, root.level))

"""
Logging setup shared by the CLI and the app.

Modules log through `logging.getLogger(__name__)`; only entry points call
`setup_logging`.
"""

import json
import logging
from typing import Any, Dict


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: int = logging.INFO, *, json_format: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "_epl_pipeline", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    handler._epl_pipeline = True
    root.addHandler(handler)

"""
LOGGING
=======

Logs em JSON (uma linha por evento) no stdout. Campos passados em
extra={...} entram como chaves do JSON:

    logger.info("Oportunidade criada", extra={"opportunity_id": 7})
"""

import json
import logging
import sys
from typing import Any, Dict

# Atributos padrão do LogRecord; o que sobrar veio de extra={...}
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Bibliotecas barulhentas em DEBUG
QUIET_LOGGERS = ("aiosqlite", "asyncpg", "multipart")


class JSONFormatter(logging.Formatter):
    """Formata cada registro como um objeto JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update({
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        })

        return json.dumps(payload, default=str, ensure_ascii=False)


def setup_logging(level: int = logging.INFO) -> None:
    """Troca os handlers do logger raiz por um único handler JSON."""
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

"""
Logging setup for the member portal.

JSON lines in production (easy to ship from the container logs),
human-readable text everywhere else.
"""
import json
import logging
import os
from datetime import datetime, timezone

_configured = False


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    EXTRA_FIELDS = ('member_id', 'email', 'details')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key in self.EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = None, fmt: str = None) -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return

    level = level or os.getenv('LOG_LEVEL', 'INFO')
    if fmt is None:
        fmt = 'json' if os.getenv('FLASK_ENV') == 'production' else 'text'

    handler = logging.StreamHandler()
    if fmt == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s [%(name)s] %(message)s'
        ))

    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _configured = True

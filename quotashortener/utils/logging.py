"""JSON logging for the lambdas

`initialize_logging()` runs from each lambda package's `__init__.py`, so the
handler module's own loggers are configured before their first message.

Each log line is one JSON document. Anything passed through `extra=` becomes
a top-level key:

    >>> logger.info('Redirecting client to long URL. Responding with 307.',
    ...             extra={'token': 'aZ3kP9qL', 'event': 'REDIRECT_SUCCESS'})
    {"timestamp": "2025-10-15T12:00:00.000Z", "level": "INFO",
     "logger": "quotashortener.lambdas.redirect_url.app",
     "message": "Redirecting client to long URL. Responding with 307.",
     "token": "aZ3kP9qL", "event": "REDIRECT_SUCCESS"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from quotashortener.constants import ENV


# Attributes every LogRecord carries; whatever else is on a record came from `extra=`
RESERVED_ATTRS = frozenset(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Extras aren't always JSON-native (exceptions, datetimes, enums)
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Send JSON logs to stdout at `level` (default: $LOG_LEVEL, else INFO)"""
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )

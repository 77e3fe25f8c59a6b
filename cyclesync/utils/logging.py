"""
Logging for the profile store and storage backends.

Records are single-line JSON. Every record carries the storage backend and
the store document version so that a log line can be matched to the data
shape it was written against.
"""
import os
import sys
import json
import traceback
from aws_lambda_powertools import Logger

from cyclesync.models.store import CURRENT_DOCUMENT_VERSION


def single_line_trace(exc_info):
    """Render exception info as one line, or None when there is no exception."""
    if exc_info is True:
        exc_info = sys.exc_info()
    if isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
    if not isinstance(exc_info, tuple) or len(exc_info) != 3 or exc_info[0] is None:
        return None

    lines = traceback.format_exception(*exc_info)
    return ' | '.join(part.strip() for part in ''.join(lines).splitlines() if part.strip())


def _error_type(exc_info):
    if isinstance(exc_info, BaseException):
        return type(exc_info).__name__
    if isinstance(exc_info, tuple) and exc_info and exc_info[0] is not None:
        return exc_info[0].__name__
    return None


class SingleLineLogger(Logger):
    """Powertools logger that folds exception traces into the record."""

    def exception(self, message, *args, **kwargs):
        exc_info = kwargs.pop('exc_info', True)
        if exc_info is True:
            exc_info = sys.exc_info()
        extra = dict(kwargs.pop('extra', None) or {})
        extra.setdefault('error_type', _error_type(exc_info))
        extra['exception'] = single_line_trace(exc_info)
        kwargs['exc_info'] = False
        kwargs['extra'] = extra
        super().exception(message, *args, **kwargs)


logger = SingleLineLogger(
    service=os.environ.get('POWERTOOLS_SERVICE_NAME', 'cyclesync'),
    level=os.environ.get('LOG_LEVEL', 'INFO'),
    json_serializer=json.dumps,
    use_rfc3339=True
)

logger.append_keys(
    storage_backend=os.environ.get('CYCLESYNC_STORAGE', 'memory').lower(),
    document_version=CURRENT_DOCUMENT_VERSION
)


def log_exception(logger, message, exc_info=None, **kwargs):
    """
    Log the exception being handled as one error record.

    ``error_type`` is filled in from the exception unless the caller set it.
    """
    if not exc_info:
        exc_info = sys.exc_info()
    extra = dict(kwargs.pop('extra', None) or {})
    extra.setdefault('error_type', _error_type(exc_info))
    extra['exception'] = single_line_trace(exc_info)
    logger.error(message, extra=extra, **kwargs)


def log_rejection(logger, operation, reason, **context):
    """Log a store operation refused because of bad input or missing state."""
    logger.warning(f"Rejected {operation}", extra={
        'operation': operation,
        'reason': str(reason),
        **context
    })

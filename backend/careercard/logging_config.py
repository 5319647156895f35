"""
Logging configuration for the application.

Log lines carry the request path and the authenticated user id (when there is
one) so a single parse/score call can be followed across modules.
"""
import logging
import sys

from flask import has_request_context, request


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra=`` fields as key=value pairs."""

    STANDARD_FIELDS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'message', 'asctime', 'taskName'
    }

    def format(self, record):
        base_message = super().format(record)

        extra_fields = {
            k: v for k, v in record.__dict__.items()
            if k not in self.STANDARD_FIELDS and v is not None
        }
        if not extra_fields:
            return base_message

        extra_str = ' '.join(f'{k}={v}' for k, v in sorted(extra_fields.items()))
        return f'{base_message} | {extra_str}'


class RequestContextFilter(logging.Filter):
    """Attach the current request path and user id to every record."""

    def filter(self, record):
        if has_request_context():
            record.path = request.path
            user = getattr(request, 'firebase_user', None) or {}
            record.uid = user.get('uid')
        return True


def configure_logging(level=logging.INFO):
    """Configure root logging for the service."""
    formatter = ExtraFieldsFormatter(
        fmt='[%(levelname)s] %(asctime)s %(name)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for noisy in ('werkzeug', 'urllib3', 'httpx', 'openai'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

"""
Structured logging for the lead API.

configure_logging() is called once from create_app(). Every record carries the
id of the request it was emitted under (taken from X-Request-ID or generated)
and, once login_required has run, the principal's user id, so one request's
lines can be pulled out of a shared stream.

Environment variables:
    LOG_LEVEL  : Python log level name (default: INFO)
    LOG_FORMAT : "text" (default) or "json"
"""
import json
import logging
import os
import sys
import time
import uuid
from datetime import datetime, timezone

from flask import g, has_request_context, request

REQUEST_ID_HEADER = 'X-Request-ID'

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool', 'werkzeug', 'urllib3')

TEXT_FORMAT = '[%(asctime)s] %(levelname)s %(name)s [%(request_id)s] %(message)s'

request_logger = logging.getLogger('leadtracker.request')


class RequestContextFilter(logging.Filter):
    """Stamp request_id / principal_id / method / path onto every record."""

    def filter(self, record):
        if has_request_context():
            record.request_id = getattr(g, 'request_id', '-')
            record.principal_id = getattr(g, 'principal_id', None)
            record.method = request.method
            record.path = request.path
        else:
            record.request_id = '-'
            record.principal_id = None
            record.method = None
            record.path = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; request fields only when a request is active."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for field in ('request_id', 'principal_id', 'method', 'path'):
            value = getattr(record, field, None)
            if value not in (None, '-'):
                entry[field] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _resolve_level(name):
    level = getattr(logging, (name or 'INFO').upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _build_handler(level, log_format):
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    if log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def _install_request_hooks(app):
    """Assign a request id up front and log one summary line per request."""

    @app.before_request
    def _start_request():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response):
        started = getattr(g, 'request_started', None)
        elapsed_ms = int((time.perf_counter() - started) * 1000) if started else 0
        response.headers[REQUEST_ID_HEADER] = getattr(g, 'request_id', '-')
        request_logger.info("%s %s -> %d (%dms)",
                            request.method, request.path, response.status_code, elapsed_ms)
        return response


def configure_logging(app=None):
    """Route the root logger to stderr with the level/format from the environment."""
    level = _resolve_level(os.getenv('LOG_LEVEL', 'INFO'))
    log_format = os.getenv('LOG_FORMAT', 'text').lower()

    root = logging.getLogger()
    root.setLevel(level)
    # Re-initialising replaces the handler instead of stacking another one
    root.handlers.clear()
    root.addHandler(_build_handler(level, log_format))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.setLevel(level)
        _install_request_hooks(app)

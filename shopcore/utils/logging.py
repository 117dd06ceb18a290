"""
shopcore/utils/logging.py
─────────────────────────
Configures structured logging for production.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from flask import has_request_context, request, session


class RequestFormatter(logging.Formatter):
    """
    Formatter that injects request info (IP, URL, shopping session id)
    into log records when a request context is available.
    """
    def format(self, record):
        if has_request_context():
            record.url = request.url
            record.remote_addr = request.remote_addr
            record.sid = session.get('sid', '-')
        else:
            record.url = None
            record.remote_addr = None
            record.sid = '-'
        return super().format(record)


def setup_logging(app):
    """
    Configure rotating file logging: logs/app.log
    Max size: 5MB
    Backup count: 5 files
    Format: timestamp | level | module | session | message

    app.logger is the `shopcore` logger, so engine modules logging
    through `logging.getLogger(__name__)` land in the same handlers.
    """
    handlers = []

    # 1. File Logger (not under tests)
    if not app.testing:
        try:
            log_dir = os.path.join(app.root_path, '..', 'logs')
            os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=5 * 1024 * 1024,
                backupCount=5
            )
            file_handler.setFormatter(RequestFormatter(
                '%(asctime)s | %(levelname)s | %(name)s | %(remote_addr)s | %(sid)s | %(url)s | %(message)s'
            ))
            file_handler.setLevel(logging.INFO)
            handlers.append(file_handler)
        except OSError:
            pass  # Fallback to stdout only

    # 2. Stdout Logger (Critical for container / cloud logs)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
    ))
    stream_handler.setLevel(logging.INFO)
    handlers.append(stream_handler)

    for handler in handlers:
        app.logger.addHandler(handler)

    app.logger.setLevel(logging.INFO)
    app.logger.info("Shop engine startup")

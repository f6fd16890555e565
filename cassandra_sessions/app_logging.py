"""JSON logging for applications that use the session store."""

import logging
from pythonjsonlogger import jsonlogger

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """Send root log records to stderr as JSON, at ``level`` and above."""
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(h.formatter, jsonlogger.JsonFormatter)
           for h in root.handlers):
        return root
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(
        FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    ))
    root.addHandler(handler)
    return root

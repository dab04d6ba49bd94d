"""JSON log output for the CLI and any process embedding the engine."""
import logging
from typing import IO, Optional

from pythonjsonlogger import jsonlogger

from . import config

_HANDLER_NAME = 'travel_accounts.json'


def setup_logger(level: int = config.LOGLEVEL,
                 stream: Optional[IO[str]] = None) -> logging.Handler:
    """Install a JSON handler on the root logger, once per process."""
    root = logging.getLogger()
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            root.setLevel(level)
            return handler

    log_handler = logging.StreamHandler(stream)
    log_handler.set_name(_HANDLER_NAME)
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    log_handler.setFormatter(formatter)
    root.addHandler(log_handler)
    root.setLevel(level)
    return log_handler

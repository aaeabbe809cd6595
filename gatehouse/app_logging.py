import logging
from typing import Union

from pythonjsonlogger import jsonlogger


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Send JSON log lines from the root logger. Safe to call repeatedly."""
    logger = logging.getLogger()
    logger.setLevel(level)
    if any(isinstance(h.formatter, jsonlogger.JsonFormatter)
           for h in logger.handlers):
        return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)

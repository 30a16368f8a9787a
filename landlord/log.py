import logging

import logzero
from logzero import logger

from landlord.common import DEFAULT_LANDLORD_LOG_JSON

levels = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'error': logging.ERROR
}

# Client libraries log every HTTP request at INFO/DEBUG. Keep them quiet so
# landlord's own messages are readable.
noisy_loggers = [
    'azure',
    'kubernetes',
    'urllib3'
]


def log_level(name: str) -> int:
    """
    Translate a level name to a logging level. Unknown names map to INFO.

    :param name: One of debug, info or error (case insensitive).
    :type name: str
    :return: int
    """
    if not name:
        return logging.INFO
    return levels.get(name.lower(), logging.INFO)


def configure(level: str, json: bool = DEFAULT_LANDLORD_LOG_JSON,
              logfile: str = None) -> logging.Logger:
    """
    Configure the logzero default logger used throughout landlord.

    :param level: Level of logs to output. One of debug, info or error.
    :type level: str
    :param json: Emit one JSON object per log line?
        Optional. (Default: True)
    :type json: bool
    :param logfile: Also write logs to this file.
        Optional. (Default: None)
    :type logfile: str
    :return: logging.Logger
    """
    loglevel = log_level(level)
    logzero.loglevel(loglevel)
    logzero.json(enable=json)
    if logfile:
        logzero.logfile(logfile, loglevel=loglevel)

    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging configured with level %s", logging.getLevelName(loglevel))
    return logger

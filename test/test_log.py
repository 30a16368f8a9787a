import logging

import logzero

from landlord.log import configure, log_level


def test_log_level():
    assert log_level("debug") == logging.DEBUG
    assert log_level("INFO") == logging.INFO
    assert log_level("error") == logging.ERROR
    assert log_level("verbose") == logging.INFO
    assert log_level(None) == logging.INFO


def test_configure():
    logger = configure("error", json=False)
    assert logger is logzero.logger
    assert logger.level == logging.ERROR
    assert logging.getLogger("azure").level == logging.WARNING
    configure("debug", json=False)

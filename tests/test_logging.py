import logging

from fitcoach.logging import QUIET_LOGGERS, configure_logging, get_logger


def test_http_client_loggers_are_quieted():
    configure_logging("DEBUG")
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_default_logger_name():
    assert get_logger().name == "fitcoach"
    assert get_logger("fitcoach.main").name == "fitcoach.main"

import logging

from ethereum_multicall.utils.logger import NOISY_LOGGERS, console, get_logger, setup_logging


def test_setup_logging_quiets_noisy_libraries():
    setup_logging("debug")

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_logs_go_to_stderr():
    assert console.stderr is True


def test_get_logger_uses_module_name():
    assert get_logger("ethereum_multicall.core.decoder").name == "ethereum_multicall.core.decoder"

"""
Logging for the multicall client

Library modules only call get_logger(); the CLI calls setup_logging() once
so batch summaries and per-call decode warnings render through rich.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from ethereum_multicall.config.settings import LOG_LEVEL

console = Console(stderr=True)

# web3 logs every JSON-RPC request at DEBUG
NOISY_LOGGERS = ("web3", "aiohttp", "urllib3", "asyncio")


def setup_logging(level: str = LOG_LEVEL):
    """Route multicall logs to stderr through a rich handler"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                markup=True
            )
        ]
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module of the ethereum_multicall package"""
    return logging.getLogger(name)
